from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import Outcome
from .filters import FilterCriteria, ScopeKind, criteria_active, filter_links, resolve_scope
from .models import Link
from .sorting import SortOrder, sort_links
from .store import Store

logger = logging.getLogger(__name__)


class EmptyState(str, Enum):
    NONE = "none"
    NO_DATA = "no-data"
    NO_MATCH_FOR_FILTERS = "no-match-for-filters"
    EMPTY_COLLECTION_IN_TAB = "empty-collection-in-tab"


class View(BaseModel):
    """Snapshot of one filtered, sorted page.

    ``links`` are copies, so later store mutations do not show through; build a
    new view to see them.
    """

    links: List[Link] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict)
    empty_state: EmptyState = EmptyState.NONE
    total: int = 0
    offset: int = 0
    limit: Optional[int] = None

    @property
    def ids(self) -> List[int]:
        return [link.id for link in self.links]


def platform_counts(links: List[Link]) -> Dict[str, int]:
    """``{"all": n, <platform>: n, ...}``; platforms with no links are left out."""
    counts: Dict[str, int] = {"all": 0}
    counts.update(Counter(link.platform for link in links))
    # the total is written last so no platform value can shadow it
    counts["all"] = len(links)
    return counts


def classify_empty_state(store: Store, criteria: FilterCriteria, result: List[Link]) -> EmptyState:
    if result:
        return EmptyState.NONE
    scope = resolve_scope(criteria.scope, store)
    other_criteria = criteria.tag is not None or criteria.query is not None
    if scope.kind is ScopeKind.TAB and not other_criteria:
        if not store.index.link_ids_for_tab(scope.value):
            return EmptyState.EMPTY_COLLECTION_IN_TAB
    if criteria_active(criteria, store):
        return EmptyState.NO_MATCH_FOR_FILTERS
    return EmptyState.NO_DATA


def build_view(
    store: Store,
    criteria: Optional[FilterCriteria] = None,
    order: str = SortOrder.NEWEST,
    *,
    offset: int = 0,
    limit: Optional[int] = None,
) -> View:
    criteria = criteria or FilterCriteria()
    everything = store.links
    result = sort_links(filter_links(everything, criteria, store), order)
    offset = max(offset, 0)
    page = result[offset:] if limit is None else result[offset:offset + max(limit, 0)]
    return View(
        links=[link.model_copy() for link in page],
        counts=platform_counts(everything),
        empty_state=classify_empty_state(store, criteria, result),
        total=len(result),
        offset=offset,
        limit=limit,
    )


class ViewSession:
    """Active filter selection over one store, recomputed after every change.

    Surfaces hold a session, change the selection or run a store mutation
    through it, and read ``view``; nothing is cached between calls.
    """

    def __init__(self, store: Store) -> None:
        self.store = store
        self.criteria = FilterCriteria()
        self.order: str = store.config.default_sort
        self.offset = 0
        self.limit: Optional[int] = store.config.page_size
        self.view = self.refresh()

    def refresh(self) -> View:
        self.view = build_view(
            self.store, self.criteria, self.order, offset=self.offset, limit=self.limit
        )
        return self.view

    def _update(self, **changes) -> View:
        self.criteria = self.criteria.model_copy(update=changes)
        self.offset = 0
        return self.refresh()

    def set_scope(self, scope) -> View:
        return self._update(scope=scope)

    def set_tag(self, tag_name: Optional[str]) -> View:
        return self._update(tag_name=tag_name)

    def set_search(self, search_text: Optional[str]) -> View:
        return self._update(search_text=search_text)

    def set_order(self, order: str) -> View:
        self.order = order
        return self.refresh()

    def set_page(self, offset: int, limit: Optional[int] = None) -> View:
        self.offset, self.limit = offset, limit
        return self.refresh()

    def clear_filters(self) -> View:
        self.criteria = FilterCriteria()
        self.offset = 0
        return self.refresh()

    def mutate(self, operation: Callable[..., Outcome], *args, **kwargs) -> Outcome:
        outcome = operation(*args, **kwargs)
        if outcome.ok:
            self.refresh()
        else:
            logger.debug("Mutation %s refused: %s", getattr(operation, "__name__", operation), outcome.message)
        return outcome
