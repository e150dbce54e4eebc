from __future__ import annotations

from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Union

from pydantic import BaseModel

from .index import tag_key
from .models import Link
from .platforms import ALL_SCOPE, KNOWN_PLATFORMS, TAB_SCOPE_PREFIX
from .store import Store


class ScopeKind(str, Enum):
    ALL = "all"
    PLATFORM = "platform"
    TAB = "tab"


class ResolvedScope(NamedTuple):
    kind: ScopeKind
    value: Union[int, str, None] = None


class FilterCriteria(BaseModel):
    # int or "tab:<id>" selects a custom tab; any other string is a platform id
    scope: Union[int, str] = ALL_SCOPE
    tag_name: Optional[str] = None
    search_text: Optional[str] = None

    @classmethod
    def for_tab(cls, tab_id: int, **kwargs) -> "FilterCriteria":
        return cls(scope=tab_id, **kwargs)

    @property
    def tag(self) -> Optional[str]:
        name = (self.tag_name or "").strip()
        return name or None

    @property
    def query(self) -> Optional[str]:
        text = (self.search_text or "").strip().casefold()
        return text or None


def resolve_scope(scope: Union[int, str, None], store: Store) -> ResolvedScope:
    """Unrecognized scopes resolve to ``all`` instead of failing."""
    if isinstance(scope, bool) or scope is None:
        return ResolvedScope(ScopeKind.ALL)
    if isinstance(scope, int):
        tab_id: Optional[int] = scope
    else:
        text = scope.strip().lower()
        if not text or text == ALL_SCOPE:
            return ResolvedScope(ScopeKind.ALL)
        if not text.startswith(TAB_SCOPE_PREFIX):
            present = {link.platform for link in store.links}
            if text in KNOWN_PLATFORMS or text in present:
                return ResolvedScope(ScopeKind.PLATFORM, text)
            return ResolvedScope(ScopeKind.ALL)
        try:
            tab_id = int(text[len(TAB_SCOPE_PREFIX):])
        except ValueError:
            return ResolvedScope(ScopeKind.ALL)
    if store.get_tab(tab_id) is None:
        return ResolvedScope(ScopeKind.ALL)
    return ResolvedScope(ScopeKind.TAB, tab_id)


def _matches_search(link: Link, query: str, store: Store) -> bool:
    fields = (link.title, link.url, link.category)
    if any(query in (value or "").casefold() for value in fields):
        return True
    return any(query in tag.name.casefold() for tag in store.tags_for_link(link.id))


def filter_links(links: Sequence[Link], criteria: FilterCriteria, store: Store) -> List[Link]:
    """
    Narrow ``links`` by the criteria, in three AND-ed stages:
    - scope: all, one platform, or the members of one custom tab
      (a tab scope replaces the working set with the tab's members)
    - tag: a tag with the same name, case-insensitively
    - search: substring of title, url, category or any tag name
    Tag and search matching both compare casefolded text.
    Input order is preserved; no ranking is applied.
    """
    scope = resolve_scope(criteria.scope, store)
    if scope.kind is ScopeKind.TAB:
        result = store.links_for_tab(scope.value)
    elif scope.kind is ScopeKind.PLATFORM:
        result = [link for link in links if link.platform == scope.value]
    else:
        result = list(links)

    tag = criteria.tag
    if tag is not None:
        holders = store.index.link_ids_for_tag(tag_key(tag))
        result = [link for link in result if link.id in holders]

    query = criteria.query
    if query is not None:
        result = [link for link in result if _matches_search(link, query, store)]

    return result


def criteria_active(criteria: FilterCriteria, store: Store) -> bool:
    scope = resolve_scope(criteria.scope, store)
    return scope.kind is not ScopeKind.ALL or criteria.tag is not None or criteria.query is not None
