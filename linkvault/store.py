from __future__ import annotations

import logging
from datetime import datetime
from collections import Counter
from typing import Dict, List, Optional

from .errors import Outcome, SnapshotError
from .index import MembershipIndex, tag_key
from .models import Config, CustomTab, LibraryState, Link, Tag, utcnow
from .platforms import KNOWN_PLATFORMS, is_reserved_platform, normalize_platform

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class Store:
    """Canonical links, tags and custom tabs for one library.

    Mutations validate first and only then touch the records and the
    membership index, so a refused mutation leaves both unchanged. The store
    is not thread-safe: a host with several writers must serialize calls.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self._links: Dict[int, Link] = {}
        self._tags: Dict[int, Tag] = {}
        self._tabs: Dict[int, CustomTab] = {}
        self._index = MembershipIndex()
        self._next_link_id = 1
        self._next_tag_id = 1
        self._next_tab_id = 1
        self.revision = 0

    # -- snapshot -----------------------------------------------------------

    @classmethod
    def from_state(cls, state: LibraryState) -> "Store":
        store = cls(state.config.model_copy(deep=True))
        seen_tags = set()
        for link in state.links:
            if link.id in store._links:
                raise SnapshotError(f"Duplicate link id {link.id}")
            if is_reserved_platform(link.platform):
                raise SnapshotError(f"Link {link.id} has reserved platform {link.platform!r}")
            store._links[link.id] = link.model_copy(deep=True)
        for tag in state.tags:
            if tag.id in store._tags:
                raise SnapshotError(f"Duplicate tag id {tag.id}")
            if tag.link_id not in store._links:
                raise SnapshotError(f"Tag {tag.id} references missing link {tag.link_id}")
            if not _clean(tag.name):
                raise SnapshotError(f"Tag {tag.id} has a blank name")
            key = (tag.link_id, tag_key(tag.name))
            if key in seen_tags:
                raise SnapshotError(
                    f"Tag {tag.id} repeats name {tag.name!r} on link {tag.link_id}"
                )
            seen_tags.add(key)
            store._tags[tag.id] = tag.model_copy(deep=True)
        for tab in state.tabs:
            if tab.id in store._tabs:
                raise SnapshotError(f"Duplicate tab id {tab.id}")
            if not _clean(tab.name):
                raise SnapshotError(f"Tab {tab.id} has a blank name")
            missing = [lid for lid in tab.link_ids if lid not in store._links]
            if missing:
                raise SnapshotError(f"Tab {tab.id} references missing links {missing}")
            if len(set(tab.link_ids)) != len(tab.link_ids):
                raise SnapshotError(f"Tab {tab.id} lists a link more than once")
            store._tabs[tab.id] = tab.model_copy(deep=True)

        store._index = MembershipIndex.build(store._links, store._tags.values(), store._tabs.values())
        store._next_link_id = max([state.next_link_id, *(i + 1 for i in store._links)])
        store._next_tag_id = max([state.next_tag_id, *(i + 1 for i in store._tags)])
        store._next_tab_id = max([state.next_tab_id, *(i + 1 for i in store._tabs)])
        logger.info(
            "Hydrated library: %d links, %d tags, %d tabs",
            len(store._links), len(store._tags), len(store._tabs),
        )
        return store

    def to_state(self) -> LibraryState:
        return LibraryState(
            next_link_id=self._next_link_id,
            next_tag_id=self._next_tag_id,
            next_tab_id=self._next_tab_id,
            links=[l.model_copy(deep=True) for l in self._links.values()],
            tags=[t.model_copy(deep=True) for t in self._tags.values()],
            tabs=[t.model_copy(deep=True) for t in self._tabs.values()],
            config=self.config.model_copy(deep=True),
        )

    def _changed(self) -> None:
        self.revision += 1

    # -- reads --------------------------------------------------------------

    @property
    def links(self) -> List[Link]:
        """Live records in insertion order; views hold copies."""
        return list(self._links.values())

    @property
    def tags(self) -> List[Tag]:
        return list(self._tags.values())

    @property
    def tabs(self) -> List[CustomTab]:
        return list(self._tabs.values())

    @property
    def index(self) -> MembershipIndex:
        return self._index

    def link_count(self) -> int:
        return len(self._links)

    def get_link(self, link_id: int) -> Optional[Link]:
        return self._links.get(link_id)

    def get_tag(self, tag_id: int) -> Optional[Tag]:
        return self._tags.get(tag_id)

    def get_tab(self, tab_id: int) -> Optional[CustomTab]:
        return self._tabs.get(tab_id)

    def find_link_by_url(self, url: str) -> Optional[Link]:
        url = _clean(url)
        return next((l for l in self._links.values() if l.url == url), None)

    def tags_for_link(self, link_id: int) -> List[Tag]:
        return self._index.tags_for_link(link_id)

    def tabs_for_link(self, link_id: int) -> List[CustomTab]:
        ids = self._index.tab_ids_for_link(link_id)
        return [tab for tab in self._tabs.values() if tab.id in ids]

    def links_for_tab(self, tab_id: int) -> List[Link]:
        ids = set(self._index.link_ids_for_tab(tab_id))
        return [link for link in self._links.values() if link.id in ids]

    def links_for_tag(self, name: str) -> List[Link]:
        ids = self._index.link_ids_for_tag(name)
        return [link for link in self._links.values() if link.id in ids]

    def recent_links(self, limit: Optional[int] = None) -> List[Link]:
        limit = self.config.recent_limit if limit is None else limit
        ordered = sorted(self._links.values(), key=lambda l: l.created_at, reverse=True)
        return ordered[:limit]

    def recommended_links(self, limit: Optional[int] = None) -> List[Link]:
        """Links the user has looked at least recently; never-opened links come first."""
        limit = self.config.recommendation_limit if limit is None else limit
        ordered = sorted(
            self._links.values(),
            key=lambda l: (False,) if l.last_viewed_at is None else (True, l.last_viewed_at),
        )
        return ordered[:limit]

    # -- links --------------------------------------------------------------

    def add_link(
        self,
        url: str,
        title: str,
        platform: str,
        category: Optional[str] = None,
        *,
        created_at: Optional[datetime] = None,
        thumbnail_url: Optional[str] = None,
        duration: Optional[str] = None,
    ) -> Outcome:
        url, title = _clean(url), _clean(title)
        platform = normalize_platform(platform or "")
        category = _clean(category) or self.config.default_category
        if not url:
            return Outcome.invalid("URL required")
        if not title:
            return Outcome.invalid("Title required")
        if not platform:
            return Outcome.invalid("Platform required")
        if platform not in KNOWN_PLATFORMS:
            return Outcome.invalid(f"Unknown platform {platform!r}")

        link = Link(
            id=self._next_link_id,
            url=url,
            title=title,
            platform=platform,
            category=category,
            created_at=created_at or utcnow(),
            thumbnail_url=thumbnail_url,
            duration=duration,
        )
        self._links[link.id] = link
        self._index.add_link(link.id)
        self._next_link_id += 1
        self._changed()
        logger.debug("Added link %d (%s) as %s", link.id, url, platform)
        return Outcome.success(link)

    def remove_link(self, link_id: int) -> Outcome:
        link = self._links.get(link_id)
        if link is None:
            return Outcome.not_found(f"Link {link_id} not found")

        for tag in self._index.tags_for_link(link_id):
            del self._tags[tag.id]
        for tab_id in self._index.tab_ids_for_link(link_id):
            self._tabs[tab_id].link_ids.remove(link_id)
        self._index.remove_link(link_id)
        del self._links[link_id]
        self._changed()
        logger.debug("Removed link %d", link_id)
        return Outcome.success(link)

    # original surfaces call this "deleteLink"
    delete_link = remove_link

    def update_link_title(self, link_id: int, title: str) -> Outcome:
        link = self._links.get(link_id)
        if link is None:
            return Outcome.not_found(f"Link {link_id} not found")
        title = _clean(title)
        if not title:
            return Outcome.invalid("Title required")
        link.title = title
        self._changed()
        return Outcome.success(link)

    def update_link_category(self, link_id: int, category: str) -> Outcome:
        link = self._links.get(link_id)
        if link is None:
            return Outcome.not_found(f"Link {link_id} not found")
        category = _clean(category)
        if not category:
            return Outcome.invalid("Category required")
        link.category = category
        self._changed()
        return Outcome.success(link)

    def touch_last_viewed(self, link_id: int, when: Optional[datetime] = None) -> Outcome:
        link = self._links.get(link_id)
        if link is None:
            return Outcome.not_found(f"Link {link_id} not found")
        link.last_viewed_at = when or utcnow()
        self._changed()
        return Outcome.success(link)

    # -- tags ---------------------------------------------------------------

    def add_tag(self, link_id: int, name: str) -> Outcome:
        name = _clean(name)
        if not name:
            return Outcome.invalid("Tag name required")
        if link_id not in self._links:
            return Outcome.not_found(f"Link {link_id} not found")

        existing = self._index.find_tag(link_id, name)
        if existing is not None:
            logger.debug("Tag %r already on link %d", name, link_id)
            return Outcome.ignored(existing, f"Tag {existing.name!r} already on link {link_id}")

        tag = Tag(id=self._next_tag_id, name=name, link_id=link_id)
        self._tags[tag.id] = tag
        self._index.add_tag(tag)
        self._next_tag_id += 1
        self._changed()
        return Outcome.success(tag)

    def remove_tag(self, tag_id: int) -> Outcome:
        tag = self._tags.get(tag_id)
        if tag is None:
            return Outcome.not_found(f"Tag {tag_id} not found")
        del self._tags[tag_id]
        self._index.remove_tag(tag)
        self._changed()
        return Outcome.success(tag)

    def tag_names(self) -> List[str]:
        """Distinct tag names, first spelling wins, sorted case-insensitively."""
        names: Dict[str, str] = {}
        for tag in self._tags.values():
            names.setdefault(tag_key(tag.name), tag.name)
        return sorted(names.values(), key=str.casefold)

    def tag_counts(self) -> Dict[str, int]:
        """Number of links carrying each tag name, keyed by first spelling."""
        names: Dict[str, str] = {}
        counts: Counter = Counter()
        for tag in self._tags.values():
            counts[names.setdefault(tag_key(tag.name), tag.name)] += 1
        return {name: counts[name] for name in sorted(counts, key=str.casefold)}

    def category_counts(self) -> Dict[str, int]:
        """Links per category, most used first; ties keep first-seen order."""
        return dict(Counter(link.category for link in self._links.values()).most_common())

    # -- tabs ---------------------------------------------------------------

    def create_tab(
        self, name: str, icon: Optional[str] = None, description: Optional[str] = None
    ) -> Outcome:
        name = _clean(name)
        if not name:
            return Outcome.invalid("Tab name required")
        tab = CustomTab(
            id=self._next_tab_id,
            name=name,
            icon=_clean(icon) or self.config.default_icon,
            description=_clean(description) or None,
        )
        self._tabs[tab.id] = tab
        self._index.add_tab(tab.id)
        self._next_tab_id += 1
        self._changed()
        logger.debug("Created tab %d %r", tab.id, name)
        return Outcome.success(tab)

    def delete_tab(self, tab_id: int) -> Outcome:
        tab = self._tabs.pop(tab_id, None)
        if tab is None:
            return Outcome.not_found(f"Tab {tab_id} not found")
        self._index.remove_tab(tab_id)
        self._changed()
        return Outcome.success(tab)

    def add_link_to_tab(self, link_id: int, tab_id: int) -> Outcome:
        tab = self._tabs.get(tab_id)
        if tab is None:
            return Outcome.not_found(f"Tab {tab_id} not found")
        if link_id not in self._links:
            return Outcome.not_found(f"Link {link_id} not found")
        if not self._index.add_membership(link_id, tab_id):
            return Outcome.ignored(tab, f"Link {link_id} already in tab {tab_id}")
        tab.link_ids.append(link_id)
        self._changed()
        return Outcome.success(tab)

    def remove_link_from_tab(self, link_id: int, tab_id: int) -> Outcome:
        tab = self._tabs.get(tab_id)
        if tab is None:
            return Outcome.not_found(f"Tab {tab_id} not found")
        if link_id not in self._links:
            return Outcome.not_found(f"Link {link_id} not found")
        if not self._index.remove_membership(link_id, tab_id):
            return Outcome.ignored(tab, f"Link {link_id} not in tab {tab_id}")
        tab.link_ids.remove(link_id)
        self._changed()
        return Outcome.success(tab)
