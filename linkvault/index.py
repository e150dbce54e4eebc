from __future__ import annotations

from typing import Dict, Iterable, List, Set

from .models import CustomTab, Tag


def tag_key(name: str) -> str:
    return name.strip().casefold()


class MembershipIndex:
    """Bidirectional lookups between links and their tags and tabs.

    Links and tabs are referenced by id and resolved against the store's own
    records. Tags are immutable once created, so the index keeps the records
    themselves. Every store mutation patches the index in the same call that
    changes the records.
    """

    def __init__(self) -> None:
        self._tags_by_link: Dict[int, Dict[int, Tag]] = {}
        self._link_ids_by_tag_name: Dict[str, Set[int]] = {}
        self._tab_ids_by_link: Dict[int, Set[int]] = {}
        self._link_ids_by_tab: Dict[int, List[int]] = {}

    @classmethod
    def build(
        cls, link_ids: Iterable[int], tags: Iterable[Tag], tabs: Iterable[CustomTab]
    ) -> "MembershipIndex":
        index = cls()
        for link_id in link_ids:
            index.add_link(link_id)
        for tag in tags:
            index.add_tag(tag)
        for tab in tabs:
            index.add_tab(tab.id)
            for link_id in tab.link_ids:
                index.add_membership(link_id, tab.id)
        return index

    # -- links --------------------------------------------------------------

    def add_link(self, link_id: int) -> None:
        self._tags_by_link.setdefault(link_id, {})
        self._tab_ids_by_link.setdefault(link_id, set())

    def remove_link(self, link_id: int) -> None:
        for tag in list(self._tags_by_link.get(link_id, {}).values()):
            self.remove_tag(tag)
        for tab_id in list(self._tab_ids_by_link.get(link_id, ())):
            self.remove_membership(link_id, tab_id)
        self._tags_by_link.pop(link_id, None)
        self._tab_ids_by_link.pop(link_id, None)

    # -- tags ---------------------------------------------------------------

    def add_tag(self, tag: Tag) -> None:
        self._tags_by_link.setdefault(tag.link_id, {})[tag.id] = tag
        self._link_ids_by_tag_name.setdefault(tag_key(tag.name), set()).add(tag.link_id)

    def remove_tag(self, tag: Tag) -> None:
        self._tags_by_link.get(tag.link_id, {}).pop(tag.id, None)
        key = tag_key(tag.name)
        # another tag on the same link cannot share the name, so the link leaves the set
        holders = self._link_ids_by_tag_name.get(key)
        if holders is not None:
            holders.discard(tag.link_id)
            if not holders:
                del self._link_ids_by_tag_name[key]

    def tags_for_link(self, link_id: int) -> List[Tag]:
        return sorted(self._tags_by_link.get(link_id, {}).values(), key=lambda t: t.id)

    def find_tag(self, link_id: int, name: str) -> Tag | None:
        key = tag_key(name)
        for tag in self._tags_by_link.get(link_id, {}).values():
            if tag_key(tag.name) == key:
                return tag
        return None

    def link_ids_for_tag(self, name: str) -> Set[int]:
        return set(self._link_ids_by_tag_name.get(tag_key(name), ()))

    def tag_names(self) -> Set[str]:
        return set(self._link_ids_by_tag_name)

    # -- tabs ---------------------------------------------------------------

    def add_tab(self, tab_id: int) -> None:
        self._link_ids_by_tab.setdefault(tab_id, [])

    def remove_tab(self, tab_id: int) -> None:
        for link_id in self._link_ids_by_tab.pop(tab_id, []):
            self._tab_ids_by_link.get(link_id, set()).discard(tab_id)

    def add_membership(self, link_id: int, tab_id: int) -> bool:
        members = self._link_ids_by_tab.setdefault(tab_id, [])
        if link_id in members:
            return False
        members.append(link_id)
        self._tab_ids_by_link.setdefault(link_id, set()).add(tab_id)
        return True

    def remove_membership(self, link_id: int, tab_id: int) -> bool:
        members = self._link_ids_by_tab.get(tab_id, [])
        if link_id not in members:
            return False
        members.remove(link_id)
        self._tab_ids_by_link.get(link_id, set()).discard(tab_id)
        return True

    def tab_ids_for_link(self, link_id: int) -> Set[int]:
        return set(self._tab_ids_by_link.get(link_id, ()))

    def link_ids_for_tab(self, tab_id: int) -> List[int]:
        return list(self._link_ids_by_tab.get(tab_id, ()))

    def snapshot(self) -> dict:
        """Plain comparable form, used to check incremental updates against a rebuild."""
        return {
            "tags": {k: sorted(v) for k, v in self._tags_by_link.items()},
            "tag_names": {k: sorted(v) for k, v in self._link_ids_by_tag_name.items()},
            "tabs_by_link": {k: sorted(v) for k, v in self._tab_ids_by_link.items()},
            "links_by_tab": {k: list(v) for k, v in self._link_ids_by_tab.items()},
        }
