"""In-memory organization engine for saved links, tags and custom tabs."""

from .errors import LinkVaultError, Outcome, OutcomeStatus, SnapshotError
from .filters import FilterCriteria, filter_links
from .ingest import ingest_link
from .models import Config, CustomTab, LibraryState, Link, Tag
from .platforms import Platform, classify
from .sorting import SortOrder, sort_links
from .store import Store
from .view import EmptyState, View, ViewSession, build_view

__all__ = [
    "Config",
    "CustomTab",
    "EmptyState",
    "FilterCriteria",
    "LibraryState",
    "Link",
    "LinkVaultError",
    "Outcome",
    "OutcomeStatus",
    "Platform",
    "SnapshotError",
    "SortOrder",
    "Store",
    "Tag",
    "View",
    "ViewSession",
    "build_view",
    "classify",
    "filter_links",
    "ingest_link",
    "sort_links",
]
