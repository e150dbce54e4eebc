from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # naive and aware timestamps must stay mutually comparable for sorting
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Link(BaseModel):
    id: int
    url: str
    title: str
    platform: str
    category: str
    created_at: datetime = Field(default_factory=utcnow)
    last_viewed_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None

    @field_validator("created_at", "last_viewed_at")
    @classmethod
    def ensure_utc(cls, value):
        return _as_utc(value)


class Tag(BaseModel):
    id: int
    name: str
    link_id: int
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, value):
        return _as_utc(value)


class CustomTab(BaseModel):
    id: int
    name: str
    icon: str = "folder"
    description: Optional[str] = None
    link_ids: List[int] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, value):
        return _as_utc(value)


class Config(BaseModel):
    default_category: str = "Uncategorized"
    default_sort: str = "newest"  # newest | oldest
    default_icon: str = "folder"
    recent_limit: int = 5
    recommendation_limit: int = 5
    page_size: Optional[int] = None
    placeholder_thumbnail_template: str = (
        "https://placehold.co/480x270?text={platform}+no+thumbnail"
    )


class LibraryState(BaseModel):
    """Persisted snapshot: flat links, tags keyed by link id, tabs with member ids."""

    next_link_id: int = 1
    next_tag_id: int = 1
    next_tab_id: int = 1
    links: List[Link] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)
    tabs: List[CustomTab] = Field(default_factory=list)
    config: Config = Field(default_factory=Config)
