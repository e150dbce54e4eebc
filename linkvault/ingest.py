import logging
from datetime import datetime
from typing import Iterable, Optional

from .errors import Outcome
from .platforms import classify, default_title_for_url, placeholder_thumbnail
from .store import Store

logger = logging.getLogger(__name__)


def ingest_link(
    store: Store,
    url: str,
    *,
    title: Optional[str] = None,
    category: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
    duration: Optional[str] = None,
    tags: Iterable[str] = (),
    created_at: Optional[datetime] = None,
) -> Outcome:
    """Classify a raw URL, fill in best-effort metadata and save it with its tags.

    Tag names are checked before the link is added so that a bad name leaves
    the store untouched.
    """
    url = (url or "").strip()
    if not url:
        return Outcome.invalid("URL required")
    tag_names = [name.strip() for name in tags]
    if any(not name for name in tag_names):
        return Outcome.invalid("Tag name required")

    platform = classify(url)
    outcome = store.add_link(
        url,
        (title or "").strip() or default_title_for_url(url),
        platform,
        category,
        created_at=created_at,
        thumbnail_url=thumbnail_url
        or placeholder_thumbnail(platform, store.config.placeholder_thumbnail_template),
        duration=duration,
    )
    if not outcome.ok:
        return outcome

    link = outcome.value
    for name in tag_names:
        store.add_tag(link.id, name)
    logger.debug("Ingested %s as %s with %d tags", url, platform.value, len(tag_names))
    return outcome
