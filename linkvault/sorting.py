from enum import Enum
from typing import Iterable, List

from .models import Link


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"


def sort_links(links: Iterable[Link], order: str = SortOrder.NEWEST) -> List[Link]:
    """Order by ``created_at``; equal timestamps keep their incoming order.

    Returns a new list. Unknown orders fall back to newest first.
    """
    try:
        order = SortOrder(order)
    except ValueError:
        order = SortOrder.NEWEST
    # sorted() stays stable with reverse=True
    return sorted(links, key=lambda l: l.created_at, reverse=order is SortOrder.NEWEST)
