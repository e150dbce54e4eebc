import pytest

from linkvault.store import Store
from tests.helpers import ts


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def add(store):
    """Add a link with explicit fields and return it."""

    def _add(url="https://example.com/", title="Example", platform="webpage",
             category="General", created_at=100, **kwargs):
        outcome = store.add_link(url, title, platform, category, created_at=ts(created_at), **kwargs)
        assert outcome.ok, outcome.message
        return outcome.value

    return _add


@pytest.fixture
def library(store, add):
    """A (youtube, music, Jazz solo) and B (tiktok, music, Dance), C cooking webpage."""
    a = add("https://www.youtube.com/watch?v=jz", "Jazz solo", "youtube", "Music", 100)
    b = add("https://www.tiktok.com/@dancer/video/1", "Dance", "tiktok", "Music", 200)
    c = add("https://example.com/recipes/pasta", "Pasta night", "webpage", "Cooking", 300)
    store.add_tag(a.id, "music")
    store.add_tag(b.id, "Music")
    store.add_tag(c.id, "dinner")
    return store, a, b, c
