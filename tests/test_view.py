from linkvault.filters import FilterCriteria
from linkvault.view import EmptyState, ViewSession, build_view, platform_counts


def test_scenario_two_links(store, add):
    add(url="https://youtu.be/one", platform="youtube", created_at=100)
    add(url="https://tiktok.com/@x/video/2", platform="tiktok", created_at=200)
    view = build_view(store, FilterCriteria(scope="all"), "newest")
    assert view.ids == [2, 1]
    assert view.counts == {"all": 2, "youtube": 1, "tiktok": 1}
    assert view.empty_state is EmptyState.NONE
    assert view.total == 2


def test_counts_cover_unfiltered_collection(library):
    store, a, b, c = library
    view = build_view(store, FilterCriteria(scope="youtube"), "newest")
    assert view.ids == [a.id]
    assert view.counts == {"all": 3, "youtube": 1, "tiktok": 1, "webpage": 1}
    assert "vimeo" not in view.counts


def test_empty_library_reports_no_data(store):
    view = build_view(store, FilterCriteria(), "newest")
    assert view.links == []
    assert view.counts == {"all": 0}
    assert view.empty_state is EmptyState.NO_DATA


def test_active_filters_without_results_report_no_match(library):
    store, *_ = library
    assert build_view(store, FilterCriteria(search_text="zzz")).empty_state is EmptyState.NO_MATCH_FOR_FILTERS
    assert build_view(store, FilterCriteria(tag_name="nope")).empty_state is EmptyState.NO_MATCH_FOR_FILTERS
    assert build_view(store, FilterCriteria(scope="vimeo")).empty_state is EmptyState.NO_MATCH_FOR_FILTERS


def test_filters_on_empty_library_report_no_match(store):
    view = build_view(store, FilterCriteria(search_text="jazz"))
    assert view.empty_state is EmptyState.NO_MATCH_FOR_FILTERS


def test_empty_tab_takes_precedence_when_alone(library):
    store, *_ = library
    tab = store.create_tab("Empty").value
    view = build_view(store, FilterCriteria.for_tab(tab.id))
    assert view.empty_state is EmptyState.EMPTY_COLLECTION_IN_TAB
    with_search = build_view(store, FilterCriteria.for_tab(tab.id, search_text="jazz"))
    assert with_search.empty_state is EmptyState.NO_MATCH_FOR_FILTERS


def test_empty_tab_in_empty_library(store):
    tab = store.create_tab("Empty").value
    view = build_view(store, FilterCriteria(scope=f"tab:{tab.id}"))
    assert view.empty_state is EmptyState.EMPTY_COLLECTION_IN_TAB


def test_populated_tab_with_no_search_match(library):
    store, a, b, c = library
    tab = store.create_tab("Faves").value
    store.add_link_to_tab(a.id, tab.id)
    view = build_view(store, FilterCriteria.for_tab(tab.id, search_text="dance"))
    assert view.empty_state is EmptyState.NO_MATCH_FOR_FILTERS


def test_clearing_filters_reproduces_default_view(library):
    store, *_ = library
    session = ViewSession(store)
    before = session.view
    filtered = session.set_tag("music")
    assert filtered.ids != before.ids
    cleared = session.set_tag(None)
    assert cleared.ids == before.ids
    assert cleared == before

    session.set_scope("tiktok")
    session.set_search("dance")
    session.set_order("oldest")
    session.clear_filters()
    session.set_order("newest")
    assert session.view == build_view(store, FilterCriteria(scope="all"), "newest")


def test_pagination_slices_after_sorting(library):
    store, a, b, c = library
    page = build_view(store, FilterCriteria(), "oldest", offset=1, limit=1)
    assert page.ids == [b.id]
    assert page.total == 3
    assert page.empty_state is EmptyState.NONE
    beyond = build_view(store, FilterCriteria(), "oldest", offset=10, limit=5)
    assert beyond.ids == []
    assert beyond.total == 3
    assert beyond.empty_state is EmptyState.NONE


def test_session_refreshes_after_successful_mutation(library):
    store, a, b, c = library
    session = ViewSession(store)
    tab = session.mutate(store.create_tab, "Later").value
    session.set_scope(tab.id)
    assert session.view.empty_state is EmptyState.EMPTY_COLLECTION_IN_TAB

    outcome = session.mutate(store.add_link_to_tab, b.id, tab.id)
    assert outcome.ok
    assert session.view.ids == [b.id]

    refused = session.mutate(store.add_link_to_tab, 999, tab.id)
    assert not refused.ok
    assert session.view.ids == [b.id]

    session.mutate(store.delete_link, b.id)
    assert session.view.empty_state is EmptyState.EMPTY_COLLECTION_IN_TAB
    assert session.view.counts == {"all": 2, "youtube": 1, "webpage": 1}


def test_session_uses_configured_defaults(store, add):
    store.config.default_sort = "oldest"
    store.config.page_size = 1
    add(url="https://a/", created_at=100)
    add(url="https://b/", created_at=200)
    session = ViewSession(store)
    assert session.view.ids == [1]
    assert session.view.total == 2


def test_platform_counts_helper(library):
    store, *_ = library
    assert platform_counts([]) == {"all": 0}
    assert platform_counts(store.links)["all"] == 3


def test_platform_total_cannot_be_shadowed():
    from linkvault.models import Link

    links = [
        Link(id=1, url="u", title="t", platform="webpage", category="c"),
        Link(id=2, url="v", title="t", platform="webpage", category="c"),
        Link(id=3, url="w", title="t", platform="all", category="c"),
    ]
    assert platform_counts(links)["all"] == 3


def test_built_view_is_a_snapshot(library):
    store, a, b, c = library
    view = build_view(store, FilterCriteria(), "newest")
    store.update_link_title(a.id, "Renamed")
    assert [l.title for l in view.links if l.id == a.id] == ["Jazz solo"]
    fresh = build_view(store, FilterCriteria(), "newest")
    assert [l.title for l in fresh.links if l.id == a.id] == ["Renamed"]
