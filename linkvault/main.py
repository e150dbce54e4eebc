from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .errors import Outcome, OutcomeStatus
from .filters import FilterCriteria
from .ingest import ingest_link
from .models import Link
from .storage import STATE_FILE, load_state, save_state
from .store import Store
from .view import build_view, platform_counts

app = FastAPI(title="LinkVault")

store: Store = Store.from_state(load_state(STATE_FILE))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class LinkIn(BaseModel):
    url: str
    title: Optional[str] = None
    category: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None
    tags: Optional[List[str]] = None
    allow_duplicate: bool = False


class TagIn(BaseModel):
    name: str


class TabIn(BaseModel):
    name: str
    icon: Optional[str] = None
    description: Optional[str] = None


def _persist():
    save_state(store.to_state(), STATE_FILE)


def _unwrap(outcome: Outcome):
    if outcome.status is OutcomeStatus.NOT_FOUND:
        raise HTTPException(404, outcome.message)
    if outcome.status is OutcomeStatus.INVALID_ARGUMENT:
        raise HTTPException(400, outcome.message)
    if not outcome.duplicate:
        _persist()
    return outcome.value


def _link_payload(link: Link) -> dict:
    return {
        **link.model_dump(mode="json"),
        "tags": [t.model_dump(mode="json") for t in store.tags_for_link(link.id)],
        "tab_ids": sorted(t.id for t in store.tabs_for_link(link.id)),
    }


@app.get("/api/view")
def get_view(
    scope: str = "all",
    tag: str = "",
    q: str = "",
    sort: Optional[str] = None,
    offset: int = 0,
    limit: Optional[int] = None,
):
    criteria = FilterCriteria(scope=scope, tag_name=tag or None, search_text=q or None)
    view = build_view(
        store,
        criteria,
        sort or store.config.default_sort,
        offset=offset,
        limit=limit if limit is not None else store.config.page_size,
    )
    return {
        "links": [_link_payload(l) for l in view.links],
        "counts": view.counts,
        "empty_state": view.empty_state.value,
        "total": view.total,
        "offset": view.offset,
        "limit": view.limit,
    }


@app.get("/api/links")
def list_links():
    return [_link_payload(l) for l in store.links]


@app.get("/api/links/{id}")
def get_link(id: int):
    link = store.get_link(id)
    if not link:
        raise HTTPException(404)
    return _link_payload(link)


@app.post("/api/links")
def add_link(body: LinkIn):
    existing = store.find_link_by_url(body.url)
    if existing and not body.allow_duplicate:
        return {"link": _link_payload(existing), "duplicate": True}

    link = _unwrap(
        ingest_link(
            store,
            body.url,
            title=body.title,
            category=body.category,
            thumbnail_url=body.thumbnail_url,
            duration=body.duration,
            tags=body.tags or [],
        )
    )
    return {"link": _link_payload(link), "duplicate": False}


@app.delete("/api/links/{id}")
def delete_link(id: int):
    _unwrap(store.delete_link(id))
    return {"ok": True}


@app.patch("/api/links/{id}/title")
def change_title(id: int, title: str):
    return _link_payload(_unwrap(store.update_link_title(id, title)))


@app.patch("/api/links/{id}/category")
def change_category(id: int, category: str):
    return _link_payload(_unwrap(store.update_link_category(id, category)))


@app.post("/api/links/{id}/viewed")
def mark_viewed(id: int):
    return _link_payload(_unwrap(store.touch_last_viewed(id)))


@app.post("/api/links/{id}/tags")
def add_tag(id: int, payload: TagIn):
    outcome = store.add_tag(id, payload.name)
    tag = _unwrap(outcome)
    return {"tag": tag, "duplicate": outcome.duplicate}


@app.delete("/api/tags/{id}")
def delete_tag(id: int):
    _unwrap(store.remove_tag(id))
    return {"ok": True}


@app.get("/api/tags")
def list_tags():
    return [{"name": name, "count": count} for name, count in store.tag_counts().items()]


@app.get("/api/analytics")
def analytics():
    categories = store.category_counts()
    return {
        "total_links": store.link_count(),
        "platforms": platform_counts(store.links),
        "categories": categories,
        "top_category": next(iter(categories), None),
        "tags": store.tag_counts(),
    }


@app.get("/api/tabs")
def list_tabs():
    return store.tabs


@app.post("/api/tabs")
def create_tab(payload: TabIn):
    return _unwrap(store.create_tab(payload.name, payload.icon, payload.description))


@app.delete("/api/tabs/{id}")
def delete_tab(id: int):
    _unwrap(store.delete_tab(id))
    return {"ok": True}


@app.post("/api/tabs/{tab_id}/links/{link_id}")
def add_link_to_tab(tab_id: int, link_id: int):
    outcome = store.add_link_to_tab(link_id, tab_id)
    return {"tab": _unwrap(outcome), "duplicate": outcome.duplicate}


@app.delete("/api/tabs/{tab_id}/links/{link_id}")
def remove_link_from_tab(tab_id: int, link_id: int):
    outcome = store.remove_link_from_tab(link_id, tab_id)
    return {"tab": _unwrap(outcome), "duplicate": outcome.duplicate}


@app.get("/api/recent")
def recent_links(limit: Optional[int] = None):
    return [_link_payload(l) for l in store.recent_links(limit)]


@app.get("/api/recommendations")
def recommendations(limit: Optional[int] = None):
    return [_link_payload(l) for l in store.recommended_links(limit)]


@app.get("/api/export/json")
def export_json():
    return store.to_state()


@app.post("/api/save")
def persist_state():
    _persist()
    return {"ok": True}
