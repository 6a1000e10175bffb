from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterator

from fastapi import Body, Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse

from routinely import (
    RoutineNotFoundError,
    RoutineStore,
    StorageError,
    ValidationError,
    build_snapshot,
    configure_logging,
    load_settings,
    now_local,
    refresh_analytics,
    workspace_root,
)
from routinely.dates import format_date_display, greeting
from routinely.timeutils import format_duration, total_scheduled_minutes

logger = logging.getLogger(__name__)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _bar(rate: float, width: int = 20) -> str:
    filled = int(round(max(0.0, min(1.0, rate)) * width))
    return "█" * filled + "░" * (width - filled)


# ── App & dependencies ────────────────────────────────────────

@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging(root=workspace_root())
    yield


app = FastAPI(title="Routinely", version="0.1.0", lifespan=lifespan)


def get_store() -> RoutineStore:
    try:
        return RoutineStore.load(workspace_root())
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@contextmanager
def _errors_as_http() -> Iterator[None]:
    """Map store errors onto HTTP status codes."""
    try:
        yield
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="; ".join(e.errors))
    except RoutineNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        logger.error("Storage failure: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


def _snapshot(store: RoutineStore):
    now = now_local(store.root)
    return build_snapshot(store.completions, store.routines, now.date(), now)


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(store: RoutineStore = Depends(get_store)) -> HTMLResponse:
    settings = load_settings(store.root)
    now = now_local(store.root)
    snap = _snapshot(store)

    rows = []
    for item in snap.today.items:
        mark = "✔" if item["isCompleted"] else "○"
        rows.append(
            f'<li class="{"done" if item["isCompleted"] else ""}">{mark} '
            f'<span class="time">{_escape(item["timeRange"])}</span> '
            f'{_escape(item["title"])} <span class="chip">{_escape(item["category"])}</span></li>'
        )
    week = "\n".join(
        f"{d.date}  {_bar(d.percentage)}  {d.completed}/{d.total}" for d in snap.weekly
    )
    insights = "".join(
        f'<div class="insight {i.type}"><b>{_escape(i.title)}</b><br>{_escape(i.description)}</div>'
        for i in snap.insights
    ) or '<p class="muted">(no insights yet)</p>'
    planned = format_duration(total_scheduled_minutes(store.routines))

    html = f"""<!doctype html>
<html><head><meta charset="utf-8"><title>Routinely</title>
<style>
body {{ font-family: system-ui, sans-serif; max-width: 760px; margin: 2em auto; }}
li.done {{ opacity: .55; }} .time {{ color: #666; }} .chip {{ font-size: .8em; background: #eee; padding: 0 .4em; border-radius: 4px; }}
.insight {{ border-left: 4px solid #888; padding: .4em .8em; margin: .5em 0; }} .insight.warning {{ border-color: #e0a100; }}
.muted {{ color: #888; }} pre {{ background: #f6f6f6; padding: .6em; }}
</style></head><body>
<h1>{_escape(greeting(now.hour))}, {_escape(settings.user_name)}</h1>
<p class="muted">{_escape(format_date_display(now.date()))} · {planned} planned</p>
<h2>Today: {snap.today.completed}/{snap.today.total} ({snap.today.percentage}%) · {_escape(snap.today.status_text)}</h2>
<ul>{''.join(rows) or '<li class="muted">(no routines)</li>'}</ul>
<h2>Streaks</h2>
<p>Current: <b>{snap.streaks.current_streak}</b> days · Best: <b>{snap.streaks.best_streak}</b> days</p>
<h2>This week</h2>
<pre>{_escape(week)}</pre>
<h2>Insights</h2>
{insights}
</body></html>"""
    return HTMLResponse(html)


# ── Routines ──────────────────────────────────────────────────

@app.get("/api/routines")
def api_list_routines(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    return {"routines": [r.to_dict() for r in store.routines]}


@app.post("/api/routines", status_code=201)
def api_create_routine(payload: dict[str, Any] = Body(...), store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    with _errors_as_http():
        routine = store.add_routine(payload)
    return {"ok": True, "routine": routine.to_dict()}


@app.put("/api/routines/{routine_id}")
def api_update_routine(routine_id: str, payload: dict[str, Any] = Body(...), store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    with _errors_as_http():
        routine = store.update_routine(routine_id, payload)
    return {"ok": True, "routine": routine.to_dict()}


@app.delete("/api/routines/{routine_id}")
def api_delete_routine(routine_id: str, store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    """Delete a routine and its completion history."""
    with _errors_as_http():
        store.delete_routine(routine_id)
    return {"ok": True, "routine_id": routine_id}


@app.post("/api/routines/{routine_id}/required")
def api_toggle_required(routine_id: str, store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    with _errors_as_http():
        routine = store.toggle_required(routine_id)
    return {"ok": True, "routine": routine.to_dict()}


@app.post("/api/routines/reorder")
def api_reorder_routines(payload: dict[str, Any] = Body(...), store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    ids = payload.get("ids")
    if not isinstance(ids, list):
        raise HTTPException(status_code=400, detail="Missing ids")
    with _errors_as_http():
        routines = store.reorder_routines([str(i) for i in ids])
    return {"ok": True, "routines": [r.to_dict() for r in routines]}


@app.post("/api/reset")
def api_reset_routines(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    """Replace routines with the defaults."""
    with _errors_as_http():
        routines = store.reset_routines()
    return {"ok": True, "count": len(routines)}


# ── Completions ───────────────────────────────────────────────

@app.get("/api/completions")
def api_list_completions(date: str | None = None, store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    records = store.completions_for(date) if date else store.completions
    return {"completions": [c.to_dict() for c in records]}


@app.post("/api/completions/toggle")
def api_toggle_completion(payload: dict[str, Any] = Body(...), store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    routine_id = payload.get("routineId") or payload.get("routine_id")
    if not routine_id:
        raise HTTPException(status_code=400, detail="Missing routineId")
    with _errors_as_http():
        record = store.toggle_task(str(routine_id), payload.get("date"))
    return {"ok": True, "completion": record.to_dict()}


@app.delete("/api/completions")
def api_clear_history(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    with _errors_as_http():
        removed = store.clear_history()
    return {"ok": True, "removed": removed}


# ── Analytics ─────────────────────────────────────────────────

@app.get("/api/today")
def api_today(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    return _snapshot(store).today.to_dict()


@app.get("/api/analytics")
def api_analytics(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    """Full analytics snapshot; also refreshes the analytics.json cache."""
    with _errors_as_http():
        snap = refresh_analytics(store.root)
    return snap.to_dict()


@app.get("/api/analytics/streaks")
def api_streaks(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    return _snapshot(store).streaks.to_dict()


@app.get("/api/analytics/insights")
def api_insights(store: RoutineStore = Depends(get_store)) -> dict[str, Any]:
    return {"insights": [i.to_dict() for i in _snapshot(store).insights]}
