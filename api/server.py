"""FastAPI server: statistics dashboard, camera page and session control."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from html import escape

import aiohttp
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, StreamingResponse
from pydantic import BaseModel

from presence_module.workflow import PresenceWorkflow, SessionAlreadyRunning
from stats_module import (
    GOOD_THRESHOLD_SECS,
    StatsBackendError,
    StatsClient,
    TimeRecord,
    compute_statistics,
    format_record_date,
)
from utils.log_utils import log, log_error
from utils.settings_store import get_settings
from video_module.renderer import placeholder_jpeg

settings = get_settings()
stats_client = StatsClient()
workflow = PresenceWorkflow()


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    yield
    if workflow.is_running():
        log("API", "Stopping camera session on shutdown")
        await workflow.stop_session()


app = FastAPI(title="Hand Presence Dashboard", version="0.1.0", lifespan=_lifespan)

_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartSessionRequest(BaseModel):
    show_window: bool = False


def _good_threshold() -> int:
    return int(settings.get("good_threshold_secs", GOOD_THRESHOLD_SECS))


async def _load_records() -> list[TimeRecord] | None:
    try:
        return await stats_client.fetch_records()
    except (StatsBackendError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
        log_error("API", "Error fetching data", exc)
        return None


def _record_row(record: TimeRecord) -> dict:
    return {"id": record.id, "date": format_record_date(record.date), "seconds": record.seconds}


@app.get("/stats")
async def stats():
    records = await _load_records()
    if records is None:
        raise HTTPException(status_code=502, detail="Stats backend unavailable")
    summary = compute_statistics(records, good_threshold=_good_threshold())
    return {"statistics": summary.as_dict(), "records": [_record_row(r) for r in records]}


@app.get("/", response_class=HTMLResponse)
async def dashboard():
    records = await _load_records()
    summary = compute_statistics(records or [], good_threshold=_good_threshold())
    if records is None:
        listing = "<p>Loading...</p>"
    else:
        items = "".join(
            f"<li>{row['id']} &nbsp; Date: {escape(row['date'])} &nbsp; Time: {row['seconds']} seconds</li>"
            for row in map(_record_row, records)
        )
        listing = f"<ul>{items}</ul>"
    return f"""<html><head><title>Dashboard</title></head><body>
<p><a href="/camera">Camera &raquo;</a></p>
<h2>Good Data: {summary.good_count}</h2>
<h2>Not Good Data: {summary.not_good_count}</h2>
<div><b>Max:</b> {summary.max_seconds}</div>
<div><b>Min:</b> {summary.min_seconds}</div>
<div><b>Average:</b> {summary.average_display}</div>
<h3>All Recorded</h3>
{listing}
</body></html>"""


@app.get("/camera", response_class=HTMLResponse)
def camera_page():
    status = workflow.status()
    line = f"{status['label'] or ''} - Timer: {status['timer']}"
    return f"""<html><head><title>Camera 1</title></head><body>
<p><a href="/">&laquo; Dashboard</a></p>
<h2>Camera 1</h2>
<img src="/camera/feed" alt="camera feed" style="width: 100%; max-width: 960px">
<p id="status">{escape(line)}</p>
<script>
setInterval(async () => {{
  const s = await (await fetch("/session/status")).json();
  document.getElementById("status").textContent = `${{s.label || ""}} - Timer: ${{s.timer}}`;
}}, 1000);
</script>
</body></html>"""


def _multipart(jpeg: bytes) -> bytes:
    return b"--frame\r\nContent-Type: image/jpeg\r\n\r\n" + jpeg + b"\r\n"


async def _feed_frames():
    """Stream session frames; an idle camera shows a single placeholder frame."""
    if not workflow.is_running():
        yield _multipart(placeholder_jpeg("Camera idle"))
        return
    interval = 1.0 / max(1, int(settings.get("feed_fps", 15)))
    waiting = placeholder_jpeg("Waiting for camera...")
    while workflow.is_running():
        yield _multipart(workflow.latest_jpeg() or waiting)
        await asyncio.sleep(interval)


@app.get("/camera/feed")
def camera_feed():
    return StreamingResponse(_feed_frames(), media_type="multipart/x-mixed-replace; boundary=frame")


@app.post("/session/start")
async def start_session(req: StartSessionRequest | None = None):
    req = req or StartSessionRequest()
    try:
        await workflow.start_session(show_window=req.show_window)
    except SessionAlreadyRunning as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {"status": "ok"}


@app.post("/session/stop")
async def stop_session():
    try:
        await workflow.stop_session()
    except Exception as exc:
        # The session already logged its own failure; stopping still succeeds.
        log_error("API", "Failed to stop camera session", exc)
    return {"status": "ok"}


@app.get("/session/status")
def session_status():
    return workflow.status()
