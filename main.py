"""Entry point: camera presence session, dashboard server or stats printout."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

import aiohttp
import uvicorn
from dotenv import load_dotenv

from stats_module import StatsBackendError, StatsClient, compute_statistics, format_record_date
from utils.log_utils import log, log_error
from utils.settings_store import get_settings, refresh_settings


def _load_env_files() -> None:
    """Load .env files from the working directory and the repo root."""
    candidates: list[Path] = []
    cwd = Path.cwd()
    candidates.extend([cwd / "env/.env", cwd / ".env"])

    module_root = Path(__file__).resolve().parent
    candidates.extend([module_root / "env/.env", module_root / ".env"])

    for path in candidates:
        if path.exists():
            load_dotenv(dotenv_path=str(path), override=False)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hand presence timer and stats dashboard.")
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print statistics from the stats backend and exit.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the dashboard API and camera page with uvicorn.",
    )
    parser.add_argument("--host", default=None, help="Dashboard bind host (with --serve).")
    parser.add_argument("--port", type=int, default=None, help="Dashboard port (with --serve).")
    parser.add_argument("--device", type=int, default=None, help="Camera device index.")
    parser.add_argument(
        "--no-window",
        action="store_true",
        help="Run the camera session without an OpenCV preview window.",
    )
    return parser


async def _print_stats() -> int:
    settings = get_settings()
    try:
        records = await StatsClient().fetch_records()
    except (StatsBackendError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
        log_error("MAIN", "Error fetching data", exc)
        return 1

    summary = compute_statistics(records, good_threshold=int(settings.get("good_threshold_secs", 300)))
    print(f"Good Data: {summary.good_count}")
    print(f"Not Good Data: {summary.not_good_count}")
    print(f"Max: {summary.max_seconds}")
    print(f"Min: {summary.min_seconds}")
    print(f"Average: {summary.average_display}")
    print("All Recorded:")
    for record in records:
        print(f"  {record.id}  Date: {format_record_date(record.date)}  Time: {record.seconds} seconds")
    return 0


async def _run_camera(show_window: bool) -> int:
    from presence_module.session import CameraSession

    session = CameraSession(show_window=show_window)
    await session.run()
    return 0


def _serve_dashboard(host: str | None, port: int | None) -> int:
    settings = get_settings()
    host = host or os.getenv("DASHBOARD_API_HOST", "127.0.0.1")
    port = port or int(os.getenv("DASHBOARD_API_PORT", "8000"))
    log_level = str(settings.get("log_level", "INFO")).upper()
    if log_level == "DEEP":
        log_level = "DEBUG"
    log("MAIN", f"Serving dashboard on http://{host}:{port}")
    uvicorn.run(
        "api.server:app",
        host=host,
        port=port,
        log_level=log_level.lower(),
        access_log=bool(settings.get("http_access_log", False)),
    )
    return 0


def bootstrap(argv: list[str] | None = None) -> int:
    """Load configuration and run the requested mode."""
    _load_env_files()
    refresh_settings()
    args = _build_parser().parse_args(argv)
    if args.device is not None:
        os.environ["CAMERA_DEVICE_INDEX"] = str(args.device)

    if args.stats:
        return asyncio.run(_print_stats())
    if args.serve:
        return _serve_dashboard(args.host, args.port)

    try:
        return asyncio.run(_run_camera(show_window=not args.no_window))
    except KeyboardInterrupt:
        log("MAIN", "Received interrupt. Shutting down...")
        return 0


if __name__ == "__main__":
    sys.exit(bootstrap())
