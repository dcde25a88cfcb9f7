from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class WireResult:
    app: Any
    sweep_task: Any
    teardown: Any


async def sweep_once(app: FastAPI) -> dict[str, int]:
    """Evict expired tokens and idle rate windows held on app.state."""
    tokens = await app.state.token_store.purge_expired()
    windows = await app.state.rate_limiter.purge_idle()
    return {"tokens": tokens, "windows": windows}


async def wire_app(app: FastAPI) -> WireResult:
    """Run runtime wiring for a server process.

    Starts the background sweep that keeps the in-process stores bounded and
    returns a WireResult whose teardown cancels it. Tests that only call
    wiring.create_app() will not start the task.
    """
    settings = app.state.settings
    interval = settings.sweep_interval_seconds

    async def _sweep_loop():
        while True:
            try:
                await asyncio.sleep(interval)
            except asyncio.CancelledError:
                break
            try:
                removed = await sweep_once(app)
                logger.info("gate_sweep_completed", **removed)
            except Exception as e:
                logger.exception("gate_sweep_failed", error=str(e))

    sweep_task = asyncio.create_task(_sweep_loop())
    app.state.sweep_task = sweep_task
    logger.info("sweep_task_started", interval_seconds=interval)

    async def _teardown():
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass
        logger.debug("sweep_task_stopped")

    return WireResult(app=app, sweep_task=sweep_task, teardown=_teardown)
