"""Daemon mode — serves the last rendered page and refreshes it periodically."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from .status_page import StatusPage

logger = logging.getLogger(__name__)


async def _refresh_loop(page: StatusPage, interval: float) -> None:
    """Re-render ``page`` every ``interval`` seconds until cancelled."""
    loop = asyncio.get_running_loop()
    while True:
        await asyncio.sleep(interval)
        try:
            await loop.run_in_executor(None, page.render)
            logger.debug("Status page refreshed")
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Failed to render the status page, keeping the previous one")


def create_app(page: StatusPage, interval: float = 15.0) -> FastAPI:
    """FastAPI app serving ``page``; the first render happens at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, page.render)

        task = asyncio.create_task(_refresh_loop(page, interval), name="tinystatus-refresh")
        logger.info("Status page refresh every %gs", interval)
        try:
            yield
        finally:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    app = FastAPI(title=page.title, lifespan=lifespan)
    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        _, html = page.snapshot()
        return HTMLResponse(html)

    @app.get("/status.json")
    def status() -> dict[str, Any]:
        statuses, _ = page.snapshot()
        return statuses.to_dict()

    return app
