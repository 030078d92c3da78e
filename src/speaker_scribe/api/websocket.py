"""WebSocket channel exposing the pipeline worker."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from speaker_scribe.api.schemas import ErrorMessage
from speaker_scribe.api.worker import PipelineWorker
from speaker_scribe.utils import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["pipeline"])


@router.websocket("/ws")
async def websocket_pipeline(websocket: WebSocket):
    """Request/response channel for ``load``, ``run`` and ``align``.

    Each request runs in its own task, so a long ``load`` does not hold up
    other requests on the same connection.
    """
    await websocket.accept()

    client_id = id(websocket)
    logger.info(f"WebSocket connected: {client_id}")

    send_lock = asyncio.Lock()

    async def send(message: dict[str, Any]) -> None:
        async with send_lock:
            await websocket.send_json(message)

    worker = PipelineWorker(websocket.app.state.orchestrator, send)
    limit = asyncio.Semaphore(websocket.app.state.config.max_pending_requests)
    pending: set[asyncio.Task] = set()

    async def handle(message: Any) -> None:
        async with limit:
            await worker.handle(message)

    try:
        while True:
            text = await websocket.receive_text()
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                await send(ErrorMessage(message="Invalid JSON", code="INVALID_REQUEST").model_dump())
                continue

            task = asyncio.create_task(handle(message))
            pending.add(task)
            task.add_done_callback(pending.discard)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {client_id}")

    finally:
        if pending:
            # Requests are not cancellable; let them finish before the session ends
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.debug(f"Response dropped after disconnect: {result}")
        logger.info(f"WebSocket session ended: {client_id}")
