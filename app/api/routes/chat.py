import asyncio
import threading
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import iterate_in_threadpool, run_in_threadpool

from app.api.deps import get_chat_service, require_claims
from app.core.logging import get_logger
from app.models.auth import Claims
from app.models.request import ChatRequest
from app.services.chat_service import ChatService
from app.utils.sse import SSE_HEADERS

logger = get_logger(__name__)

router = APIRouter()

# Seconds between client disconnect checks while the relay is running
DISCONNECT_POLL_INTERVAL = 0.1


@router.post("/chat/stream")
async def chat_stream(
    request: Request,
    chat_request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
    claims: Optional[Claims] = Depends(require_claims),
):
    """Streaming chat endpoint using Server-Sent Events (SSE)."""
    if claims is not None:
        logger.debug(f"Chat stream opened by user: {claims.username or claims.subject_id}")

    # Polled by the relay (in a worker thread) before each backend read
    cancelled = threading.Event()
    events = chat_service.stream_chat(chat_request.message, is_cancelled=cancelled.is_set)

    async def watch_disconnect():
        while not await request.is_disconnected():
            await asyncio.sleep(DISCONNECT_POLL_INTERVAL)
        cancelled.set()

    async def event_generator():
        if await request.is_disconnected():
            # Nothing has run yet, so the backend is never contacted
            cancelled.set()
            events.close()
            return

        watcher = asyncio.create_task(watch_disconnect())
        try:
            async for event in iterate_in_threadpool(events):
                if cancelled.is_set():
                    # Event raced the disconnect; drop it and release the backend
                    await run_in_threadpool(events.close)
                    break
                yield event.encode()
        finally:
            cancelled.set()
            watcher.cancel()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
