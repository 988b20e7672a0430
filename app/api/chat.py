"""
Chat endpoint streaming the agent's answer as server-sent events.
"""

import json
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from ..auth import TokenPayload, get_current_wallet
from ..core.chat import get_chat_session
from ..types import ChatRequest

router = APIRouter()
_logger = structlog.stdlib.get_logger("chat")


def _sse_event(payload: Dict[str, Any]) -> str:
    encoded = jsonable_encoder(payload)
    return f"data: {json.dumps(encoded, ensure_ascii=False)}\n\n"


def _sse_done() -> str:
    return "data: [DONE]\n\n"


async def _replay(
    first: Optional[Dict[str, Any]],
    events: AsyncIterator[Dict[str, Any]],
) -> AsyncGenerator[str, None]:
    try:
        if first is not None:
            yield _sse_event(first)
            async for event in events:
                yield _sse_event(event)
    except Exception as exc:
        _logger.error("chat_stream_failed", error=str(exc), exc_info=True)
        yield _sse_event({"type": "error", "error": str(exc)})
    finally:
        yield _sse_done()


@router.post("/chat")
async def chat_endpoint(
    request: Request,
    auth: Optional[TokenPayload] = Depends(get_current_wallet),
) -> Response:
    """Run one chat turn for the signed-in wallet and stream the events."""
    if auth is None:
        return PlainTextResponse("Unauthorized", status_code=401)

    try:
        body = ChatRequest.model_validate(await request.json())
        session = get_chat_session()
        events = session.stream(body.messages, user_address=auth.sub).__aiter__()
        try:
            first = await events.__anext__()
        except StopAsyncIteration:
            first = None
    except Exception as exc:
        _logger.error("chat_request_failed", error=str(exc), exc_info=True)
        return PlainTextResponse(f"Error processing request: {exc}", status_code=500)

    return StreamingResponse(
        _replay(first, events),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
