"""
===============================================================================
MÓDULO: Streaming SSE (Server-Sent Events) del progreso del outline
===============================================================================

Objetivo
--------
- Emitir en tiempo real los eventos del outline (status/progress/warning)
- Enviar `done` con el outline al final, o `error`
- Desconexión del cliente: cerrar el stream (cancela los resúmenes en vuelo)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  stream_outline_events()

Responsabilidades:
  - Formatear eventos SSE
  - Cerrar el stream de origen siempre (aclose)

Colaboradores:
  - application.usecases.GenerateOutlineUseCase.stream
===============================================================================
"""

from __future__ import annotations

import json
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from fastapi.responses import StreamingResponse

from ..application.outline_builder import OutlineEvent
from .logger import logger

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def stream_outline_events(
    events: AsyncIterator[OutlineEvent], request: Request
) -> StreamingResponse:
    """
    SSE Events:
      - status / progress / warning: {"message": "...", "completed"?, "total"?}
      - done: {"message": "", "outline": [...]}
      - error: {"message": "...", "code": "..."}
    """
    return StreamingResponse(
        _generate_sse(events, request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


async def _generate_sse(
    events: AsyncIterator[OutlineEvent], request: Request
) -> AsyncGenerator[str, None]:
    try:
        async for event in events:
            if await request.is_disconnected():
                logger.info("SSE: cliente desconectado")
                return
            yield sse_event(event.kind, event.to_payload())

    except Exception as e:
        logger.error(
            "SSE stream error",
            exc_info=True,
            extra={"error_type": type(e).__name__},
        )
        yield sse_event("error", {"message": "Error durante streaming"})
    finally:
        await events.aclose()


def sse_event(event: str, data: dict) -> str:
    # SSE: cada evento termina con doble newline
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"
