"""
===============================================================================
TARJETA CRC - application/batching.py
===============================================================================

Componente:
  Batched Fan-out Runner (lotes concurrentes con tope fijo)

Responsabilidades:
  - Ejecutar fn(item, index) para N items en lotes secuenciales de tamaño K:
      lote b = items[b·K : min((b+1)·K, N)], todo el lote concurrente,
      y el siguiente lote arranca recién cuando terminó el anterior.
  - Devolver resultados en el orden de entrada (result[i] ↔ item[i]),
    sin importar el orden en que terminan las llamadas.
  - Exponer el progreso como stream asíncrono cancelable de BatchProgress
    (iter_batch_progress) y, encima, un helper con callback (run_in_batches).

Colaboradores:
  - asyncio (tareas + wait FIRST_COMPLETED)
  - application/outline_builder.py (fan-out de resúmenes de chunks)

Semántica de progreso:
  - `completed` cuenta terminaciones reales (orden de finalización),
    crece de 1 a N sin saltos.

Semántica de fallas:
  - Si una tarea falla, la corrida falla con esa excepción: las tareas
    pendientes del mismo lote se cancelan y no arranca ningún lote más.
  - Sin recuperación parcial: quien quiera resiliencia envuelve fn
    (ver OutlineBuilder._summarize_chunk_safe).

Cancelación:
  - Cerrar el stream (aclose() / break) cancela el lote en vuelo.
===============================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    TypeVar,
)

T = TypeVar("T")
R = TypeVar("R")

TaskFn = Callable[[T, int], Awaitable[R]]
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class BatchProgress(Generic[R]):
    """Un evento de progreso: `completed` de `total`, y qué item terminó."""

    completed: int
    total: int
    index: int
    result: R


def _validate_batch_size(batch_size: int) -> None:
    if batch_size <= 0:
        raise ValueError(f"batch_size must be > 0, got {batch_size}")


async def _drain_cancelled(pending: Iterable[asyncio.Future]) -> None:
    """Cancela y espera tareas pendientes (sin dejar tareas huérfanas)."""
    tasks = list(pending)
    for task in tasks:
        if not task.done():
            task.cancel()
    if tasks:
        # return_exceptions también marca como "retrieved" las fallas hermanas.
        await asyncio.gather(*tasks, return_exceptions=True)


async def iter_batch_progress(
    items: Sequence[T],
    batch_size: int,
    fn: TaskFn,
) -> AsyncIterator[BatchProgress[R]]:
    """
    Stream lazy y finito de BatchProgress (uno por item terminado).

    Ejemplo:
        async for event in iter_batch_progress(chunks, 3, summarize):
            results[event.index] = event.result
    """
    _validate_batch_size(batch_size)

    items = list(items)
    total = len(items)
    completed = 0

    for batch_start in range(0, total, batch_size):
        batch = items[batch_start : batch_start + batch_size]
        pending: dict[asyncio.Future, int] = {
            asyncio.ensure_future(fn(item, batch_start + offset)): batch_start + offset
            for offset, item in enumerate(batch)
        }

        try:
            while pending:
                done, _ = await asyncio.wait(
                    pending.keys(), return_when=asyncio.FIRST_COMPLETED
                )
                # Mismo despertar: orden de índice para eventos deterministas.
                for task in sorted(done, key=pending.__getitem__):
                    index = pending.pop(task)
                    result = task.result()
                    completed += 1
                    yield BatchProgress(
                        completed=completed, total=total, index=index, result=result
                    )
        finally:
            await _drain_cancelled(pending.keys())


async def run_in_batches(
    items: Sequence[T],
    batch_size: int,
    fn: TaskFn,
    on_progress: Optional[ProgressCallback] = None,
) -> List[R]:
    """
    Ejecuta todos los lotes y devuelve los resultados en orden de entrada.

    `on_progress(completed, total)` se invoca una vez por item terminado.
    """
    items = list(items)
    results: List[R] = [None] * len(items)  # type: ignore[list-item]

    stream = iter_batch_progress(items, batch_size, fn)
    try:
        async for event in stream:
            results[event.index] = event.result
            if on_progress is not None:
                on_progress(event.completed, event.total)
    finally:
        await stream.aclose()

    return results
