"""
===============================================================================
TARJETA CRC - dependencies.py (Helpers comunes de routers)
===============================================================================

Responsabilidades:
  - Lectura de UploadFile con límite duro (anti OOM).
  - Validación del nombre de archivo (.txt).

Colaboradores:
  - crosscutting.config.get_settings
  - crosscutting.error_responses (RFC7807 factories)
===============================================================================
"""

from __future__ import annotations

from fastapi import UploadFile

from shortdrama.crosscutting.config import get_settings
from shortdrama.crosscutting.error_responses import payload_too_large, validation_error

ALLOWED_EXTENSIONS: tuple[str, ...] = (".txt",)

_READ_CHUNK_BYTES = 1024 * 1024  # 1MB


def validate_file_name(file_name: str | None) -> str:
    """Solo novelas en texto plano (.txt)."""
    name = (file_name or "").strip()
    if not name.lower().endswith(ALLOWED_EXTENSIONS):
        raise validation_error("Solo se aceptan archivos .txt")
    return name


async def read_upload_bytes(file: UploadFile, *, max_bytes: int | None = None) -> bytes:
    """
    Lee un UploadFile en memoria respetando un límite duro.

    Nota:
      - Lectura por chunks: corta apenas se supera el límite (413).
    """
    limit = max_bytes if max_bytes is not None else get_settings().max_upload_bytes
    if limit <= 0:
        return await file.read()

    data = bytearray()
    while True:
        piece = await file.read(_READ_CHUNK_BYTES)
        if not piece:
            break
        data.extend(piece)
        if len(data) > limit:
            raise payload_too_large(limit)

    return bytes(data)
