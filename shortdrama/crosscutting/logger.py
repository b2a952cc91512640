# shortdrama/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Objetivo
--------
Loguear de forma:
- Parseable (JSON, una línea por evento)
- Correlacionable (request_id / method / path)
- Segura (redacción de secretos)
- Liviana: nunca volcar la novela completa ni prompts gigantes

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear logs como JSON
  - Enriquecer con contexto (request_id, method, path)
  - Redactar campos sensibles y resumir campos de texto masivo

Colaboradores:
  - shortdrama/context.py (ContextVars)
  - crosscutting/config.py (nivel y formato)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

# Atributos estándar de LogRecord: no se copian como campos "extra".
_RESERVED_RECORD_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


class _Sanitizer:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      _Sanitizer

    Responsabilidades:
      - Redactar claves con secretos (API keys)
      - Reemplazar campos de texto masivo por su longitud
      - Recortar strings largos y limitar profundidad

    Colaboradores:
      - JSONFormatter
    ----------------------------------------------------------------------------
    """

    SECRET_KEYS = frozenset(
        {
            "api_key",
            "apikey",
            "google_api_key",
            "x-api-key",
            "authorization",
            "token",
            "secret",
            "password",
        }
    )

    # Campos que pueden contener la novela o un prompt entero.
    BULK_TEXT_KEYS = frozenset({"novel_text", "prompt", "context_text", "content"})

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def clean(self, value: Any, *, key: str | None = None, depth: int = 0) -> Any:
        lowered = key.lower() if key else ""
        if lowered in self.SECRET_KEYS:
            return "***REDACTED***"
        if lowered in self.BULK_TEXT_KEYS and isinstance(value, str):
            return f"<text {len(value)} chars>"

        if depth > self._max_depth:
            return "***TRUNCATED***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "…(truncated)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.clean(v, key=str(k), depth=depth + 1)
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple)):
            return [self.clean(v, key=key, depth=depth + 1) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      JSONFormatter

    Responsabilidades:
      - Convertir LogRecord -> JSON
      - Adjuntar contexto de request y stacktrace si hay excepción

    Colaboradores:
      - shortdrama/context.get_context_dict()
      - _Sanitizer
    ----------------------------------------------------------------------------
    """

    def __init__(self):
        super().__init__()
        self._sanitizer = _Sanitizer()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _RESERVED_RECORD_ATTRS:
                continue
            payload[k] = self._sanitizer.clean(v, key=k)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(name: str = "shortdrama") -> logging.Logger:
    """
    Crea y configura el logger global.

    - Evita duplicar handlers en reimport
    - Respeta LOG_LEVEL / LOG_JSON; si la config todavía no es válida
      (ej: falta GOOGLE_API_KEY al importar) usa INFO + JSON
    """
    log = logging.getLogger(name)

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    use_json = os.getenv("LOG_JSON", "1").strip().lower() not in {"0", "false", "no"}

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


# Instancia global (import-friendly)
logger = setup_logger()
