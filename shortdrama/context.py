"""
===============================================================================
TARJETA CRC - shortdrama/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener contexto "request-scoped" con ContextVars (async-safe).
  - Correlacionar logs sin pasar request_id por todo el stack
    (incluidas las tareas concurrentes de resumen de chunks).

Colaboradores:
  - crosscutting.middleware: setea el contexto al inicio del request.
  - crosscutting.logger: lee get_context_dict() al formatear.

Restricciones:
  - Solo strings; "" significa "no disponible".
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Setea el contexto mínimo del request."""
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, omitiendo claves vacías."""
    ctx: dict[str, str] = {}
    if val := request_id_var.get():
        ctx["request_id"] = val
    if val := http_method_var.get():
        ctx["method"] = val
    if val := http_path_var.get():
        ctx["path"] = val
    return ctx


def clear_context() -> None:
    """Limpia el contexto al final del request (evita fugas entre requests)."""
    set_request_context()
