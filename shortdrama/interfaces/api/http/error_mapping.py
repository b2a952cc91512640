"""
===============================================================================
TARJETA CRC - error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir DramaErrorCode de los casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.

Colaboradores:
  - application.usecases (DramaErrorCode, DramaUseCaseError)
  - crosscutting.error_responses
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from shortdrama.application.usecases import DramaErrorCode, DramaUseCaseError
from shortdrama.crosscutting.error_responses import (
    conflict,
    not_found,
    service_unavailable,
    validation_error,
)


def raise_drama_error(error: DramaUseCaseError, *, resource_id: object = None) -> NoReturn:
    """
    Traduce DramaUseCaseError -> HTTP.

      - VALIDATION_ERROR → 422
      - NOT_FOUND → 404 (resource + id)
      - CONFLICT → 409
      - SERVICE_UNAVAILABLE → 503
    """
    if error.code == DramaErrorCode.CONFLICT:
        raise conflict(error.message)
    if error.code == DramaErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == DramaErrorCode.SERVICE_UNAVAILABLE:
        raise service_unavailable(error.message)
    if error.code == DramaErrorCode.NOT_FOUND:
        raise not_found(error.resource or "Resource", str(resource_id or "unknown"))

    # Fallback: código nuevo sin mapeo explícito → 422
    raise validation_error(error.message)
