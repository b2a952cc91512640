"""
Entry point: `uvicorn shortdrama.main:app`.
"""

from .api.main import app

__all__ = ["app"]
