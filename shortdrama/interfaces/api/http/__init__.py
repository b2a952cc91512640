"""Adaptador HTTP (FastAPI): routers, schemas y mapeo de errores."""
