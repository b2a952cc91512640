"""
Adapters hacia servicios externos (LLM) + política de reintentos.
"""
