"""Adapters de infraestructura (LLM, prompts, texto, repositorios)."""
