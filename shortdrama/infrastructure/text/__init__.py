"""Utilidades de texto (chunking + normalización de uploads)."""

from .chunker import NovelChunker, plan_chunks, split_text_into_chunks
from .models import ChunkPlan, TextChunk
from .normalize import decode_text, normalize_text

__all__ = [
    "split_text_into_chunks",
    "plan_chunks",
    "NovelChunker",
    "ChunkPlan",
    "TextChunk",
    "decode_text",
    "normalize_text",
]
