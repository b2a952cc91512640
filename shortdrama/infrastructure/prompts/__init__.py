from .loader import (
    CHUNK_SUMMARY,
    EPISODE_SCRIPT,
    OUTLINE,
    PromptLoader,
    PromptMetadata,
    get_prompt_loader,
    parse_frontmatter,
)

__all__ = [
    "CHUNK_SUMMARY",
    "EPISODE_SCRIPT",
    "OUTLINE",
    "PromptLoader",
    "PromptMetadata",
    "get_prompt_loader",
    "parse_frontmatter",
]
