"""
Name: Prompt Loader (Versioned Templates with Frontmatter)

Responsibilities:
  - Load versioned prompt templates per capability
    (chunk_summary, outline, episode_script)
  - Parse frontmatter metadata (declared inputs, system instruction)
  - Fallback to v1 if the configured version is missing
  - Cache the loaded template per instance
  - Format safely: replace only declared {tokens}; every declared input is required

Collaborators:
  - crosscutting.config.get_settings (prompt_version, prompt_lang)
  - shortdrama/prompts/{capability}/{version}_{lang}.md
  - logger (observability)

Notes:
  - Templates contain literal JSON braces; we never use str.format().
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ...crosscutting.logger import logger

PROMPTS_DIR = (Path(__file__).resolve().parents[2] / "prompts").resolve()

# Capabilities
CHUNK_SUMMARY = "chunk_summary"
OUTLINE = "outline"
EPISODE_SCRIPT = "episode_script"

DEFAULT_LANG = "zh"

_VERSION_RE = re.compile(r"^v\d+$")
_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


@dataclass
class PromptMetadata:
    """R: Parsed frontmatter metadata from a prompt file."""

    type: str = ""
    version: str = ""
    lang: str = ""
    description: str = ""
    system: str = ""
    inputs: list[str] = field(default_factory=list)


def parse_frontmatter(content: str) -> tuple[PromptMetadata, str]:
    """
    R: Parse the minimal YAML frontmatter used by our prompt files.

    Supports `key: value` scalars and a single `inputs:` list of `- name` items.

    Returns:
        Tuple of (metadata, body_without_frontmatter)
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return PromptMetadata(), content

    metadata = PromptMetadata()
    current_key = ""

    for raw_line in match.group(1).split("\n"):
        line = raw_line.rstrip()
        if not line or line.lstrip().startswith("#"):
            continue

        stripped = line.strip()
        if stripped.startswith("- "):
            if current_key == "inputs":
                metadata.inputs.append(stripped[2:].strip())
            continue

        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        current_key = key

        if key in {"type", "version", "lang", "description", "system"}:
            setattr(metadata, key, value)

    return metadata, content[match.end() :]


class PromptLoader:
    """
    R: Load and cache one capability's prompt template by version.

    Constraints:
      - No path traversal via version (v1, v2, ... only)
      - Every declared input must be provided to format()
      - Every declared input must appear as {token} in the template
    """

    def __init__(
        self,
        capability: str,
        version: str = "v1",
        lang: str = DEFAULT_LANG,
        *,
        prompts_dir: Path = PROMPTS_DIR,
    ):
        self.capability = capability
        self.version = self._validate_version(version)
        self.lang = lang
        self._prompts_dir = prompts_dir

        self._template: Optional[str] = None
        self._metadata: Optional[PromptMetadata] = None

    @property
    def metadata(self) -> PromptMetadata:
        """R: Template metadata (loads the template if needed)."""
        self.get_template()
        assert self._metadata is not None
        return self._metadata

    @property
    def system_instruction(self) -> Optional[str]:
        return self.metadata.system or None

    def get_template(self) -> str:
        """R: Return the template body with caching."""
        if self._template is None:
            self._template = self._load_with_fallback()
        return self._template

    def format(self, **values: object) -> str:
        """
        R: Replace declared {tokens} with the given values.

        Raises:
            ValueError: missing inputs or template without a declared token.
        """
        template = self.get_template()
        declared = self.metadata.inputs

        missing = [name for name in declared if name not in values]
        if missing:
            raise ValueError(
                f"Prompt '{self.capability}' missing inputs: {', '.join(missing)}"
            )

        absent = [name for name in declared if "{" + name + "}" not in template]
        if absent:
            raise ValueError(
                f"Prompt '{self.capability}' template missing tokens: {', '.join(absent)}"
            )

        unexpected = set(values) - set(declared)
        if unexpected:
            logger.warning(
                "Prompt inputs not declared in template",
                extra={"capability": self.capability, "unexpected": sorted(unexpected)},
            )

        if not declared:
            return template.strip()

        # R: Una sola pasada: un valor que contenga "{token}" queda literal.
        pattern = re.compile(r"\{(%s)\}" % "|".join(map(re.escape, declared)))
        return pattern.sub(lambda m: str(values[m.group(1)]), template).strip()

    @staticmethod
    def _validate_version(version: str) -> str:
        v = (version or "").strip()
        if not _VERSION_RE.match(v):
            raise ValueError(
                f"Invalid prompt version '{version}'. Expected v1, v2, ..."
            )
        return v

    def _template_path(self, version: str) -> Path:
        return self._prompts_dir / self.capability / f"{version}_{self.lang}.md"

    def _load_version(self, version: str) -> str:
        path = self._template_path(version)
        if not path.exists():
            raise FileNotFoundError(f"Prompt template not found: {path}")

        self._metadata, body = parse_frontmatter(path.read_text(encoding="utf-8"))

        logger.info(
            "Loaded prompt template",
            extra={
                "capability": self.capability,
                "version": version,
                "chars": len(body),
                "declared_inputs": self._metadata.inputs,
            },
        )
        return body

    def _load_with_fallback(self) -> str:
        try:
            return self._load_version(self.version)
        except FileNotFoundError:
            if self.version != "v1":
                logger.warning(
                    "Prompt template missing; falling back to v1",
                    extra={
                        "capability": self.capability,
                        "requested_version": self.version,
                    },
                )
                return self._load_version("v1")
            raise


@lru_cache
def get_prompt_loader(capability: str) -> PromptLoader:
    """R: Cached PromptLoader per capability, configured by settings."""
    from ...crosscutting.config import get_settings

    settings = get_settings()
    return PromptLoader(
        capability, version=settings.prompt_version, lang=settings.prompt_lang
    )
