"""Novel to short-drama outline and shooting-script service."""

__version__ = "0.1.0"
