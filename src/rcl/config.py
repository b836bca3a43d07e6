"""Parser configuration.

``ParserConfig`` carries the few knobs the parser has.  It can be built
directly, from a plain dict, or from a YAML document such as::

    # rcl.yaml
    max_depth: 64
    encoding: utf-8
"""
from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# The parser spends at most eight Python frames per nesting level.
MAX_DEPTH_LIMIT: int = 100
DEFAULT_MAX_DEPTH: int = MAX_DEPTH_LIMIT

# The lexer matches ASCII bytes, so these must encode to themselves.
_ASCII_SAMPLE = "\t\n\r !\"#$%&'()*+,-./0123456789:;<=>?@AZ[\\]^_`az{|}~"


class ConfigError(ValueError):
    """Raised when a configuration document is malformed."""


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Settings for a parse.

    Parameters
    ----------
    max_depth:
        Maximum number of nested groups, argument lists, index brackets
        and ``let`` values, between 1 and ``MAX_DEPTH_LIMIT``.  Deeper
        input raises ``NestingTooDeep`` instead of exhausting the
        interpreter stack.
    encoding:
        Encoding used to convert between text and the byte buffer that
        spans refer to.  It must be ASCII-compatible (``utf-8``,
        ``latin-1``, ``cp1252``, ...); ``utf-16`` and EBCDIC code pages
        are rejected.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ConfigError(f"max_depth must be a positive integer, got {self.max_depth!r}")
        if self.max_depth > MAX_DEPTH_LIMIT:
            raise ConfigError(f"max_depth must be at most {MAX_DEPTH_LIMIT}, got {self.max_depth}")
        try:
            codecs.lookup(self.encoding)
            encoded = _ASCII_SAMPLE.encode(self.encoding)
        except (LookupError, TypeError) as exc:
            raise ConfigError(f"Unknown encoding {self.encoding!r}") from exc
        except UnicodeError:
            encoded = b""
        if encoded != _ASCII_SAMPLE.encode("ascii"):
            raise ConfigError(f"Encoding {self.encoding!r} is not ASCII-compatible")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParserConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, text: str) -> "ParserConfig":
        """Build a config from a YAML document; an empty document gives the defaults."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML configuration: {exc}") from exc
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a YAML mapping")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "ParserConfig":
        """Load a config from a YAML file."""
        config = cls.from_yaml(Path(path).read_text(encoding="utf-8"))
        logger.debug("Loaded parser config from %s: %r", path, config)
        return config
