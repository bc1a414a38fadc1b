"""
Configuration: a TOML file turned into a frozen ``Config``.

```toml
template = \"\"\"
Copyright (c) {year} {org}.
Author: {author}
\"\"\"
fallback_author = "Unknown"

[variables]
org = "Org"

[langs.cpp]
extensions = ["cc", "h"]
comment = "//"
```
"""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Tuple
from dataclasses import dataclass, field
from pathlib import Path
import os
import tomllib

from headercheck.errors import ConfigurationError
from headercheck.matcher import Spacing
from headercheck.syntax import SYNTAX_KINDS, CommentSyntax, CommentSyntaxRegistry, extension_of
from headercheck.template import BUILTIN_PLACEHOLDERS, LicenseTemplate

DEFAULT_FALLBACK_AUTHOR = "Unknown"
DEFAULT_WORKERS = min(8, os.cpu_count() or 1)

TOP_LEVEL_KEYS = {
    "template", "fallback_author", "newline_after_shebang", "newline_after_template",
    "workers", "year", "variables", "exclude", "langs",
}
LANG_KEYS = {"extensions", "comment", "block_start", "block_end", "syntax"}


@dataclass(frozen=True)
class LanguageConfig:
    name: str
    extensions: Tuple[str, ...]
    syntax: CommentSyntax


@dataclass(frozen=True)
class Config:
    template: LicenseTemplate
    languages: Tuple[LanguageConfig, ...] = ()
    fallback_author: str = DEFAULT_FALLBACK_AUTHOR
    newline_after_shebang: bool = True
    newline_after_template: bool = True
    workers: int = DEFAULT_WORKERS
    year: int | None = None
    variables: Mapping[str, str] = field(default_factory=dict)
    exclude: Tuple[str, ...] = ()

    @property
    def spacing(self) -> Spacing:
        return Spacing(after_prologue=self.newline_after_shebang, after_header=self.newline_after_template)

    def registry(self) -> CommentSyntaxRegistry:
        overrides: Dict[str, CommentSyntax] = {}
        for lang in self.languages:
            for ext in lang.extensions:
                overrides[ext] = lang.syntax
        return CommentSyntaxRegistry.with_defaults(overrides)


def load_config(path: Path) -> Config:
    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Config file not found: {path}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}")
    return parse_config(data)


def parse_config(data: Mapping[str, Any]) -> Config:
    unknown = set(data) - TOP_LEVEL_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown keys: {', '.join(sorted(unknown))}")

    variables = _get(data, "variables", dict, {})
    for name, value in variables.items():
        if name in BUILTIN_PLACEHOLDERS:
            raise ConfigurationError(f"{{{name}}} is filled in automatically", key=f"variables.{name}")
        if not name.isidentifier():
            raise ConfigurationError("Variable names must be identifiers", key=f"variables.{name}")
        if not isinstance(value, str):
            raise ConfigurationError(f"Expected a string, got {type(value).__name__}", key=f"variables.{name}")

    if "template" not in data:
        raise ConfigurationError("Missing required key", key="template")
    template = LicenseTemplate.parse(data["template"], variables=variables.keys())

    fallback_author = _get(data, "fallback_author", str, DEFAULT_FALLBACK_AUTHOR)
    if not fallback_author.strip():
        raise ConfigurationError("Must not be empty", key="fallback_author")

    workers = _get(data, "workers", int, DEFAULT_WORKERS)
    if workers < 1:
        raise ConfigurationError("Must be at least 1", key="workers")

    year = _get(data, "year", int, None)
    if year is not None and not 1 <= year <= 9999:
        raise ConfigurationError(f"Not a year: {year}", key="year")

    exclude = _get(data, "exclude", list, [])
    if not all(isinstance(pattern, str) for pattern in exclude):
        raise ConfigurationError("Expected a list of strings", key="exclude")

    langs = _get(data, "langs", dict, {})
    languages = tuple(_parse_language(name, entry) for name, entry in langs.items())

    return Config(
        template=template,
        languages=languages,
        fallback_author=fallback_author,
        newline_after_shebang=_get(data, "newline_after_shebang", bool, True),
        newline_after_template=_get(data, "newline_after_template", bool, True),
        workers=workers,
        year=year,
        variables=dict(variables),
        exclude=tuple(exclude),
    )


def _parse_language(name: str, entry: Any) -> LanguageConfig:
    key = f"langs.{name}"
    if not isinstance(entry, dict):
        raise ConfigurationError("Expected a table", key=key)

    unknown = set(entry) - LANG_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown keys: {', '.join(sorted(unknown))}", key=key)

    extensions: List[str] = entry.get("extensions", [])
    if (not isinstance(extensions, list) or not extensions
            or not all(isinstance(e, str) and extension_of(e) for e in extensions)):
        raise ConfigurationError("Expected a non-empty list of extensions", key=f"{key}.extensions")

    if "syntax" in entry:
        if set(entry) & {"comment", "block_start", "block_end"}:
            raise ConfigurationError("Use either 'syntax' or explicit delimiters, not both", key=key)
        kind = entry["syntax"]
        if kind not in SYNTAX_KINDS:
            raise ConfigurationError(
                f"Unknown syntax {kind!r}; known: {', '.join(sorted(SYNTAX_KINDS))}", key=f"{key}.syntax")
        syntax = SYNTAX_KINDS[kind]
    else:
        try:
            syntax = CommentSyntax(
                line_prefix=entry.get("comment"),
                block_start=entry.get("block_start"),
                block_end=entry.get("block_end"),
            )
        except ValueError as e:
            raise ConfigurationError(str(e), key=key)

    return LanguageConfig(name, tuple(extension_of(e) for e in extensions), syntax)


def _get(data: Mapping[str, Any], key: str, expected: type, default: Any) -> Any:
    if key not in data:
        return default
    value = data[key]
    # bool is an int subclass; reject it where a number is expected
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigurationError(f"Expected {expected.__name__}, got {type(value).__name__}", key=key)
    return value
