"""
Comment syntax descriptors and the extension -> syntax registry.

Languages form a closed table: a new language is a new row in
``DEFAULT_EXTENSIONS`` (or a ``[langs.*]`` section in the config), never a
subclass.
"""
from __future__ import annotations
from typing import Dict, Mapping, Tuple
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from headercheck.errors import UnsupportedFileType


@dataclass(frozen=True)
class CommentSyntax:
    line_prefix: str | None = None
    block_start: str | None = None
    block_end: str | None = None

    def __post_init__(self):
        for name in ("line_prefix", "block_start", "block_end"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, str) or not value.strip()):
                raise ValueError(f"{name} must be a non-empty string, got {value!r}")
        if (self.block_start is None) != (self.block_end is None):
            raise ValueError("block_start and block_end must be given together")
        if self.line_prefix is None and self.block_start is None:
            raise ValueError("A comment syntax needs a line prefix or a block pair")

    @property
    def has_block(self) -> bool:
        return self.block_start is not None


##################################################################################################
# Built-in syntax kinds
##################################################################################################

SYNTAX_KINDS: Mapping[str, CommentSyntax] = MappingProxyType({
    "hash":      CommentSyntax(line_prefix="#"),
    "slash":     CommentSyntax(line_prefix="//"),
    "dash":      CommentSyntax(line_prefix="--"),
    "semicolon": CommentSyntax(line_prefix=";"),
    "percent":   CommentSyntax(line_prefix="%"),
    "c-block":   CommentSyntax(block_start="/*", block_end="*/"),
    "xml":       CommentSyntax(block_start="<!--", block_end="-->"),
    "ocaml":     CommentSyntax(block_start="(*", block_end="*)"),
})

DEFAULT_EXTENSIONS: Mapping[str, str] = MappingProxyType({
    # -- Hash comments --
    "py":     "hash",
    "pyi":    "hash",
    "sh":     "hash",
    "bash":   "hash",
    "zsh":    "hash",
    "fish":   "hash",
    "rb":     "hash",
    "pl":     "hash",
    "pm":     "hash",
    "r":      "hash",
    "R":      "hash",
    "jl":     "hash",
    "nim":    "hash",
    "cmake":  "hash",
    "yaml":   "hash",
    "yml":    "hash",
    "toml":   "hash",
    "tf":     "hash",
    "ps1":    "hash",

    # -- Slash comments --
    "c":      "slash",
    "h":      "slash",
    "cc":     "slash",
    "cpp":    "slash",
    "cxx":    "slash",
    "hh":     "slash",
    "hpp":    "slash",
    "hxx":    "slash",
    "m":      "slash",
    "mm":     "slash",
    "rs":     "slash",
    "go":     "slash",
    "java":   "slash",
    "kt":     "slash",
    "kts":    "slash",
    "scala":  "slash",
    "groovy": "slash",
    "gradle": "slash",
    "js":     "slash",
    "mjs":    "slash",
    "cjs":    "slash",
    "jsx":    "slash",
    "ts":     "slash",
    "tsx":    "slash",
    "swift":  "slash",
    "dart":   "slash",
    "cs":     "slash",
    "fs":     "slash",
    "zig":    "slash",
    "proto":  "slash",
    "php":    "slash",

    # -- Dash comments --
    "sql":    "dash",
    "lua":    "dash",
    "hs":     "dash",
    "elm":    "dash",
    "adb":    "dash",
    "ads":    "dash",

    # -- Semicolon comments --
    "lisp":   "semicolon",
    "el":     "semicolon",
    "clj":    "semicolon",
    "cljs":   "semicolon",
    "cljc":   "semicolon",
    "scm":    "semicolon",
    "asm":    "semicolon",

    # -- Percent comments --
    "tex":    "percent",
    "sty":    "percent",
    "erl":    "percent",
    "hrl":    "percent",

    # -- Block comments --
    "css":    "c-block",
    "scss":   "c-block",
    "less":   "c-block",
    "html":   "xml",
    "htm":    "xml",
    "xml":    "xml",
    "svg":    "xml",
    "vue":    "xml",
    "ml":     "ocaml",
    "mli":    "ocaml",
})


def extension_of(path_or_extension: Path | str) -> str:
    """
    ``Path("a/b.cc")`` and ``".cc"`` and ``"cc"`` all give ``"cc"``.
    """
    if isinstance(path_or_extension, Path):
        return path_or_extension.suffix[1:]
    return path_or_extension[1:] if path_or_extension.startswith(".") else path_or_extension


class CommentSyntaxRegistry:
    def __init__(self, mapping: Mapping[str, CommentSyntax]) -> None:
        self._mapping: Mapping[str, CommentSyntax] = MappingProxyType(
            {extension_of(ext): syntax for ext, syntax in mapping.items()})

    @classmethod
    def with_defaults(cls, overrides: Mapping[str, CommentSyntax] | None = None) -> CommentSyntaxRegistry:
        mapping: Dict[str, CommentSyntax] = {
            ext: SYNTAX_KINDS[kind] for ext, kind in DEFAULT_EXTENSIONS.items()
        }
        mapping.update(overrides or {})
        return cls(mapping)

    @property
    def extensions(self) -> Tuple[str, ...]:
        return tuple(sorted(self._mapping))

    def supports(self, path_or_extension: Path | str) -> bool:
        return extension_of(path_or_extension) in self._mapping

    def lookup(self, path_or_extension: Path | str) -> CommentSyntax:
        ext = extension_of(path_or_extension)
        syntax = self._mapping.get(ext)
        if syntax is None:
            path = path_or_extension if isinstance(path_or_extension, Path) else None
            raise UnsupportedFileType(ext, path)
        return syntax
