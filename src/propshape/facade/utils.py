from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tree_sitter import Node

MODULE_SUFFIXES: Tuple[str, ...] = (".ts", ".tsx", ".d.ts")
INDEX_FILES: Tuple[str, ...] = ("index.ts", "index.tsx", "index.d.ts")


class ModuleResolver:
    """Map relative module specifiers to files on disk.

    Bare specifiers (``react``, ``@scope/pkg``) are never resolved; their
    types stay opaque.
    """

    def __init__(self) -> None:
        self._cache: Dict[Tuple[Path, str], Optional[Path]] = {}

    def resolve(self, importer: Path, specifier: str) -> Optional[Path]:
        if not is_relative_specifier(specifier):
            return None
        key = (importer.parent, specifier)
        if key not in self._cache:
            self._cache[key] = self._lookup(importer.parent, specifier)
        return self._cache[key]

    def _lookup(self, base: Path, specifier: str) -> Optional[Path]:
        target = (base / specifier).resolve()
        for candidate in self._candidates(target):
            if candidate.is_file():
                return candidate
        return None

    def _candidates(self, target: Path) -> Iterator[Path]:
        if target.suffix in (".ts", ".tsx"):
            yield target
        # "./button.js" written for ESM output still points at button.ts
        if target.suffix in (".js", ".jsx"):
            stem = target.with_suffix("")
            yield from (stem.with_name(stem.name + suffix) for suffix in MODULE_SUFFIXES)
        for suffix in MODULE_SUFFIXES:
            yield target.with_name(target.name + suffix)
        for index in INDEX_FILES:
            yield target / index


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../") or specifier in (".", "..")


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def normalize_text(text: str) -> str:
    return " ".join(text.split())


def strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text


def flatten(node: Node, node_type: str) -> Iterable[Node]:
    """Flatten left-nested binary type nodes such as ``A | B | C``."""
    for child in node.named_children:
        if child.type == node_type:
            yield from flatten(child, node_type)
        else:
            yield child


def substitute_type_names(node: Node, source: bytes, replacements: Dict[str, str]) -> str:
    """Text of ``node`` with bound type identifiers replaced.

    Only ``type_identifier`` nodes are rewritten; string literal types,
    quoted keys and qualified names (``ns.T``) keep their source text.
    """
    if not replacements:
        return node_text(node, source)
    pieces: List[str] = []
    cursor = node.start_byte
    for ident in _type_identifiers(node):
        name = node_text(ident, source)
        if name not in replacements:
            continue
        pieces.append(source[cursor : ident.start_byte].decode("utf-8", errors="replace"))
        pieces.append(replacements[name])
        cursor = ident.end_byte
    pieces.append(source[cursor : node.end_byte].decode("utf-8", errors="replace"))
    return "".join(pieces)


def _type_identifiers(node: Node) -> Iterator[Node]:
    if node.type == "type_identifier":
        yield node
        return
    if node.type == "nested_type_identifier":
        return
    for child in node.children:
        yield from _type_identifiers(child)
