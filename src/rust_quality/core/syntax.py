"""Syntax model — one parsed Rust source file shared read-only by analyzers.

Parsing is delegated to tree-sitter.  Node positions from tree-sitter are
``(row, byte_column)`` pairs; everything this module hands out is converted
to the ``SourceSpan`` convention (1-indexed lines, character columns).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import tree_sitter_rust as tsrust
from tree_sitter import Language, Node, Parser, Tree

from rust_quality.errors import ParseFailure
from rust_quality.model.span import SourceSpan

_logger = logging.getLogger(__name__)

RUST_LANGUAGE = Language(tsrust.language())

COMMENT_TYPES = frozenset({"line_comment", "block_comment"})
STRING_TYPES = frozenset({"string_literal", "raw_string_literal"})

# Items that bind a name in the scope they are declared in.
_NAMED_ITEMS = frozenset({
    "function_item",
    "struct_item",
    "enum_item",
    "union_item",
    "const_item",
    "static_item",
    "mod_item",
    "type_item",
    "trait_item",
    "macro_definition",
})


def is_doc_comment(text: str) -> bool:
    """True for ``///``, ``//!``, ``/** */`` and ``/*! */`` comments."""
    if text.startswith("///"):
        return not text.startswith("////")
    if text.startswith("//!") or text.startswith("/*!"):
        return True
    if text.startswith("/**"):
        return not (text.startswith("/***") or text == "/**/")
    return False


def is_inner_doc_comment(text: str) -> bool:
    return text.startswith("//!") or text.startswith("/*!")


@dataclass(frozen=True, slots=True)
class ImportAnchor:
    """Where new ``use`` lines go."""

    line: int
    column: int
    has_imports: bool
    at_eof: bool = False


class SyntaxModel:
    """Parsed file: tree-sitter tree plus position tables."""

    def __init__(self, path: str, text: str, source: bytes, tree: Tree) -> None:
        self.path = path
        self.text = text
        self.source = source
        self.tree = tree
        self.lines = text.split("\n")
        self._byte_lines = source.split(b"\n")

    @property
    def root(self) -> Node:
        return self.tree.root_node

    # ── positions ───────────────────────────────────────────────────

    def char_column(self, row: int, byte_col: int) -> int:
        raw = self._byte_lines[row]
        if len(raw) == len(self.lines[row]):
            return byte_col
        return len(raw[:byte_col].decode("utf-8", errors="ignore"))

    def point(self, point: tuple[int, int]) -> tuple[int, int]:
        """Convert a tree-sitter point to ``(line, char_col)``."""
        row, col = point
        return (row + 1, self.char_column(row, col))

    def span_of(self, node: Node) -> SourceSpan:
        sl, sc = self.point(node.start_point)
        el, ec = self.point(node.end_point)
        return SourceSpan(sl, sc, el, ec)

    def text_of(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def line_text(self, line: int) -> str:
        """Text of 1-indexed *line* without its newline."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""

    # ── traversal ───────────────────────────────────────────────────

    def walk(self, types: Iterable[str] | None = None, node: Node | None = None) -> Iterator[Node]:
        """Pre-order (outer before inner, source order) walk.

        With *types* only nodes of those types are yielded, but the walk
        still descends through everything.
        """
        wanted = frozenset(types) if types is not None else None
        stack = [node if node is not None else self.root]
        while stack:
            current = stack.pop()
            if wanted is None or current.type in wanted:
                yield current
            stack.extend(reversed(current.children))

    def function_bodies(self) -> Iterator[tuple[Node, Node]]:
        """``(function_item, body_block)`` for every fn with a body."""
        for fn in self.walk({"function_item"}):
            body = fn.child_by_field_name("body")
            if body is not None:
                yield fn, body

    def enclosing(self, node: Node, types: Iterable[str]) -> Node | None:
        wanted = frozenset(types)
        parent = node.parent
        while parent is not None:
            if parent.type in wanted:
                return parent
            parent = parent.parent
        return None

    # ── imports and names ───────────────────────────────────────────

    def use_declarations(self, top_level_only: bool = False) -> list[Node]:
        if top_level_only:
            return [c for c in self.root.children if c.type == "use_declaration"]
        return list(self.walk({"use_declaration"}))

    def use_bindings(self, top_level_only: bool = False) -> list[tuple[str, str]]:
        """``(bound_name, full_path)`` pairs introduced by ``use`` declarations.

        Glob imports bind nothing nameable and are left out.
        """
        pairs: list[tuple[str, str]] = []
        for decl in self.use_declarations(top_level_only):
            arg = decl.child_by_field_name("argument")
            if arg is not None:
                pairs.extend(self._expand_use(arg, ""))
        return pairs

    def _expand_use(self, node: Node, prefix: str) -> Iterator[tuple[str, str]]:
        kind = node.type
        if kind == "use_as_clause":
            path = node.child_by_field_name("path")
            alias = node.child_by_field_name("alias")
            if path is not None and alias is not None:
                yield self.text_of(alias), _join(prefix, _compact(self.text_of(path)))
        elif kind == "scoped_use_list":
            path = node.child_by_field_name("path")
            inner = _join(prefix, _compact(self.text_of(path))) if path is not None else prefix
            lst = node.child_by_field_name("list")
            if lst is not None:
                yield from self._expand_use(lst, inner)
        elif kind == "use_list":
            for child in node.named_children:
                if child.type == "self":
                    yield prefix.rsplit("::", 1)[-1], prefix
                elif child.type not in COMMENT_TYPES:
                    yield from self._expand_use(child, prefix)
        elif kind in ("identifier", "scoped_identifier", "crate", "super"):
            full = _join(prefix, _compact(self.text_of(node)))
            yield full.rsplit("::", 1)[-1], full

    def item_names(self) -> set[str]:
        """Names of items declared in any scope: file, module or block.

        Methods inside ``impl`` and ``trait`` blocks are left out; they never
        share a namespace with free functions.
        """
        names: set[str] = set()
        for item in self.walk(_NAMED_ITEMS):
            container = item.parent.parent if item.parent is not None else None
            if container is not None and container.type in ("impl_item", "trait_item"):
                continue
            name = item.child_by_field_name("name")
            if name is not None:
                names.add(self.text_of(name))
        return names

    def glob_imports_super(self, module: Node) -> bool:
        """True when the body of *module* contains ``use super::*;``."""
        body = module.child_by_field_name("body")
        if body is None:
            return False
        for child in body.named_children:
            if child.type != "use_declaration":
                continue
            arg = child.child_by_field_name("argument")
            if arg is not None and _compact(self.text_of(arg)) == "super::*":
                return True
        return False

    def local_binding_names(self) -> set[str]:
        """Identifiers bound by ``let`` patterns and parameters anywhere."""
        names: set[str] = set()
        for node in self.walk({"let_declaration", "parameter", "closure_parameters"}):
            pattern = node if node.type == "closure_parameters" else node.child_by_field_name("pattern")
            if pattern is None:
                continue
            for ident in self.walk({"identifier"}, pattern):
                names.add(self.text_of(ident))
        return names

    def import_anchor(self) -> ImportAnchor:
        """Insertion point for new ``use`` lines.

        Before the first top-level ``use`` (and the attributes or doc
        comments attached to it); failing that, before the first item
        after inner attributes and inner doc comments; failing that, EOF.
        """
        children = self.root.children
        for idx, child in enumerate(children):
            if child.type == "use_declaration":
                first = self._attached_prefix(children, idx)
                line, col = self.point(first.start_point)
                return ImportAnchor(line, col, has_imports=True)

        for idx, child in enumerate(children):
            if child.type in ("inner_attribute_item", "shebang"):
                continue
            if child.type in COMMENT_TYPES and not _is_outer_doc(self.text_of(child)):
                continue
            line, col = self.point(child.start_point)
            return ImportAnchor(line, col, has_imports=False)

        line, col = self.point(self.root.end_point)
        return ImportAnchor(line, col, has_imports=False, at_eof=True)

    def _attached_prefix(self, children: list[Node], idx: int) -> Node:
        first = children[idx]
        j = idx - 1
        while j >= 0:
            prev = children[j]
            if prev.type == "attribute_item" or (
                prev.type in COMMENT_TYPES and _is_outer_doc(self.text_of(prev))
            ):
                first = prev
                j -= 1
                continue
            break
        return first


def _is_outer_doc(text: str) -> bool:
    return is_doc_comment(text) and not is_inner_doc_comment(text)


def _compact(path_text: str) -> str:
    return "".join(path_text.split())


def _join(prefix: str, tail: str) -> str:
    if not prefix:
        return tail
    if not tail:
        return prefix
    return f"{prefix}::{tail}"


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def parse_source(text: str, path: str | Path = "<memory>") -> SyntaxModel:
    """Parse *text* into a ``SyntaxModel``.

    Raises ``ParseFailure`` naming the first syntax error.
    """
    source = text.encode("utf-8")
    parser = Parser(RUST_LANGUAGE)
    tree = parser.parse(source)
    model = SyntaxModel(str(path), text, source, tree)
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        node = bad if bad is not None else tree.root_node
        line, col = model.point(node.start_point)
        detail = f"missing {node.type}" if node.is_missing else "unexpected input"
        _logger.debug("parse error in %s at %d:%d", path, line, col)
        raise ParseFailure(path, line, col, detail)
    return model
