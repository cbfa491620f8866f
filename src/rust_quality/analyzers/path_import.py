"""Path-import analyzer — module-path calls that should be imported.

``std::fs::read_to_string(p)`` is flagged and rewritten to
``read_to_string(p)`` plus ``use std::fs::read_to_string;``.
Associated functions (``Vec::new()``), enum variants (``Some::<T>``,
``Shape::Circle(..)``) and associated constants are never flagged: the
classification is purely syntactic and errs on the side of silence.
"""

from __future__ import annotations

from tree_sitter import Node

from rust_quality.core.syntax import COMMENT_TYPES, SyntaxModel
from rust_quality.model import AnalyzerId
from rust_quality.model.fix import NO_FIX, Fix, ImportFix
from rust_quality.model.issue import Issue

STD_ROOTS = frozenset({"std", "core", "alloc"})

_SEGMENT_TYPES = frozenset({"identifier", "crate", "self", "super"})


def _starts_lowercase(segment: str) -> bool:
    return bool(segment) and segment[0].islower()


def _starts_uppercase(segment: str) -> bool:
    return bool(segment) and segment[0].isupper()


def _is_screaming_snake(segment: str) -> bool:
    return any(c.isupper() for c in segment) and all(
        c.isupper() or c.isdigit() or c == "_" for c in segment
    )


def should_flag(segments: list[str]) -> bool:
    """Syntactic free-function test for a call path."""
    if len(segments) < 2:
        return False
    if not _starts_lowercase(segments[0]):
        return False
    name = segments[-1]
    if _is_screaming_snake(name) or _starts_uppercase(name):
        return False
    # `Type::method` / `Enum::Variant::...`
    if _starts_uppercase(segments[-2]):
        return False
    return segments[0] in STD_ROOTS or len(segments) >= 3


class PathImportAnalyzer:
    """Finds ``module::path::function(...)`` calls."""

    id: str = AnalyzerId.PATH_IMPORT.value
    version: str = "1.0.0"

    def analyze(self, model: SyntaxModel) -> list[Issue]:
        candidates: list[tuple[Node, Node, list[str], str]] = []
        for call in model.walk({"call_expression"}):
            func = call.child_by_field_name("function")
            args = call.child_by_field_name("arguments")
            if func is None or args is None:
                continue
            turbofish = ""
            if func.type == "generic_function":
                type_args = func.child_by_field_name("type_arguments")
                func = func.child_by_field_name("function")
                if func is None or type_args is None:
                    continue
                turbofish = "::" + model.text_of(type_args)
            if func.type != "scoped_identifier":
                continue
            segments = _segments(model, func)
            if segments is None or not should_flag(segments):
                continue
            candidates.append((call, args, segments, turbofish))

        if not candidates:
            return []

        blocked = self._bound_elsewhere(model, candidates)
        issues: list[Issue] = []
        for call, args, segments, turbofish in candidates:
            path = "::".join(segments)
            fix: Fix = NO_FIX
            if segments[-1] not in blocked and _import_visible(model, call):
                fix = _build_fix(model, args, path, segments[-1] + turbofish)
            issues.append(
                Issue(
                    analyzer_id=self.id,
                    message=f"Use import instead of path: {path}",
                    span=model.span_of(call),
                    fix=fix,
                )
            )
        return issues

    @staticmethod
    def _bound_elsewhere(model: SyntaxModel, candidates: list) -> set[str]:
        """Short names whose import would clash with something in the file."""
        paths_by_name: dict[str, set[str]] = {}
        for _, _, segments, _ in candidates:
            paths_by_name.setdefault(segments[-1], set()).add("::".join(segments))

        blocked = {name for name, paths in paths_by_name.items() if len(paths) > 1}
        for name, path in model.use_bindings():
            wanted = paths_by_name.get(name)
            if wanted is not None and path not in wanted:
                blocked.add(name)
        taken = model.item_names() | model.local_binding_names()
        blocked.update(name for name in paths_by_name if name in taken)
        return blocked


def _import_visible(model: SyntaxModel, node: Node) -> bool:
    """Whether a ``use`` inserted at the top of the file is in scope at *node*.

    Inline modules see the parent scope only through ``use super::*;``,
    at every level of nesting.
    """
    module = model.enclosing(node, {"mod_item"})
    while module is not None:
        if not model.glob_imports_super(module):
            return False
        module = model.enclosing(module, {"mod_item"})
    return True


def _segments(model: SyntaxModel, node: Node) -> list[str] | None:
    """Flatten a ``scoped_identifier`` into its segments.

    ``None`` for paths that are not plain segment chains (generic types,
    qualified ``<T as Trait>::`` paths, leading ``::``).
    """
    if node.type in _SEGMENT_TYPES:
        return [model.text_of(node)]
    if node.type != "scoped_identifier":
        return None
    path = node.child_by_field_name("path")
    name = node.child_by_field_name("name")
    if path is None or name is None:
        return None
    head = _segments(model, path)
    if head is None:
        return None
    return head + [model.text_of(name)]


def _build_fix(model: SyntaxModel, args: Node, path: str, callee: str) -> Fix:
    preserved: list[str] = []
    for child in args.named_children:
        if child.type in COMMENT_TYPES or child.type == "attribute_item":
            # Rebuilding the call from a template would drop these.
            return NO_FIX
        preserved.append(model.text_of(child))
    slots = ", ".join(f"{{{i}}}" for i in range(len(preserved)))
    template = callee.replace("{", "{{").replace("}", "}}") + f"({slots})"
    return ImportFix(import_path=path, call_template=template, preserved_args=tuple(preserved))
