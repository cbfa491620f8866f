"""Format-args analyzer — formatting macros leaning on positional arguments.

``println!("{} is {} years, {}", name, age, city)`` becomes
``println!("{name} is {age} years, {city}")``.  The rewrite only happens
when every positional argument is a bare identifier; anything else is
flagged without a fix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from tree_sitter import Node

from rust_quality.core.syntax import COMMENT_TYPES, STRING_TYPES, SyntaxModel
from rust_quality.model import AnalyzerId
from rust_quality.model.fix import NO_FIX, Fix, SimpleFix
from rust_quality.model.issue import Issue

FORMAT_MACROS = frozenset({
    "format",
    "print",
    "println",
    "eprint",
    "eprintln",
    "write",
    "writeln",
    "panic",
    "format_args",
})

POSITIONAL_THRESHOLD = 3

MESSAGE = "Use named format arguments instead of positional"

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


class Unclassifiable(ValueError):
    """The template cannot be read reliably; the macro is left alone."""


@dataclass(frozen=True, slots=True)
class Placeholder:
    """One ``{...}`` in a template.

    ``start``/``end`` delimit the argument part (between ``{`` and ``:`` or
    ``}``) as offsets into the template text.  ``index`` is set for
    positional placeholders, ``name`` for named ones.
    """

    start: int
    end: int
    index: int | None
    name: str | None
    spec: str


def parse_placeholders(template: str, raw: bool = False) -> list[Placeholder]:
    """Placeholders of a string literal's source text (quotes included).

    Raises ``Unclassifiable`` on anything that is not a well-formed format
    string.
    """
    body_start, body_end = _literal_bounds(template)
    found: list[Placeholder] = []
    implicit = 0
    i = body_start
    while i < body_end:
        ch = template[i]
        if ch == "\\" and not raw:
            if template.startswith("\\u{", i):
                close = template.find("}", i)
                if close < 0 or close >= body_end:
                    raise Unclassifiable("unterminated unicode escape")
                i = close + 1
            else:
                i += 2
            continue
        if ch == "}":
            if template.startswith("}}", i) and i + 1 < body_end:
                i += 2
                continue
            raise Unclassifiable("unmatched '}'")
        if ch != "{":
            i += 1
            continue
        if template.startswith("{{", i) and i + 1 < body_end:
            i += 2
            continue
        close = template.find("}", i + 1)
        if close < 0 or close >= body_end:
            raise Unclassifiable("unterminated placeholder")
        inner = template[i + 1:close]
        if "{" in inner:
            raise Unclassifiable("nested '{' in placeholder")
        arg, _, spec = inner.partition(":")
        arg_end = i + 1 + len(arg)
        key = arg.strip()
        if "*" in spec:
            # `.*` takes the precision from the next implicit argument.
            implicit += 1
        if key == "":
            found.append(Placeholder(i + 1, arg_end, implicit, None, spec))
            implicit += 1
        elif key.isascii() and key.isdigit():
            found.append(Placeholder(i + 1, arg_end, int(key), None, spec))
        elif _IDENT_RE.match(key):
            found.append(Placeholder(i + 1, arg_end, None, key, spec))
        else:
            raise Unclassifiable(f"unsupported placeholder {{{inner}}}")
        i = close + 1
    return found


def _literal_bounds(text: str) -> tuple[int, int]:
    """Offsets of the literal's content, excluding prefix and quotes."""
    if text.startswith("r"):
        hashes = len(text) - len(text[1:].lstrip("#")) - 1
        start = 1 + hashes + 1
        end = len(text) - hashes - 1
    elif text.startswith('"'):
        start, end = 1, len(text) - 1
    else:
        raise Unclassifiable("byte or C string template")
    if end < start:
        raise Unclassifiable("malformed literal")
    return start, end


def _split_groups(token_tree: Node) -> tuple[list[list[Node]], list[Node], bool]:
    """Split a token tree's top-level tokens on commas.

    Returns ``(groups, commas, has_comments)``.  ``commas[k]`` is the comma
    that precedes ``groups[k + 1]``.
    """
    inner = token_tree.children[1:-1]
    groups: list[list[Node]] = [[]]
    commas: list[Node] = []
    has_comments = False
    for child in inner:
        if child.type in COMMENT_TYPES:
            has_comments = True
            continue
        if child.type == ",":
            commas.append(child)
            groups.append([])
        else:
            groups[-1].append(child)
    if groups and not groups[-1] and commas:
        # trailing comma
        groups.pop()
    return groups, commas, has_comments


def _macro_name(model: SyntaxModel, node: Node) -> str | None:
    mac = node.child_by_field_name("macro")
    if mac is None:
        return None
    if mac.type == "scoped_identifier":
        name = mac.child_by_field_name("name")
        return model.text_of(name) if name is not None else None
    return model.text_of(mac)


def _is_named_arg(group: list[Node]) -> bool:
    return len(group) >= 2 and group[0].type == "identifier" and group[1].type == "="


class FormatArgsAnalyzer:
    """Finds formatting macros with too many positional placeholders."""

    id: str = AnalyzerId.FORMAT_ARGS.value
    version: str = "1.0.0"

    threshold: int = POSITIONAL_THRESHOLD

    def analyze(self, model: SyntaxModel) -> list[Issue]:
        issues: list[Issue] = []
        for node in model.walk({"macro_invocation"}):
            if _macro_name(model, node) not in FORMAT_MACROS:
                continue
            issue = self._check_macro(model, node)
            if issue is not None:
                issues.append(issue)
        return issues

    def _check_macro(self, model: SyntaxModel, node: Node) -> Issue | None:
        token_tree = next((c for c in node.children if c.type == "token_tree"), None)
        if token_tree is None or len(token_tree.children) < 2:
            return None
        groups, commas, has_comments = _split_groups(token_tree)

        tpl_idx = next(
            (k for k, g in enumerate(groups) if len(g) == 1 and g[0].type in STRING_TYPES),
            None,
        )
        if tpl_idx is None:
            return None
        literal = groups[tpl_idx][0]
        literal_text = model.text_of(literal)
        try:
            placeholders = parse_placeholders(
                literal_text, raw=literal.type == "raw_string_literal"
            )
        except Unclassifiable:
            return None

        positional = [p for p in placeholders if p.index is not None]
        if len(positional) < self.threshold:
            return None

        trailing = list(range(tpl_idx + 1, len(groups)))
        named_names = {
            model.text_of(groups[k][0]) for k in trailing if _is_named_arg(groups[k])
        }
        pos_groups = [k for k in trailing if not _is_named_arg(groups[k])]
        if any(not groups[k] for k in trailing):
            return None
        referenced = {p.index for p in positional}
        if any(i >= len(pos_groups) for i in referenced):
            # Would not compile; not ours to judge.
            return None

        fix: Fix = NO_FIX
        if not has_comments and referenced == set(range(len(pos_groups))):
            fix = self._build_fix(
                model, node, literal, placeholders, groups, commas, pos_groups, named_names
            )
        return Issue(
            analyzer_id=self.id,
            message=MESSAGE,
            span=model.span_of(node),
            fix=fix,
        )

    @staticmethod
    def _build_fix(
        model: SyntaxModel,
        node: Node,
        literal: Node,
        placeholders: list[Placeholder],
        groups: list[list[Node]],
        commas: list[Node],
        pos_groups: list[int],
        named_names: set[str],
    ) -> Fix:
        names: list[str] = []
        for k in pos_groups:
            group = groups[k]
            if len(group) != 1 or group[0].type != "identifier":
                return NO_FIX
            name = model.text_of(group[0])
            if name.startswith("r#") or name in named_names:
                return NO_FIX
            names.append(name)
        if any("$" in p.spec or "*" in p.spec for p in placeholders):
            return NO_FIX

        base = node.start_byte

        def rel(byte_offset: int) -> int:
            return len(model.source[base:byte_offset].decode("utf-8"))

        # (start, end, replacement) in character offsets within the macro text
        edits: list[tuple[int, int, str]] = []
        lit_start = rel(literal.start_byte)
        for p in placeholders:
            if p.index is not None:
                edits.append((lit_start + p.start, lit_start + p.end, names[p.index]))
        for k in pos_groups:
            comma = commas[k - 1]
            end = groups[k][-1].end_byte
            if k == len(groups) - 1 and len(commas) == len(groups):
                # trailing comma goes with the last removed argument
                end = commas[-1].end_byte
            edits.append((rel(comma.start_byte), rel(end), ""))

        text = model.text_of(node)
        for start, end, repl in sorted(edits, reverse=True):
            text = text[:start] + repl + text[end:]
        return SimpleFix(text)
