"""Fix — how an issue's span is rewritten, if at all.

Three variants, all immutable:

- ``NoFix``      — advisory issue, nothing to rewrite.
- ``SimpleFix``  — the span is replaced verbatim by ``replacement``.
- ``ImportFix``  — a ``use <import_path>;`` line is inserted into the import
  block and the span is replaced by ``call_template`` with
  ``preserved_args`` substituted into its numbered slots.

The call template is a deliberately tiny language: ``{N}`` is slot *N*,
``{{`` and ``}}`` are literal braces, anything else is copied as-is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from rust_quality.errors import MalformedFixContract

_TOKEN_RE = re.compile(r"\{\{|\}\}|\{(\d+)\}|[{}]")


def _scan(template: str) -> list[tuple[int, int, str | int]]:
    """Tokenise *template* into ``(start, end, piece)`` triples.

    ``piece`` is an ``int`` for a slot and the literal text otherwise.
    Unbalanced single braces are a contract violation.
    """
    pieces: list[tuple[int, int, str | int]] = []
    pos = 0
    for m in _TOKEN_RE.finditer(template):
        if m.start() > pos:
            pieces.append((pos, m.start(), template[pos:m.start()]))
        tok = m.group(0)
        if tok == "{{":
            pieces.append((m.start(), m.end(), "{"))
        elif tok == "}}":
            pieces.append((m.start(), m.end(), "}"))
        elif m.group(1) is not None:
            pieces.append((m.start(), m.end(), int(m.group(1))))
        else:
            raise MalformedFixContract(
                f"stray {tok!r} at offset {m.start()} in call template {template!r}"
            )
        pos = m.end()
    if pos < len(template):
        pieces.append((pos, len(template), template[pos:]))
    return pieces


def slot_indices(template: str) -> list[int]:
    """Slot numbers referenced by *template*, in order of appearance."""
    return [p for _, _, p in _scan(template) if isinstance(p, int)]


def count_slots(template: str) -> int:
    """Number of distinct slots in *template*."""
    return len(set(slot_indices(template)))


def render_template(template: str, args: tuple[str, ...] | list[str]) -> str:
    """Substitute *args* into *template*.

    Total for any template accepted by ``ImportFix``.
    """
    out: list[str] = []
    for _, _, piece in _scan(template):
        if isinstance(piece, int):
            out.append(args[piece])
        else:
            out.append(piece)
    return "".join(out)


# ── variants ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class NoFix:
    """No automatic rewrite exists."""

    kind = "none"


@dataclass(frozen=True, slots=True)
class SimpleFix:
    replacement: str

    kind = "simple"


@dataclass(frozen=True, slots=True)
class ImportFix:
    """Insert an import and rewrite the call site from a template.

    The slots of ``call_template`` must be exactly ``{0}`` .. ``{n-1}``
    where ``n == len(preserved_args)``.
    """

    import_path: str
    call_template: str
    preserved_args: tuple[str, ...] = ()

    kind = "import"

    def __post_init__(self) -> None:
        if not isinstance(self.preserved_args, tuple):
            object.__setattr__(self, "preserved_args", tuple(self.preserved_args))
        if not self.import_path:
            raise MalformedFixContract("import fix without an import path")
        used = set(slot_indices(self.call_template))
        expected = set(range(len(self.preserved_args)))
        if used != expected:
            raise MalformedFixContract(
                f"call template {self.call_template!r} uses slots "
                f"{sorted(used)} but {len(self.preserved_args)} argument(s) "
                f"were preserved"
            )

    @property
    def call_text(self) -> str:
        return render_template(self.call_template, self.preserved_args)

    @property
    def import_line(self) -> str:
        return f"use {self.import_path};"


Fix = Union[NoFix, SimpleFix, ImportFix]

NO_FIX = NoFix()


def describe_fix(fix: Fix) -> str:
    """One-line human preview of *fix*."""
    if isinstance(fix, ImportFix):
        return f"{fix.import_line} + {fix.call_text}"
    if isinstance(fix, SimpleFix):
        if fix.replacement == "":
            return "(delete)"
        first = fix.replacement.splitlines()[0] if fix.replacement else ""
        more = " ..." if "\n" in fix.replacement else ""
        return f"{first}{more}"
    return "(no automatic fix)"


def fix_to_dict(fix: Fix) -> dict:
    if isinstance(fix, ImportFix):
        return {
            "kind": fix.kind,
            "import_path": fix.import_path,
            "call_template": fix.call_template,
            "preserved_args": list(fix.preserved_args),
        }
    if isinstance(fix, SimpleFix):
        return {"kind": fix.kind, "replacement": fix.replacement}
    return {"kind": NoFix.kind}
