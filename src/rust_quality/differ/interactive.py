"""Interactive selection of fixes.

Each fixable issue starts ``PENDING`` and is decided exactly once, becoming
``ACCEPTED`` or ``SKIPPED``.  Issues are offered in source order.  Once an
issue is accepted, any later candidate whose span overlaps it is skipped
without asking, so the accepted set always builds into a plan.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape

from rust_quality.differ.display import print_rendered
from rust_quality.differ.render import render
from rust_quality.model import DiffMode
from rust_quality.model.issue import Issue

_logger = logging.getLogger(__name__)

PROMPT = "Apply this fix? [y/n/a/q]: "


class Decision(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    SKIPPED = "skipped"


class InteractiveSession:
    """Accept/skip state for the fixable issues of one file."""

    def __init__(self, issues: Sequence[Issue], *, accept_all: bool = False) -> None:
        fixable = [i for i in issues if i.is_fixable]
        self.issues: list[Issue] = sorted(fixable, key=lambda i: i.span.start)
        self.decisions: list[Decision] = [Decision.PENDING] * len(self.issues)
        self.accept_all = accept_all
        self.quit = False

    # ── state machine ───────────────────────────────────────────────

    def _decide(self, idx: int, decision: Decision) -> None:
        if self.decisions[idx] is not Decision.PENDING:
            raise ValueError(f"issue {idx} already {self.decisions[idx].value}")
        self.decisions[idx] = decision

    def _conflicts_with_accepted(self, idx: int) -> bool:
        span = self.issues[idx].span
        return any(
            d is Decision.ACCEPTED and self.issues[j].span.overlaps(span)
            for j, d in enumerate(self.decisions)
        )

    def next_pending(self) -> int | None:
        """Index of the next issue needing a decision.

        Candidates overlapping an accepted issue are skipped on the way;
        in accept-all mode the rest are accepted on the way.
        """
        for idx, decision in enumerate(self.decisions):
            if decision is not Decision.PENDING:
                continue
            if self._conflicts_with_accepted(idx):
                _logger.debug("auto-skipping overlapping fix at line %d", self.issues[idx].line)
                self._decide(idx, Decision.SKIPPED)
                continue
            if self.accept_all:
                self._decide(idx, Decision.ACCEPTED)
                continue
            return idx
        return None

    def answer(self, idx: int, command: str) -> str:
        """Apply a user *command* to issue *idx*; returns feedback text."""
        cmd = command.strip().lower()
        if cmd in ("y", "yes"):
            self._decide(idx, Decision.ACCEPTED)
            return "Applied"
        if cmd in ("n", "no"):
            self._decide(idx, Decision.SKIPPED)
            return "Skipped"
        if cmd in ("a", "all"):
            self._decide(idx, Decision.ACCEPTED)
            self.accept_all = True
            self.next_pending()
            return "Applying all remaining changes"
        if cmd in ("q", "quit"):
            self._decide(idx, Decision.SKIPPED)
            self.skip_remaining()
            return "Quit"
        self._decide(idx, Decision.SKIPPED)
        return "Invalid input, skipping"

    def skip_remaining(self) -> None:
        self.quit = True
        for idx, decision in enumerate(self.decisions):
            if decision is Decision.PENDING:
                self.decisions[idx] = Decision.SKIPPED

    @property
    def done(self) -> bool:
        return all(d is not Decision.PENDING for d in self.decisions)

    def accepted(self) -> list[Issue]:
        """Accepted issues in source order, ready for ``build_plan``."""
        return [i for i, d in zip(self.issues, self.decisions) if d is Decision.ACCEPTED]

    # ── driver ──────────────────────────────────────────────────────

    def run(
        self,
        path: str,
        text: str,
        console: Console,
        ask: Callable[[str], str] = input,
    ) -> list[Issue]:
        """Prompt for every pending issue and return the accepted ones."""
        if self.issues:
            console.print(f"[bold cyan]File: {escape(path)}[/]\n")
        total = len(self.issues)
        while (idx := self.next_pending()) is not None:
            issue = self.issues[idx]
            counter = escape(f"[{idx + 1}/{total}]")
            console.print(f"[yellow]{counter}[/] [green]{issue.analyzer_id}[/]")
            console.print(f"[dim]Line {issue.line}:[/] {escape(issue.message)}")
            print_rendered(render(issue, text, DiffMode.INTERACTIVE), console)
            console.print()
            try:
                reply = ask(PROMPT)
            except EOFError:
                reply = "q"
            console.print(self.answer(idx, reply))
            console.print()
        return self.accepted()
