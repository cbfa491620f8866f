"""Tests for diff rendering, import grouping and interactive selection."""

from __future__ import annotations

import io

import pytest

from rust_quality.api import analyze_text
from rust_quality.differ import (
    Decision,
    InteractiveSession,
    group_imports,
    render,
    summarize,
)
from rust_quality.differ.display import show_full, show_summary
from rust_quality.differ.grouping import common_prefix
from rust_quality.differ.render import IMPORTS_TITLE
from rust_quality.model import DiffMode
from rust_quality.model.fix import SimpleFix
from rust_quality.model.issue import Issue
from rust_quality.model.span import SourceSpan
from rust_quality.reports import make_console

SOURCE = (
    "fn main() {\n"
    '    let s = std::fs::read_to_string("a.txt");\n'
    "\n"
    '    println!("{} {} {}", a, b, c);\n'
    "    // note\n"
    "}\n"
)


def _console():
    buf = io.StringIO()
    return make_console(color=False, file=buf), buf


def _by_analyzer(aid: str):
    return next(i for i in analyze_text(SOURCE) if i.analyzer_id == aid)


class TestRender:
    def test_import_fix_has_two_blocks(self):
        rendered = render(_by_analyzer("path_import"), SOURCE, DiffMode.FULL)
        imports, call = rendered.blocks
        assert imports.title == IMPORTS_TITLE
        assert imports.line == 0
        assert imports.added == ("use std::fs::read_to_string;",)
        assert call.line == 2
        assert call.removed == ('    let s = std::fs::read_to_string("a.txt");',)
        assert call.added == ('    let s = read_to_string("a.txt");',)

    def test_simple_fix_block(self):
        rendered = render(_by_analyzer("format_args"), SOURCE, DiffMode.FULL)
        (block,) = rendered.blocks
        assert block.title == "Line 4"
        assert block.added == ('    println!("{a} {b} {c}");',)

    def test_line_deletion_has_no_added_lines(self):
        rendered = render(_by_analyzer("empty_lines"), SOURCE, DiffMode.FULL)
        (block,) = rendered.blocks
        assert block.line == 3
        assert block.removed == ("",)
        assert block.added == ()

    def test_advisory_issue_has_no_blocks(self):
        rendered = render(_by_analyzer("inline_comments"), SOURCE, DiffMode.FULL)
        assert rendered.blocks == ()

    def test_summary_mode_is_one_line(self):
        rendered = render(_by_analyzer("empty_lines"), SOURCE, DiffMode.SUMMARY)
        assert rendered.blocks == ()
        assert rendered.summary.startswith("empty_lines: line 3:")

    def test_rendering_does_not_touch_the_text(self):
        issue = _by_analyzer("format_args")
        first = render(issue, SOURCE, DiffMode.FULL)
        assert render(issue, SOURCE, DiffMode.FULL) == first


class TestSummarize:
    def test_lines(self):
        lines = summarize({"src/main.rs": analyze_text(SOURCE), "src/empty.rs": []})
        assert lines == [
            "src/main.rs:",
            "  path_import: 1 change",
            "  format_args: 1 change",
            "  empty_lines: remove blank lines 3",
            "",
            "Total: 3 changes in 1 file",
        ]

    def test_nothing_to_do(self):
        assert summarize({}) == ["Total: 0 changes in 0 files"]


class TestGroupImports:
    def test_shared_module_collapses(self):
        assert group_imports(["std::fs::read", "std::fs::write"]) == [
            "use std::fs::{read, write};"
        ]

    def test_sorted_by_root(self):
        assert group_imports(["std::process::exit", "core::mem::swap"]) == [
            "use core::mem::swap;",
            "use std::process::exit;",
        ]

    def test_different_modules_share_root_braces(self):
        assert group_imports(["std::fs::read", "std::io::stdin"]) == [
            "use std::{fs::read, io::stdin};"
        ]

    def test_accepts_use_lines(self):
        assert group_imports(["use std::fs::read;", "std::fs::read"]) == [
            "use std::fs::read;"
        ]

    def test_common_prefix(self):
        assert common_prefix(["fs::read", "fs::write"]) == "fs"
        assert common_prefix(["fs::read"]) == ""


class TestDisplay:
    def test_full_view(self):
        console, buf = _console()
        show_full({"src/main.rs": analyze_text(SOURCE)}, {"src/main.rs": SOURCE}, console)
        out = buf.getvalue()
        assert "DIFF OUTPUT" in out
        assert "File: src/main.rs" in out
        assert "+    use std::fs::read_to_string;" in out
        assert "path_import (1 issues)" in out
        assert 'println!("{a} {b} {c}");' in out
        assert "Total: 3 changes in 1 files" in out

    def test_full_view_without_fixes(self):
        console, buf = _console()
        show_full({"a.rs": []}, {"a.rs": ""}, console)
        assert "No changes proposed" in buf.getvalue()

    def test_summary_view(self):
        console, buf = _console()
        show_summary({"src/main.rs": analyze_text(SOURCE)}, console)
        out = buf.getvalue()
        assert "DIFF SUMMARY" in out
        assert "empty_lines: remove blank lines 3" in out


def _answers(*replies: str):
    it = iter(replies)
    return lambda _prompt: next(it)


class TestInteractiveSession:
    def test_only_fixable_issues_in_source_order(self):
        session = InteractiveSession(analyze_text(SOURCE))
        assert [i.line for i in session.issues] == [2, 3, 4]
        assert all(d is Decision.PENDING for d in session.decisions)

    def test_yes_and_no(self):
        session = InteractiveSession(analyze_text(SOURCE))
        assert session.answer(session.next_pending(), "y") == "Applied"
        assert session.answer(session.next_pending(), "n") == "Skipped"
        assert session.answer(session.next_pending(), "yes") == "Applied"
        assert session.next_pending() is None
        assert session.done
        assert [i.line for i in session.accepted()] == [2, 4]

    def test_all_accepts_the_rest(self):
        session = InteractiveSession(analyze_text(SOURCE))
        session.answer(session.next_pending(), "n")
        assert session.answer(session.next_pending(), "a") == "Applying all remaining changes"
        assert session.done
        assert [i.line for i in session.accepted()] == [3, 4]

    def test_quit_skips_the_rest(self):
        session = InteractiveSession(analyze_text(SOURCE))
        session.answer(session.next_pending(), "y")
        assert session.answer(session.next_pending(), "q") == "Quit"
        assert session.quit
        assert session.done
        assert [i.line for i in session.accepted()] == [2]

    def test_invalid_input_skips(self):
        session = InteractiveSession(analyze_text(SOURCE))
        assert session.answer(session.next_pending(), "maybe") == "Invalid input, skipping"
        assert session.decisions[0] is Decision.SKIPPED

    def test_decisions_are_final(self):
        session = InteractiveSession(analyze_text(SOURCE))
        session.answer(0, "y")
        with pytest.raises(ValueError):
            session.answer(0, "n")

    def test_overlapping_candidate_is_auto_skipped(self):
        outer = Issue("path_import", "outer", SourceSpan(1, 0, 1, 20), SimpleFix("x"))
        inner = Issue("path_import", "inner", SourceSpan(1, 5, 1, 10), SimpleFix("y"))
        session = InteractiveSession([inner, outer])
        session.answer(session.next_pending(), "y")
        assert session.next_pending() is None
        assert session.accepted() == [outer]
        assert session.decisions == [Decision.ACCEPTED, Decision.SKIPPED]

    def test_run_with_scripted_answers(self):
        console, buf = _console()
        session = InteractiveSession(analyze_text(SOURCE))
        accepted = session.run("src/main.rs", SOURCE, console, ask=_answers("y", "n", "y"))
        assert [i.analyzer_id for i in accepted] == ["path_import", "format_args"]
        out = buf.getvalue()
        assert "[1/3] path_import" in out
        assert "Line 2:" in out
        assert "Skipped" in out

    def test_end_of_input_quits(self):
        def closed(_prompt):
            raise EOFError

        console, _buf = _console()
        session = InteractiveSession(analyze_text(SOURCE))
        assert session.run("src/main.rs", SOURCE, console, ask=closed) == []
        assert session.quit
