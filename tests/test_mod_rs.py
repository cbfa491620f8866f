"""Tests for the mod.rs analyzer and the file rename that fixes it."""

from __future__ import annotations

from pathlib import Path

from rust_quality.analyzers.mod_rs import ModRsAnalyzer, message_for, suggested_path
from rust_quality.autofix.rename import ModRsRename, plan_renames, rename_module_file
from rust_quality.core.syntax import parse_source
from rust_quality.errors import IoFailure
from rust_quality.model.span import SourceSpan


def _issues(path: str, text: str = "pub fn f() {}\n"):
    return ModRsAnalyzer().analyze(parse_source(text, path))


def _module(tmp_path: Path, name: str = "net", text: str = "pub fn f() {}\n") -> Path:
    d = tmp_path / name
    d.mkdir()
    f = d / "mod.rs"
    f.write_text(text, encoding="utf-8")
    return f


class TestModRsAnalyzer:
    def test_mod_rs_is_flagged_at_file_level(self):
        (issue,) = _issues("src/analyzers/mod.rs")
        assert issue.analyzer_id == "mod_rs"
        assert issue.message == "Use `analyzers.rs` instead of `analyzers/mod.rs` (modern module style)"
        assert issue.span == SourceSpan.whole_line(1)
        assert issue.line == 1
        assert not issue.is_fixable

    def test_other_files_are_ignored(self):
        assert _issues("src/analyzers.rs") == []
        assert _issues("src/my_mod.rs") == []

    def test_in_memory_source_is_ignored(self):
        assert ModRsAnalyzer().analyze(parse_source("fn f() {}\n")) == []

    def test_contents_do_not_matter(self):
        assert len(_issues("a/mod.rs", "")) == 1


class TestSuggestedPath:
    def test_moves_up_one_level(self):
        assert suggested_path(Path("src/a/b/mod.rs")) == Path("src/a/b.rs")

    def test_bare_mod_rs_has_no_target(self):
        assert suggested_path(Path("mod.rs")) is None

    def test_not_a_mod_rs(self):
        assert suggested_path(Path("src/lib.rs")) is None

    def test_message(self):
        assert message_for("net") == "Use `net.rs` instead of `net/mod.rs` (modern module style)"


class TestRename:
    def test_plan_skips_other_files(self, tmp_path: Path):
        f = _module(tmp_path)
        assert plan_renames([tmp_path / "lib.rs", f]) == [ModRsRename(f, tmp_path / "net.rs")]

    def test_rename_moves_content_and_drops_empty_directory(self, tmp_path: Path):
        f = _module(tmp_path)
        (rename,) = plan_renames([f])
        result = rename_module_file(rename)
        assert result.success and result.renamed
        assert (tmp_path / "net.rs").read_text(encoding="utf-8") == "pub fn f() {}\n"
        assert not (tmp_path / "net").exists()

    def test_directory_with_other_files_is_kept(self, tmp_path: Path):
        f = _module(tmp_path)
        (tmp_path / "net" / "tcp.rs").write_text("pub fn g() {}\n", encoding="utf-8")
        result = rename_module_file(plan_renames([f])[0])
        assert result.renamed
        assert not f.exists()
        assert (tmp_path / "net" / "tcp.rs").exists()
        assert (tmp_path / "net.rs").exists()

    def test_existing_target_is_never_overwritten(self, tmp_path: Path):
        f = _module(tmp_path)
        (tmp_path / "net.rs").write_text("// keep\n", encoding="utf-8")
        result = rename_module_file(plan_renames([f])[0])
        assert isinstance(result.error, IoFailure)
        assert not result.success and not result.renamed
        assert (tmp_path / "net.rs").read_text(encoding="utf-8") == "// keep\n"
        assert f.exists()

    def test_dry_run_touches_nothing(self, tmp_path: Path):
        f = _module(tmp_path)
        result = rename_module_file(plan_renames([f])[0], dry_run=True)
        assert result.success and not result.renamed
        assert f.exists()
        assert not (tmp_path / "net.rs").exists()
