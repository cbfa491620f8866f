"""Tests for the path-import analyzer."""

from __future__ import annotations

import pytest

from rust_quality.analyzers.path_import import PathImportAnalyzer, should_flag
from rust_quality.api import fix_text
from rust_quality.core.syntax import parse_source
from rust_quality.model.fix import ImportFix, NoFix


def _issues(text: str):
    return PathImportAnalyzer().analyze(parse_source(text))


def _in_main(body: str) -> str:
    return "fn main() {\n" + body + "\n}\n"


class TestShouldFlag:
    """Pure classification of a call path's segments."""

    @pytest.mark.parametrize(
        "path",
        [
            "std::fs::read_to_string",
            "std::process::exit",
            "core::mem::swap",
            "crate::utils::helper",
            "serde_json::de::from_str",
        ],
    )
    def test_free_functions(self, path):
        assert should_flag(path.split("::"))

    @pytest.mark.parametrize(
        "path",
        [
            "Vec::new",                # associated function
            "String::from",
            "io::Error::new",          # type in second-to-last position
            "Shape::Circle",           # enum variant
            "std::f64::MAX",           # constant
            "Ordering::Less",
            "helper",                  # single segment
            "mymod::helper",           # two segments outside std
        ],
    )
    def test_not_free_functions(self, path):
        assert not should_flag(path.split("::"))


class TestPathImportAnalyzer:
    def test_std_call_gets_import_fix(self):
        text = _in_main('    let text = std::fs::read_to_string("a.txt");')
        issues = _issues(text)
        assert len(issues) == 1
        issue = issues[0]
        assert issue.analyzer_id == "path_import"
        assert issue.message == "Use import instead of path: std::fs::read_to_string"
        assert issue.line == 2
        assert issue.column == 15
        assert issue.fix == ImportFix(
            import_path="std::fs::read_to_string",
            call_template="read_to_string({0})",
            preserved_args=('"a.txt"',),
        )

    def test_associated_function_is_silent(self):
        assert _issues(_in_main("    let v: Vec<u8> = Vec::new();")) == []

    def test_enum_variant_is_silent(self):
        text = "enum Shape { Circle(u8) }\n" + _in_main("    let s = Shape::Circle(1);")
        assert _issues(text) == []

    def test_type_path_is_silent(self):
        text = _in_main('    let e = std::io::Error::new(std::io::ErrorKind::Other, "x");')
        assert _issues(text) == []

    def test_method_call_on_result_is_not_confused(self):
        text = _in_main('    let s = std::fs::read_to_string("a").unwrap();')
        issues = _issues(text)
        assert [i.message for i in issues] == [
            "Use import instead of path: std::fs::read_to_string"
        ]

    def test_multiple_arguments_are_preserved_in_order(self):
        text = _in_main("    std::mem::swap(&mut a, &mut b);")
        (issue,) = _issues(text)
        assert issue.fix.call_text == "swap(&mut a, &mut b)"

    def test_zero_arguments(self):
        (issue,) = _issues(_in_main("    std::process::abort();"))
        assert issue.fix.call_template == "abort()"
        assert issue.fix.preserved_args == ()

    def test_turbofish_is_kept(self):
        (issue,) = _issues(_in_main("    let n = std::mem::size_of::<u32>();"))
        assert issue.fix.import_path == "std::mem::size_of"
        assert issue.fix.call_text == "size_of::<u32>()"

    def test_crate_path_with_three_segments(self):
        (issue,) = _issues(_in_main("    crate::utils::helper(1);"))
        assert issue.fix.import_path == "crate::utils::helper"

    def test_two_segment_local_module_is_silent(self):
        assert _issues(_in_main("    utils::helper(1);")) == []

    def test_results_in_source_order(self):
        text = _in_main(
            '    std::fs::remove_file("a");\n'
            "    std::process::exit(0);"
        )
        assert [i.line for i in _issues(text)] == [2, 3]


class TestNameCollisions:
    """An import that would shadow or clash leaves the issue without a fix."""

    def test_existing_use_of_a_different_path(self):
        text = "use my::io::read;\n" + _in_main('    std::fs::read("a");')
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)

    def test_existing_use_of_the_same_path_is_fine(self):
        text = "use std::fs::read;\n" + _in_main('    std::fs::read("a");')
        (issue,) = _issues(text)
        assert isinstance(issue.fix, ImportFix)

    def test_same_short_name_from_two_paths(self):
        text = _in_main(
            '    std::fs::read("a");\n'
            '    tokio::fs::read("b");'
        )
        issues = _issues(text)
        assert len(issues) == 2
        assert all(isinstance(i.fix, NoFix) for i in issues)

    def test_local_variable_with_the_same_name(self):
        text = _in_main(
            "    let exit = 3;\n"
            "    std::process::exit(exit);"
        )
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)

    def test_top_level_function_with_the_same_name(self):
        text = "fn exit() {}\n" + _in_main("    std::process::exit(0);")
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)

    def test_comment_inside_arguments_blocks_fix(self):
        text = _in_main("    std::process::exit(/* code */ 0);")
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)
        assert not issue.is_fixable

    def test_item_declared_in_a_block_blocks_fix(self):
        text = _in_main(
            "    fn read_to_string(_p: &str) -> u32 { 0 }\n"
            '    let _x = std::fs::read_to_string("a");'
        )
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)

    def test_method_with_the_same_name_does_not_block(self):
        text = (
            "struct S;\n"
            "impl S {\n"
            "    fn exit(&self) {}\n"
            "}\n"
        ) + _in_main("    std::process::exit(0);")
        (issue,) = _issues(text)
        assert isinstance(issue.fix, ImportFix)


class TestInlineModules:
    """A ``use`` added at the top of the file must be visible at the call."""

    def test_call_inside_inline_module_has_no_fix(self):
        text = (
            "fn main() {}\n"
            "\n"
            "mod helpers {\n"
            "    pub fn load() -> String {\n"
            '        std::fs::read_to_string("a.txt").unwrap()\n'
            "    }\n"
            "}\n"
        )
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)
        assert fix_text(text, "path_import") == text

    def test_module_importing_parent_scope_keeps_fix(self):
        text = (
            "mod helpers {\n"
            "    use super::*;\n"
            "    pub fn load() -> String {\n"
            '        std::fs::read_to_string("a.txt").unwrap()\n'
            "    }\n"
            "}\n"
        )
        (issue,) = _issues(text)
        assert isinstance(issue.fix, ImportFix)

    def test_every_nesting_level_needs_the_glob(self):
        text = (
            "mod outer {\n"
            "    use super::*;\n"
            "    mod inner {\n"
            "        fn f() {\n"
            "            std::process::exit(0);\n"
            "        }\n"
            "    }\n"
            "}\n"
        )
        (issue,) = _issues(text)
        assert isinstance(issue.fix, NoFix)

    def test_calls_outside_the_module_are_unaffected(self):
        text = (
            "mod helpers {\n"
            "    pub fn f() {\n"
            "        std::process::exit(1);\n"
            "    }\n"
            "}\n"
        ) + _in_main("    std::process::abort();")
        exit_issue, abort_issue = _issues(text)
        assert isinstance(exit_issue.fix, NoFix)
        assert isinstance(abort_issue.fix, ImportFix)
