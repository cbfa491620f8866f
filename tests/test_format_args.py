"""Tests for the format-args analyzer and its placeholder parser."""

from __future__ import annotations

import pytest

from rust_quality.analyzers.format_args import (
    FormatArgsAnalyzer,
    Unclassifiable,
    parse_placeholders,
)
from rust_quality.core.syntax import parse_source
from rust_quality.model.fix import NoFix, SimpleFix


def _issues(text: str):
    return FormatArgsAnalyzer().analyze(parse_source(text))


def _in_main(body: str) -> str:
    return "fn main() {\n" + body + "\n}\n"


class TestParsePlaceholders:
    def test_implicit_positions(self):
        ps = parse_placeholders('"{} and {} and {}"')
        assert [p.index for p in ps] == [0, 1, 2]
        assert all(p.name is None for p in ps)

    def test_explicit_and_named(self):
        ps = parse_placeholders('"{1} {0} {name}"')
        assert [(p.index, p.name) for p in ps] == [(1, None), (0, None), (None, "name")]

    def test_escaped_braces_are_not_placeholders(self):
        assert parse_placeholders('"{{}} {{literal}}"') == []

    def test_format_spec_is_kept(self):
        (p,) = parse_placeholders('"{:>8.2}"')
        assert p.index == 0
        assert p.spec == ">8.2"

    def test_argument_offsets(self):
        text = '"x{0:?}y"'
        (p,) = parse_placeholders(text)
        assert text[p.start:p.end] == "0"

    def test_star_precision_consumes_an_argument(self):
        ps = parse_placeholders('"{:.*} {}"')
        assert [p.index for p in ps] == [1, 2]

    def test_raw_string(self):
        ps = parse_placeholders('r#"{} "quoted" {}"#', raw=True)
        assert [p.index for p in ps] == [0, 1]

    def test_unicode_escape_is_skipped(self):
        ps = parse_placeholders('"\\u{1F600} {}"')
        assert [p.index for p in ps] == [0]

    @pytest.mark.parametrize("text", ['"{"', '"}"', '"{a b}"', '"{0x}"'])
    def test_malformed(self, text):
        with pytest.raises(Unclassifiable):
            parse_placeholders(text)

    def test_byte_string_is_unclassifiable(self):
        with pytest.raises(Unclassifiable):
            parse_placeholders('b"{} {} {}"')


class TestFormatArgsAnalyzer:
    def test_three_identifiers_get_named_fix(self):
        text = _in_main(
            '    let (name, age, city) = ("a", 3, "b");\n'
            '    println!("{} is {} years, {}", name, age, city);'
        )
        (issue,) = _issues(text)
        assert issue.analyzer_id == "format_args"
        assert issue.message == "Use named format arguments instead of positional"
        assert issue.line == 3
        assert issue.column == 4
        assert issue.fix == SimpleFix('println!("{name} is {age} years, {city}")')

    def test_two_placeholders_are_below_threshold(self):
        assert _issues(_in_main('    println!("{} {}", a, b);')) == []

    def test_named_placeholders_do_not_count(self):
        assert _issues(_in_main('    println!("{a} {b} {c}");')) == []

    def test_expression_argument_flags_without_fix(self):
        (issue,) = _issues(_in_main('    println!("{} {} {}", a + 1, b, c);'))
        assert isinstance(issue.fix, NoFix)

    def test_field_access_argument_flags_without_fix(self):
        (issue,) = _issues(_in_main('    println!("{} {} {}", p.x, b, c);'))
        assert isinstance(issue.fix, NoFix)

    def test_write_with_formatter_argument(self):
        text = (
            "impl std::fmt::Display for P {\n"
            "    fn fmt(&self, f: &mut std::fmt::Formatter) -> std::fmt::Result {\n"
            '        write!(f, "{} {} {}", x, y, z)\n'
            "    }\n"
            "}\n"
        )
        (issue,) = _issues(text)
        assert issue.fix == SimpleFix('write!(f, "{x} {y} {z}")')

    def test_format_spec_is_preserved(self):
        (issue,) = _issues(_in_main('    let s = format!("{:>5}|{:?}|{}", a, b, c);'))
        assert issue.fix == SimpleFix('format!("{a:>5}|{b:?}|{c}")')

    def test_explicit_indices_reuse_names(self):
        (issue,) = _issues(_in_main('    println!("{0} {1} {0}", a, b);'))
        assert issue.fix == SimpleFix('println!("{a} {b} {a}")')

    def test_trailing_comma(self):
        (issue,) = _issues(_in_main('    println!("{} {} {}", a, b, c,);'))
        assert issue.fix == SimpleFix('println!("{a} {b} {c}")')

    def test_mixed_positional_and_named_arguments(self):
        (issue,) = _issues(_in_main('    println!("{} {} {} {sep}", a, b, c, sep = s);'))
        assert issue.fix == SimpleFix('println!("{a} {b} {c} {sep}", sep = s)')

    def test_positional_arg_clashing_with_named_arg(self):
        (issue,) = _issues(_in_main('    println!("{} {} {} {a}", a, b, c, a = 1);'))
        assert isinstance(issue.fix, NoFix)

    def test_width_argument_blocks_fix(self):
        (issue,) = _issues(_in_main('    println!("{:1$} {} {}", a, w, c);'))
        assert isinstance(issue.fix, NoFix)

    def test_unreferenced_argument_blocks_fix(self):
        (issue,) = _issues(_in_main('    println!("{0} {0} {0}", a, b);'))
        assert isinstance(issue.fix, NoFix)

    def test_other_macros_are_ignored(self):
        assert _issues(_in_main('    my_log!("{} {} {}", a, b, c);')) == []

    def test_escaped_braces_are_left_alone(self):
        (issue,) = _issues(_in_main('    println!("{{}} {} {} {}", a, b, c);'))
        assert issue.fix == SimpleFix('println!("{{}} {a} {b} {c}")')

    def test_macros_outside_functions_are_checked(self):
        text = 'const X: () = { let _ = format!("{} {} {}", a, b, c); };\n'
        (issue,) = _issues(text)
        assert issue.fix == SimpleFix('format!("{a} {b} {c}")')
