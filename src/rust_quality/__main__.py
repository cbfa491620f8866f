"""CLI entry-point for rust_quality.

Usage:
    python -m rust_quality check [PATH] [--analyzer NAME] [--verbose] [--json] [--color/--no-color]
    python -m rust_quality fix [PATH] [--analyzer NAME] [--dry-run]
    python -m rust_quality diff [PATH] [--analyzer NAME] [--mode full|summary|interactive]
                                [--summary] [--interactive] [--dry-run]
    python -m rust_quality mod-rs [PATH] [--fix]
    python -m rust_quality analyzers

Global options (before the command): --debug, --jobs N, --version.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.markup import escape

from rust_quality import __version__
from rust_quality.analyzers import available_analyzers, resolve_analyzer_ids
from rust_quality.core.config import RunConfig
from rust_quality.errors import ConfigError, IoFailure, UnknownAnalyzerError
from rust_quality.model import DiffMode
from rust_quality.utils.exit_codes import ExitCode


def _unknown_analyzer(exc: UnknownAnalyzerError) -> int:
    print(f"error: unknown analyzer: {exc.name}. Available analyzers:", file=sys.stderr)
    for name in exc.available:
        print(f"  - {name}", file=sys.stderr)
    return ExitCode.ERROR


def _config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig.from_env(
        args.path,
        analyzer=args.analyzer,
        jobs=args.jobs,
        color=getattr(args, "color", None),
    )


# ── check ───────────────────────────────────────────────────────────


def _handle_check(args: argparse.Namespace) -> int:
    """Analyze without modifying anything.

    Exit code: 0 = clean, 1 = issues found, 2 = a file failed to read/parse.
    """
    from rust_quality.api import check_path
    from rust_quality.reports import make_console, render_compact, render_json, render_verbose

    cfg = _config_from_args(args)
    report, analyses = check_path(cfg.root, config=cfg)

    if args.json_out:
        sys.stdout.write(render_json(report, analyses))
    else:
        console = make_console(cfg.color)
        if args.verbose:
            render_verbose(analyses, console, resolve_analyzer_ids(cfg.analyzer))
        else:
            render_compact(report, console)

    if report.has_errors:
        return ExitCode.ERROR
    return ExitCode.VIOLATION if report.total_issues else ExitCode.SUCCESS


# ── fix ─────────────────────────────────────────────────────────────


def _handle_fix(args: argparse.Namespace) -> int:
    """Apply every available fix, file by file.

    Exit code: 0 = done, 1 = some file had conflicting fixes,
    2 = a file failed to read/parse/write.
    """
    from rust_quality.api import collect, fix_analysis
    from rust_quality.reports import make_console

    cfg = _config_from_args(args)
    console = make_console(cfg.color)
    analyses = collect(cfg.root, config=cfg)

    errors = 0
    conflicts = 0
    fixed = 0
    for analysis in analyses:
        if analysis.error is not None:
            console.print(f"[bold red]error[/]: {escape(str(analysis.error))}")
            errors += 1
            continue
        result = fix_analysis(analysis, dry_run=args.dry_run)
        if result.error is not None:
            console.print(f"[bold red]error[/]: {escape(str(result.error))}")
            errors += 1
            continue
        if result.conflict is not None:
            conflicts += 1
            console.print(
                f"[yellow]conflict[/] in {escape(analysis.path)}: {escape(str(result.conflict))}; "
                f"no changes made (use `diff --interactive` to choose)"
            )
            continue
        if not result.applied:
            continue
        fixed += len(result.applied)
        verb = "Would fix" if args.dry_run else "Fixed"
        console.print(f"{verb} {len(result.applied)} issues in {analysis.path}")

    renamed, rename_errors = _rename_modules(analyses, console, dry_run=args.dry_run)
    errors += rename_errors

    if fixed == 0 and not renamed and not conflicts:
        console.print("No fixable issues found")
    if errors:
        return ExitCode.ERROR
    return ExitCode.VIOLATION if conflicts else ExitCode.SUCCESS


def _rename_modules(analyses, console, *, dry_run: bool) -> tuple[int, int]:
    """Move flagged ``mod.rs`` files; returns ``(renamed, errors)``."""
    from rust_quality.api import rename_mod_rs

    renamed = 0
    errors = 0
    for result in rename_mod_rs(analyses, dry_run=dry_run):
        if result.error is not None:
            console.print(f"[bold red]error[/]: {escape(str(result.error))}")
            errors += 1
            continue
        renamed += 1
        if dry_run:
            console.print(f"Would fix: {result.rename.source} -> {result.rename.target}")
    if renamed and not dry_run:
        console.print(f"Fixed {renamed} mod.rs files")
    return renamed, errors


# ── diff ────────────────────────────────────────────────────────────


def _diff_mode(args: argparse.Namespace) -> DiffMode:
    if args.interactive:
        return DiffMode.INTERACTIVE
    if args.summary:
        return DiffMode.SUMMARY
    return DiffMode(args.mode)


def _handle_diff(args: argparse.Namespace) -> int:
    """Preview fixes; in interactive mode, apply the accepted ones."""
    from rust_quality.api import collect
    from rust_quality.differ.display import show_full, show_summary
    from rust_quality.reports import make_console

    cfg = _config_from_args(args)
    console = make_console(cfg.color)
    analyses = collect(cfg.root, config=cfg)

    errors = [a for a in analyses if a.error is not None]
    for a in errors:
        console.print(f"[bold red]error[/]: {escape(str(a.error))}")
    ok = [a for a in analyses if a.ok]

    mode = _diff_mode(args)
    if mode is DiffMode.INTERACTIVE:
        rc = _interactive(ok, console, dry_run=args.dry_run)
    else:
        results = {a.path: list(a.issues) for a in ok}
        if mode is DiffMode.SUMMARY:
            show_summary(results, console)
        else:
            show_full(results, {a.path: a.source for a in ok}, console)
        rc = ExitCode.SUCCESS
    return ExitCode.ERROR if errors else rc


def _interactive(analyses, console, *, dry_run: bool) -> int:
    from rust_quality.autofix import fix_file
    from rust_quality.differ.interactive import InteractiveSession

    console.print("\n[bold]INTERACTIVE DIFF[/]\n")
    console.print("[dim]Commands: y=yes, n=no, a=all, q=quit[/]\n")

    rc = ExitCode.SUCCESS
    accept_all = False
    selected = 0
    for analysis in analyses:
        session = InteractiveSession(analysis.issues, accept_all=accept_all)
        accepted = session.run(analysis.path, analysis.source, console)
        accept_all = session.accept_all
        selected += len(accepted)
        if accepted:
            try:
                result = fix_file(
                    analysis.path,
                    accepted,
                    dry_run=dry_run,
                    source=analysis.source,
                    model=analysis.model,
                )
            except IoFailure as exc:
                console.print(f"[bold red]error[/]: {escape(str(exc))}")
                rc = ExitCode.ERROR
            else:
                if result.conflict is not None:
                    rc = max(rc, ExitCode.VIOLATION)
        if session.quit:
            break

    console.print(f"\n[bold yellow]Selected {selected} changes for application[/]")
    if dry_run and selected:
        console.print("(dry run: no files written)")
    return rc


# ── mod-rs ──────────────────────────────────────────────────────────


def _handle_mod_rs(args: argparse.Namespace) -> int:
    """List ``mod.rs`` files with their targets; rename them with --fix.

    Exit code: 0 = listed or renamed, 2 = a rename failed.
    """
    from rust_quality.api import find_mod_rs
    from rust_quality.autofix import rename_module_file

    cfg = RunConfig.from_env(args.path, jobs=args.jobs)
    renames = find_mod_rs(cfg.root, config=cfg)
    if not renames:
        print("No mod.rs files found")
        return ExitCode.SUCCESS

    if not args.fix:
        print(f"Found {len(renames)} mod.rs files:")
        for r in renames:
            print(f"  {r.source} -> {r.target}")
        print("\nRun with --fix to apply changes")
        return ExitCode.SUCCESS

    results = [rename_module_file(r) for r in renames]
    failed = [r for r in results if r.error is not None]
    for r in failed:
        print(f"error: {r.error}", file=sys.stderr)
    print(f"Fixed {len(results) - len(failed)} mod.rs files")
    return ExitCode.ERROR if failed else ExitCode.SUCCESS


# ── analyzers ───────────────────────────────────────────────────────


def _handle_analyzers(args: argparse.Namespace) -> int:
    for name in available_analyzers():
        print(name)
    return ExitCode.SUCCESS


# ── parser ──────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rust-quality",
        description="Style and structure checks for Rust sources, with safe automatic fixes.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log debug output to stderr.",
    )
    p.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Worker threads for analysis (default: RUST_QUALITY_JOBS or auto).",
    )
    sub = p.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=Path("."),
        help="A .rs file or a directory to scan (default: current directory).",
    )
    common.add_argument(
        "--analyzer",
        "-a",
        default=None,
        help="Run only this analyzer (see `rust-quality analyzers`).",
    )
    common.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force coloured output on or off.",
    )

    # ── check ───────────────────────────────────────────────────────
    check_p = sub.add_parser("check", parents=[common], help="Report issues (never modifies files).")
    check_p.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="One entry per issue with source line and fix preview.",
    )
    check_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the JSON report to stdout.",
    )

    # ── fix ─────────────────────────────────────────────────────────
    fix_p = sub.add_parser("fix", parents=[common], help="Apply automatic fixes.")
    fix_p.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Compute fixes without writing any file.",
    )

    # ── diff ────────────────────────────────────────────────────────
    diff_p = sub.add_parser("diff", parents=[common], help="Preview proposed fixes.")
    diff_p.add_argument(
        "--mode",
        choices=[m.value for m in DiffMode],
        default=DiffMode.FULL.value,
        help="Presentation mode (default: full).",
    )
    diff_p.add_argument(
        "--summary",
        "-s",
        action="store_true",
        default=False,
        help="Shorthand for --mode summary.",
    )
    diff_p.add_argument(
        "--interactive",
        "-i",
        action="store_true",
        default=False,
        help="Shorthand for --mode interactive: choose fixes one by one.",
    )
    diff_p.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="In interactive mode, do not write accepted fixes.",
    )

    # ── mod-rs ──────────────────────────────────────────────────────
    mod_p = sub.add_parser("mod-rs", help="Find `mod.rs` files and move them to `<name>.rs`.")
    mod_p.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=Path("."),
        help="A .rs file or a directory to scan (default: current directory).",
    )
    mod_p.add_argument(
        "--fix",
        action="store_true",
        default=False,
        help="Rename the files instead of listing them.",
    )

    sub.add_parser("analyzers", help="List available analyzers.")
    return p


_HANDLERS = {
    "check": _handle_check,
    "fix": _handle_fix,
    "diff": _handle_diff,
    "mod-rs": _handle_mod_rs,
    "analyzers": _handle_analyzers,
}


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an exit code (0 = clean, 1 = violation, 2 = error)."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help(sys.stderr)
        return ExitCode.ERROR
    if args.jobs is not None and args.jobs < 0:
        print("error: --jobs must be >= 0", file=sys.stderr)
        return ExitCode.ERROR

    try:
        return int(_HANDLERS[args.command](args))
    except UnknownAnalyzerError as exc:
        return _unknown_analyzer(exc)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    sys.exit(main())
