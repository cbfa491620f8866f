"""Diff renderer: full, summary and interactive views of proposed fixes."""

from rust_quality.differ.grouping import group_imports
from rust_quality.differ.interactive import Decision, InteractiveSession
from rust_quality.differ.render import DiffBlock, RenderedDiff, render, summarize

__all__ = [
    "Decision",
    "DiffBlock",
    "InteractiveSession",
    "RenderedDiff",
    "group_imports",
    "render",
    "summarize",
]
