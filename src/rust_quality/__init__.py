"""rust_quality — style and structure checks for Rust sources, with safe fixes."""

__all__ = [
    "__version__",
    "analyze_text",
    "check_path",
    "fix_path",
    "fix_text",
]
__version__ = "0.1.0"

# Programmatic entrypoints, see rust_quality.api.
from rust_quality.api import (  # noqa: E402, F401
    analyze_text,
    check_path,
    fix_path,
    fix_text,
)
