"""mod.rs analyzer — directory modules declared through ``<name>/mod.rs``.

The modern layout is ``<name>.rs`` next to the ``<name>/`` directory.  The
finding is file-level and carries no text fix; ``fix`` moves the file
instead (see ``rust_quality.autofix.rename``).
"""

from __future__ import annotations

from pathlib import Path

from rust_quality.core.syntax import SyntaxModel
from rust_quality.model import AnalyzerId
from rust_quality.model.fix import NO_FIX
from rust_quality.model.issue import Issue
from rust_quality.model.span import SourceSpan

MOD_RS_NAME = "mod.rs"


def is_mod_rs(path: Path) -> bool:
    return path.name == MOD_RS_NAME


def suggested_path(path: Path) -> Path | None:
    """``a/b/mod.rs`` → ``a/b.rs``; ``None`` when there is no module directory."""
    if not is_mod_rs(path):
        return None
    module = path.parent.name
    if not module:
        return None
    return path.parent.parent / f"{module}.rs"


def message_for(module: str) -> str:
    return f"Use `{module}.rs` instead of `{module}/mod.rs` (modern module style)"


class ModRsAnalyzer:
    """Flags files named ``mod.rs``; the path is all it looks at."""

    id: str = AnalyzerId.MOD_RS.value
    version: str = "1.0.0"

    def analyze(self, model: SyntaxModel) -> list[Issue]:
        path = Path(model.path)
        if suggested_path(path) is None:
            return []
        return [
            Issue(
                analyzer_id=self.id,
                message=message_for(path.parent.name),
                span=SourceSpan.whole_line(1),
                fix=NO_FIX,
            )
        ]
