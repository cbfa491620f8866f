"""Fix engine: plan building, conflict detection, text rewriting and the
``mod.rs`` rename."""

from rust_quality.autofix.apply import FixResult, apply, fix_file
from rust_quality.autofix.plan import EditPlan, PlanEntry, build_plan
from rust_quality.autofix.rename import (
    ModRsRename,
    RenameResult,
    plan_renames,
    rename_module_file,
)

__all__ = [
    "EditPlan",
    "FixResult",
    "ModRsRename",
    "PlanEntry",
    "RenameResult",
    "apply",
    "build_plan",
    "fix_file",
    "plan_renames",
    "rename_module_file",
]
