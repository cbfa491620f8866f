"""Centralized exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success — no issues, or everything fixable was fixed
  1   Violation — unresolved issues under ``check``, conflicts under ``fix``
  2   Error — parse/IO failure, usage error, unknown analyzer
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
