from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from directive_lines.source.model import Node


@dataclass(frozen=True)
class Policy:
    before: str
    after: str


@dataclass(frozen=True)
class Diagnostic:
    location: str
    node: Node
    expected: bool

    @property
    def message(self) -> str:
        expected = "Expected" if self.expected else "Unexpected"
        return f'{expected} newline {self.location} "use strict" directive.'


@dataclass
class LintMessage:
    rule_id: str
    message: str
    line: int
    column: int
    end_line: int
    end_column: int
    severity: str = "error"


@dataclass
class FileResult:
    path: str
    messages: List[LintMessage] = field(default_factory=list)
    fatal: Optional[str] = None

    @property
    def error_count(self) -> int:
        return len(self.messages)


@dataclass
class LintReport:
    files: List[FileResult] = field(default_factory=list)
    config_hash: str = ""
    summary: str = ""
    generated_at: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(item.error_count for item in self.files)

    @property
    def fatal_count(self) -> int:
        return sum(1 for item in self.files if item.fatal)
