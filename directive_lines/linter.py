from __future__ import annotations

import logging
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from directive_lines.rules import list_rule_descriptors, resolve_enabled_rules
from directive_lines.rules.base import LintRule, NodeHandler, RuleContext, resolve_rule_options
from directive_lines.source.model import SourceCode
from directive_lines.source.parser import SourceParseError, parse_source
from directive_lines.utils.config import DEFAULT_CONFIG, RULE_OFF, config_hash
from directive_lines.utils.types import FileResult, LintMessage, LintReport


logger = logging.getLogger(__name__)


class Linter:
    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        enabled_rules: Optional[Sequence[str]] = None,
    ) -> None:
        self.config = config if config is not None else dict(DEFAULT_CONFIG)
        self.rules = self._configure_rules(enabled_rules)

    def available_rules(self) -> List[dict]:
        return list_rule_descriptors()

    def _configure_rules(self, enabled_rules: Optional[Sequence[str]]) -> List[Tuple[LintRule, Any]]:
        rule_options = self.config.get("rules", {})
        configured: List[Tuple[LintRule, Any]] = []
        for rule in resolve_enabled_rules(enabled_rules):
            options = rule_options.get(rule.rule_id)
            if options == RULE_OFF or options is False:
                logger.debug("rule %s is turned off", rule.rule_id)
                continue
            configured.append((rule, resolve_rule_options(rule, options)))
        return configured

    def lint_source(self, source_code: SourceCode) -> List[LintMessage]:
        dispatch: Dict[str, List[NodeHandler]] = {}
        for rule, options in self.rules:
            context = RuleContext(source_code=source_code, options=options)
            for node_type, handler in rule.create(context).items():
                dispatch.setdefault(node_type, []).append(handler)

        messages: List[LintMessage] = []
        for node in source_code.walk():
            for handler in dispatch.get(node.type, []):
                messages.extend(handler(node))
        return sorted(messages, key=lambda item: (item.line, item.column))

    def lint_text(
        self,
        text: str,
        path: str = "<text>",
        source_type: Optional[str] = None,
    ) -> FileResult:
        resolved_type = source_type or self._source_type_for(path)
        try:
            source_code = parse_source(text, source_type=resolved_type, path=path)
        except SourceParseError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            return FileResult(path=path, fatal=str(exc))
        return FileResult(path=path, messages=self.lint_source(source_code))

    def lint_paths(self, paths: Iterable[Path], source_type: Optional[str] = None) -> LintReport:
        results: List[FileResult] = []
        for file_path in self.collect_files(paths):
            logger.info("Linting %s", file_path)
            try:
                text = file_path.read_text(encoding="utf-8")
            except (UnicodeDecodeError, OSError) as exc:
                logger.warning("Skipping %s: %s", file_path, exc)
                results.append(FileResult(path=str(file_path), fatal=f"{file_path}: unreadable source: {exc}"))
                continue
            results.append(self.lint_text(text, path=str(file_path), source_type=source_type))

        report = LintReport(
            files=results,
            config_hash=config_hash(self.config),
            generated_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            options={rule.rule_id: options for rule, options in self.rules},
        )
        report.summary = self._summarize(report)
        return report

    def collect_files(self, paths: Iterable[Path]) -> List[Path]:
        extensions = set(self.config.get("source", {}).get("extensions", []))
        collected: List[Path] = []
        for path in paths:
            if path.is_dir():
                collected.extend(
                    sorted(
                        item
                        for item in path.rglob("*")
                        if item.is_file() and item.suffix in extensions
                    )
                )
            elif path.is_file():
                collected.append(path)
            else:
                raise FileNotFoundError(f"No such file or directory: {path}")
        return collected

    def _source_type_for(self, path: str) -> str:
        mode = self.config.get("source", {}).get("source_type", "auto")
        if mode != "auto":
            return mode
        return "module" if path.endswith(".mjs") else "script"

    @staticmethod
    def _summarize(report: LintReport) -> str:
        if not report.error_count and not report.fatal_count:
            return f"No problems found in {len(report.files)} file(s)."
        summary = f"{report.error_count} problem(s) in {len(report.files)} file(s)"
        if report.fatal_count:
            summary = f"{summary}; {report.fatal_count} file(s) could not be parsed"
        return summary


def report_to_dict(report: LintReport) -> Dict[str, object]:
    payload = asdict(report)
    payload["error_count"] = report.error_count
    payload["fatal_count"] = report.fatal_count
    return payload
