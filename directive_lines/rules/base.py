from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from jsonschema import Draft202012Validator

from directive_lines.source.model import Node, SourceCode
from directive_lines.utils.types import LintMessage


class InvalidRuleOptionsError(ValueError):
    def __init__(self, rule_id: str, errors: Sequence[str]) -> None:
        super().__init__(f"Invalid options for rule '{rule_id}': {'; '.join(errors)}")
        self.rule_id = rule_id
        self.errors = list(errors)


@dataclass
class RuleContext:
    source_code: SourceCode
    options: Any


NodeHandler = Callable[[Node], List[LintMessage]]
RuleFactory = Callable[[RuleContext], Dict[str, NodeHandler]]


@dataclass(frozen=True)
class LintRule:
    rule_id: str
    description: str
    create: RuleFactory
    category: str = ""
    recommended: bool = False
    schema: Dict[str, Any] = field(default_factory=dict)
    default_options: Any = None


def validate_rule_options(rule: LintRule, options: Any) -> List[str]:
    if not rule.schema:
        return []
    validator = Draft202012Validator(rule.schema)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(options), key=lambda item: list(item.path)):
        location = ".".join(str(part) for part in error.path) or "<root>"
        errors.append(f"{location}: {error.message}")
    return errors


def resolve_rule_options(rule: LintRule, options: Any) -> Any:
    if options is None:
        return rule.default_options
    errors = validate_rule_options(rule, options)
    if errors:
        raise InvalidRuleOptionsError(rule.rule_id, errors)
    return options
