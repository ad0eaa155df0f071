from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from . import lines_around_directive
from .base import LintRule


def get_rule_registry() -> Dict[str, LintRule]:
    rules = [
        LintRule(
            rule_id=lines_around_directive.RULE_ID,
            description=lines_around_directive.DESCRIPTION,
            create=lines_around_directive.create,
            category=lines_around_directive.CATEGORY,
            recommended=lines_around_directive.RECOMMENDED,
            schema=lines_around_directive.OPTIONS_SCHEMA,
            default_options=lines_around_directive.DEFAULT_OPTIONS,
        ),
    ]
    return {rule.rule_id: rule for rule in rules}


def list_rule_descriptors() -> List[dict]:
    registry = get_rule_registry()
    return [
        {
            "rule_id": rule_id,
            "description": rule.description,
            "category": rule.category,
            "recommended": rule.recommended,
        }
        for rule_id, rule in sorted(registry.items())
    ]


def resolve_enabled_rules(enable: Optional[Iterable[str]]) -> List[LintRule]:
    registry = get_rule_registry()
    if not enable:
        return [registry[key] for key in sorted(registry.keys())]

    selected: List[LintRule] = []
    for rule_id in enable:
        if rule_id not in registry:
            available = ", ".join(sorted(registry.keys()))
            raise ValueError(f"Unknown rule '{rule_id}'. Available: {available}")
        selected.append(registry[rule_id])
    return selected
