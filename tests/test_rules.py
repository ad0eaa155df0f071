from __future__ import annotations

import unittest

from directive_lines.rules import get_rule_registry, list_rule_descriptors, resolve_enabled_rules
from directive_lines.rules.base import InvalidRuleOptionsError, resolve_rule_options, validate_rule_options
from directive_lines.rules.lines_around_directive import RULE_ID, ScopeKind, resolve_policy
from directive_lines.utils.types import Policy


class RuleRegistryTests(unittest.TestCase):
    def test_rule_listing_includes_metadata(self) -> None:
        rules = {item["rule_id"]: item for item in list_rule_descriptors()}
        self.assertIn(RULE_ID, rules)
        self.assertEqual(rules[RULE_ID]["category"], "Stylistic Issues")
        self.assertFalse(rules[RULE_ID]["recommended"])

    def test_unknown_rule_is_rejected(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            resolve_enabled_rules(["no-such-rule"])
        self.assertIn(RULE_ID, str(ctx.exception))

    def test_default_enables_every_rule(self) -> None:
        self.assertEqual([rule.rule_id for rule in resolve_enabled_rules(None)], [RULE_ID])

    def test_handlers_cover_every_scope_kind(self) -> None:
        from directive_lines.rules.base import RuleContext
        from directive_lines.source.parser import parse_source

        rule = get_rule_registry()[RULE_ID]
        handlers = rule.create(RuleContext(source_code=parse_source(""), options="always"))
        self.assertEqual(set(handlers), {kind.value for kind in ScopeKind})
        self.assertEqual(len({id(handler) for handler in handlers.values()}), 1)

    def test_rule_context_carries_only_source_and_options(self) -> None:
        from dataclasses import fields

        from directive_lines.rules.base import RuleContext

        self.assertEqual([item.name for item in fields(RuleContext)], ["source_code", "options"])


class RuleOptionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rule = get_rule_registry()[RULE_ID]

    def test_accepts_symbolic_and_complete_object_options(self) -> None:
        for options in ("always", "never", {"before": "never", "after": "always"}):
            with self.subTest(options=options):
                self.assertEqual(validate_rule_options(self.rule, options), [])

    def test_rejects_partial_unknown_and_extra_options(self) -> None:
        for options in (
            {"before": "never"},
            {"after": "always"},
            "sometimes",
            {"before": "never", "after": "always", "around": "never"},
            {"before": "never", "after": "maybe"},
            ["always"],
        ):
            with self.subTest(options=options):
                with self.assertRaises(InvalidRuleOptionsError) as ctx:
                    resolve_rule_options(self.rule, options)
                self.assertEqual(ctx.exception.rule_id, RULE_ID)
                self.assertTrue(ctx.exception.errors)

    def test_missing_options_fall_back_to_always(self) -> None:
        self.assertEqual(resolve_rule_options(self.rule, None), "always")
        self.assertEqual(resolve_policy(None), Policy(before="always", after="always"))

    def test_symbolic_option_expands_to_both_axes(self) -> None:
        self.assertEqual(resolve_policy("never"), Policy(before="never", after="never"))
        self.assertEqual(
            resolve_policy({"before": "always", "after": "never"}),
            Policy(before="always", after="never"),
        )


if __name__ == "__main__":
    unittest.main()
