from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from directive_lines.rules.base import NodeHandler, RuleContext
from directive_lines.source.model import Node, SourceCode
from directive_lines.utils.types import Diagnostic, LintMessage, Policy


logger = logging.getLogger(__name__)

RULE_ID = "lines-around-directive"
DESCRIPTION = "enforce or disallow newlines around directives"
CATEGORY = "Stylistic Issues"
RECOMMENDED = False
DEFAULT_OPTIONS = "always"

ALWAYS = "always"
NEVER = "never"
USE_STRICT = "use strict"

OPTIONS_SCHEMA: Dict[str, Any] = {
    "oneOf": [
        {"enum": [ALWAYS, NEVER]},
        {
            "type": "object",
            "properties": {
                "before": {"enum": [ALWAYS, NEVER]},
                "after": {"enum": [ALWAYS, NEVER]},
            },
            "additionalProperties": False,
            "minProperties": 2,
        },
    ]
}


class ScopeKind(str, Enum):
    PROGRAM = "Program"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"


def resolve_policy(options: Any = None) -> Policy:
    """Expand a rule option into concrete before/after settings.

    A bare ``"always"``/``"never"`` applies to both axes. Objects are
    assumed to have passed schema validation and therefore carry both keys.
    """
    if options is None:
        options = DEFAULT_OPTIONS
    if isinstance(options, str):
        return Policy(before=options, after=options)
    return Policy(before=options["before"], after=options["after"])


def is_use_strict_directive(node: Optional[Node]) -> bool:
    if node is None or node.type != "ExpressionStatement":
        return False
    expression = node.get("expression")
    return (
        isinstance(expression, Node)
        and expression.type == "Literal"
        and expression.get("value") == USE_STRICT
    )


def locate(body: Sequence[Node]) -> Optional[Node]:
    if not body:
        return None
    first_statement = body[0]
    return first_statement if is_use_strict_directive(first_statement) else None


def has_newline_before(source_code: SourceCode, node: Node) -> bool:
    token_before = source_code.token_or_comment_before(node)
    token_line_before = token_before.loc.end.line if token_before else 0
    return node.loc.start.line - token_line_before >= 2


def has_newline_after(source_code: SourceCode, node: Node) -> bool:
    token_after = source_code.token_or_comment_after(node)
    if token_after is None:
        return False
    return token_after.loc.start.line - node.loc.end.line >= 2


def _check_before(
    source_code: SourceCode,
    scope_kind: ScopeKind,
    directive: Node,
    policy: Policy,
) -> Optional[Diagnostic]:
    is_program = scope_kind is ScopeKind.PROGRAM

    # Shebangs are never attached comments but still count as content before the directive.
    if source_code.leading_comments(directive) or (
        is_program and source_code.token_or_comment_before(directive) is not None
    ):
        newline = has_newline_before(source_code, directive)
        if policy.before == ALWAYS and not newline:
            return Diagnostic(location="before", node=directive, expected=True)
        if policy.before == NEVER and newline:
            return Diagnostic(location="before", node=directive, expected=False)
        return None

    # Nothing precedes the directive: never force a newline at the top of the file,
    # but still flag a blank gap when the policy forbids one.
    if is_program and policy.before == NEVER and has_newline_before(source_code, directive):
        return Diagnostic(location="before", node=directive, expected=False)
    return None


def _check_after(
    source_code: SourceCode,
    body: Sequence[Node],
    directive: Node,
    policy: Policy,
) -> Optional[Diagnostic]:
    # lone directive without a trailing comment: nothing to separate it from
    if directive is body[-1] and not source_code.trailing_comments(directive):
        return None

    newline = has_newline_after(source_code, directive)
    if policy.after == ALWAYS and not newline:
        return Diagnostic(location="after", node=directive, expected=True)
    if policy.after == NEVER and newline:
        return Diagnostic(location="after", node=directive, expected=False)
    return None


def evaluate(
    source_code: SourceCode,
    scope_kind: ScopeKind,
    body: Sequence[Node],
    directive: Node,
    policy: Policy,
) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    before = _check_before(source_code, scope_kind, directive, policy)
    if before is not None:
        diagnostics.append(before)
    after = _check_after(source_code, body, directive, policy)
    if after is not None:
        diagnostics.append(after)
    return diagnostics


def scope_body(node: Node) -> Optional[List[Node]]:
    """Statement list of a scope node, or None when the scope has no block."""
    if node.type == ScopeKind.PROGRAM.value:
        return list(node.get("body") or [])

    block = node.get("body")
    # `() => "use strict"` returns a string; it is not a directive.
    if not isinstance(block, Node) or block.type != "BlockStatement":
        return None
    return list(block.get("body") or [])


def check_scope(source_code: SourceCode, node: Node, policy: Policy) -> List[Diagnostic]:
    body = scope_body(node)
    if body is None:
        return []
    directive = locate(body)
    if directive is None:
        return []
    return evaluate(source_code, ScopeKind(node.type), body, directive, policy)


def to_message(diagnostic: Diagnostic) -> LintMessage:
    loc = diagnostic.node.loc
    return LintMessage(
        rule_id=RULE_ID,
        message=diagnostic.message,
        line=loc.start.line,
        column=loc.start.column + 1,
        end_line=loc.end.line,
        end_column=loc.end.column + 1,
    )


def create(context: RuleContext) -> Dict[str, NodeHandler]:
    policy = resolve_policy(context.options)
    source_code = context.source_code
    logger.debug("%s: before=%s after=%s", RULE_ID, policy.before, policy.after)

    def check_directives(node: Node) -> List[LintMessage]:
        return [to_message(item) for item in check_scope(source_code, node, policy)]

    return {kind.value: check_directives for kind in ScopeKind}
