from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Optional

import esprima
from esprima.error_handler import Error as EsprimaError

from .model import Node, Position, SourceCode, SourceLocation, Token


logger = logging.getLogger(__name__)

SOURCE_TYPES = {"script", "module"}
SHEBANG_PATTERN = re.compile(r"^#!([^\r\n]*)")

_NODE_META_KEYS = {"type", "range", "loc"}
_STREAM_KEYS = {"tokens", "comments", "errors"}


class SourceParseError(RuntimeError):
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        location = path or "<text>"
        if line is not None:
            location = f"{location}:{line}:{column or 0}"
        super().__init__(f"{location}: {message}")
        self.path = path
        self.line = line
        self.column = column
        self.description = message


def _get(obj: Any, key: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(key, default)
    value = getattr(obj, key, default)
    return default if value is None else value


def _items(obj: Any) -> Iterable[tuple]:
    if isinstance(obj, dict):
        return obj.items()
    return vars(obj).items()


def _is_node(obj: Any) -> bool:
    return (
        obj is not None
        and not isinstance(obj, (str, int, float, bool, list, tuple))
        and isinstance(_get(obj, "type"), str)
        and _get(obj, "range") is not None
    )


def _location(raw: Any) -> SourceLocation:
    start = _get(raw, "start")
    end = _get(raw, "end")
    return SourceLocation(
        start=Position(line=int(_get(start, "line", 1)), column=int(_get(start, "column", 0))),
        end=Position(line=int(_get(end, "line", 1)), column=int(_get(end, "column", 0))),
    )


def _range(raw: Any) -> tuple:
    start, end = list(raw)[:2]
    return int(start), int(end)


def _convert_value(value: Any) -> Any:
    if _is_node(value):
        return _convert_node(value)
    if isinstance(value, (list, tuple)):
        return [_convert_value(item) for item in value]
    return value


def _convert_node(raw: Any) -> Node:
    fields = {}
    for key, value in _items(raw):
        if key in _NODE_META_KEYS or key in _STREAM_KEYS or key.startswith("_"):
            continue
        fields[key] = _convert_value(value)
    return Node(
        type=str(_get(raw, "type")),
        range=_range(_get(raw, "range")),
        loc=_location(_get(raw, "loc")),
        fields=fields,
    )


def _convert_token(raw: Any, token_type: Optional[str] = None) -> Token:
    return Token(
        type=token_type or str(_get(raw, "type")),
        value=str(_get(raw, "value", "")),
        range=_range(_get(raw, "range")),
        loc=_location(_get(raw, "loc")),
    )


def parse_source(
    text: str,
    source_type: str = "script",
    path: Optional[str] = None,
) -> SourceCode:
    """Parse JavaScript text into a :class:`SourceCode`.

    A leading ``#!`` line is rewritten to a line comment of the same length
    before parsing and reported back as a ``Shebang`` comment.
    """
    if source_type not in SOURCE_TYPES:
        raise ValueError(f"source_type must be one of: {', '.join(sorted(SOURCE_TYPES))}")

    has_shebang = SHEBANG_PATTERN.match(text) is not None
    code = SHEBANG_PATTERN.sub(lambda match: f"//{match.group(1)}", text, count=1)
    parse = esprima.parseModule if source_type == "module" else esprima.parseScript

    try:
        program = parse(code, {"loc": True, "range": True, "tokens": True, "comment": True})
    except EsprimaError as exc:
        raise SourceParseError(
            str(getattr(exc, "description", None) or exc),
            path=path,
            line=getattr(exc, "lineNumber", None),
            column=getattr(exc, "column", None),
        ) from exc

    comments: List[Token] = []
    for index, raw in enumerate(_get(program, "comments", []) or []):
        comment_type = "Shebang" if has_shebang and index == 0 else None
        comments.append(_convert_token(raw, token_type=comment_type))
    tokens = [_convert_token(raw) for raw in _get(program, "tokens", []) or []]

    ast = _convert_node(program)

    logger.debug(
        "parsed %s as %s: %d token(s), %d comment(s)",
        path or "<text>",
        source_type,
        len(tokens),
        len(comments),
    )
    return SourceCode(text=text, ast=ast, tokens=tokens, comments=comments, path=path)
