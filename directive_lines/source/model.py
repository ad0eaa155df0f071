from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


COMMENT_TYPES = {"Line", "Block", "Shebang"}


@dataclass(frozen=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True)
class SourceLocation:
    start: Position
    end: Position


@dataclass(frozen=True)
class Token:
    """A lexical token or a comment. Comments use the types Line, Block and Shebang."""

    type: str
    value: str
    range: Tuple[int, int]
    loc: SourceLocation

    @property
    def is_comment(self) -> bool:
        return self.type in COMMENT_TYPES


@dataclass(eq=False)
class Node:
    type: str
    range: Tuple[int, int]
    loc: SourceLocation
    fields: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def children(self) -> Iterator["Node"]:
        for value in self.fields.values():
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield item


class SourceCode:
    """Syntax tree plus the ordered token/comment stream of one source unit.

    Lookups of the nearest token or comment around a node are answered by
    binary search over offsets, so no query rescans the stream.
    """

    def __init__(
        self,
        text: str,
        ast: Node,
        tokens: Sequence[Token],
        comments: Sequence[Token],
        path: Optional[str] = None,
    ) -> None:
        self.text = text
        self.ast = ast
        self.path = path
        self.tokens: List[Token] = sorted(tokens, key=lambda item: item.range[0])
        self.comments: List[Token] = sorted(comments, key=lambda item: item.range[0])
        self._stream: List[Token] = sorted(
            [*self.tokens, *self.comments], key=lambda item: item.range[0]
        )
        self._starts = [item.range[0] for item in self._stream]
        self._ends = [item.range[1] for item in self._stream]

    def token_or_comment_before(self, node: Node) -> Optional[Token]:
        index = bisect.bisect_right(self._ends, node.range[0]) - 1
        if index < 0:
            return None
        return self._stream[index]

    def token_or_comment_after(self, node: Node) -> Optional[Token]:
        index = bisect.bisect_left(self._starts, node.range[1])
        if index >= len(self._stream):
            return None
        return self._stream[index]

    def leading_comments(self, node: Node) -> List[Token]:
        """Comments between the previous code token and ``node``.

        A shebang is never attached to a node.
        """
        collected: List[Token] = []
        index = bisect.bisect_right(self._ends, node.range[0]) - 1
        while index >= 0 and self._stream[index].is_comment:
            item = self._stream[index]
            if item.type != "Shebang":
                collected.append(item)
            index -= 1
        collected.reverse()
        return collected

    def trailing_comments(self, node: Node) -> List[Token]:
        collected: List[Token] = []
        index = bisect.bisect_left(self._starts, node.range[1])
        while index < len(self._stream) and self._stream[index].is_comment:
            collected.append(self._stream[index])
            index += 1
        return collected

    def walk(self) -> Iterator[Node]:
        stack = [self.ast]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))
