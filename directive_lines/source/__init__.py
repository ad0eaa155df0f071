from .model import Node, Position, SourceCode, SourceLocation, Token
from .parser import SourceParseError, parse_source

__all__ = [
    "Node",
    "Position",
    "SourceCode",
    "SourceLocation",
    "Token",
    "SourceParseError",
    "parse_source",
]
