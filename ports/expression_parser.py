"""
Port: ExpressionParser
Odpowiedzialność: zamiana tekstu programu na drzewo AST (przez Node Builder).
"""
from typing import Protocol, runtime_checkable

from contracts import AstNode


@runtime_checkable
class ExpressionParser(Protocol):
    def parse(self, text: str) -> AstNode:
        """
        Parses a single s-expression, e.g. "(add 1 (neg 2.5))".
        Nodes are built bottom-up with the node builder.
        Raises ExpressionSyntaxError on malformed input.
        """
        ...
