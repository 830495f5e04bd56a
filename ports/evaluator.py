"""
Port: Evaluator
Odpowiedzialność: deterministyczne liczenie drzew AST CI LISP.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import AstNode, EvalOutcome, RetVal


@runtime_checkable
class Evaluator(Protocol):
    def eval(self, node: Optional[AstNode]) -> RetVal:
        """
        Recursively evaluates an AST node to a RetVal.
        A missing node evaluates to the sentinel RetVal(INT_TYPE, nan).
        Never raises for numeric domain issues: division by zero, log or
        sqrt of negatives follow IEEE-754 (inf / nan).
        Malformed nodes are reported on the diagnostic logger and
        evaluate to the sentinel.
        """
        ...

    def eval_checked(self, node: Optional[AstNode]) -> EvalOutcome:
        """
        Validates the tree (node kinds, operand count of built-ins,
        handler availability) and evaluates it.
        Returns EvalOutcome(ok=False, error_code=...) instead of a sentinel
        when the tree cannot be evaluated.
        """
        ...
