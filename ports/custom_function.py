"""
Port: CustomFunction
Handler for operations the evaluator does not compute itself: the
placeholder built-ins (read, rand, print, equal, less, greater) and
CUSTOM operations resolved by name.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class CustomFunction(Protocol):
    def __call__(self, *operands: float) -> float:
        """
        Receives the evaluated operand magnitudes (only those present
        in the node, in op1, op2 order) and returns the result magnitude.
        The evaluator reclassifies the result as INT/DOUBLE.
        """
        ...
