"""
Adapter: ASTEvaluator
Implementuje port Evaluator: rekurencyjne przejście drzewa AST CI LISP.

Arytmetyka na numpy.float64 pod np.errstate(all="ignore"), żeby dzielenie
przez zero, log/sqrt z liczb ujemnych itd. dawały inf/nan jak w libm,
zamiast wyjątków Pythona (ZeroDivisionError, ValueError z math.*).

eval()         — wynik zawsze jako RetVal; błędy → log + wartownik NaN
eval_checked() — waliduje drzewo i zwraca EvalOutcome (ok / kod błędu)

Operacje read, rand, print, equal, less, greater oraz CUSTOM nie mają
wbudowanej implementacji; obsługują je handlery z `custom_functions`
(klucz = nazwa funkcji). Bez handlera wynik to NaN + ostrzeżenie;
wyjątek z handlera jest logowany, wynik to NaN.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping, Optional

import numpy as np

from adapters.operation_registry import (
    EXTENSION_OPERATIONS,
    OPERATION_ARITY,
    func_name,
)
from contracts import (
    AstNode,
    EvalErrorCode,
    EvalOutcome,
    FunctionNode,
    NumberNode,
    OperType,
    RetVal,
    nan_ret_val,
)
from ports.custom_function import CustomFunction

logger = logging.getLogger("ci_lisp.evaluator")

_UNARY_FUNCS: dict[OperType, Callable[[Any], Any]] = {
    OperType.NEG:  np.negative,
    OperType.ABS:  np.fabs,
    OperType.EXP:  np.exp,
    OperType.SQRT: np.sqrt,
    OperType.LOG:  np.log,
    OperType.EXP2: np.exp2,
    OperType.CBRT: np.cbrt,
}

_BINARY_FUNCS: dict[OperType, Callable[[Any, Any], Any]] = {
    OperType.ADD:       np.add,
    OperType.SUB:       np.subtract,
    OperType.MULT:      np.multiply,
    OperType.DIV:       np.divide,
    OperType.REMAINDER: np.fmod,
    OperType.POW:       np.power,
    OperType.MAX:       np.fmax,
    OperType.MIN:       np.fmin,
    OperType.HYPOT:     np.hypot,
}


def _accepts(handler: CustomFunction, count: int) -> bool:
    """True jeśli sygnatura handlera przyjmuje `count` argumentów pozycyjnych."""
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        # Brak sygnatury (np. część funkcji wbudowanych), nie da się sprawdzić
        return True
    try:
        signature.bind(*range(count))
    except TypeError:
        return False
    return True


class ASTEvaluator:
    """Ewaluator drzew CI LISP z opcjonalnym rejestrem handlerów."""

    def __init__(
        self,
        custom_functions: Mapping[str, CustomFunction] | None = None,
    ) -> None:
        self._custom = dict(custom_functions or {})

    def register(self, name: str, handler: CustomFunction) -> None:
        """Dodaje (lub podmienia) handler operacji o podanej nazwie."""
        self._custom[name] = handler

    # -- Evaluator protocol ------------------------------------------------

    def eval(self, node: Optional[AstNode]) -> RetVal:
        if node is None:
            return nan_ret_val()

        if isinstance(node, FunctionNode):
            return self._eval_func_node(node)
        if isinstance(node, NumberNode):
            return self._eval_num_node(node)

        logger.error(
            "Invalid AST node type %s, probably invalid writes somewhere!",
            type(node).__name__,
        )
        return nan_ret_val()

    def eval_checked(self, node: Optional[AstNode]) -> EvalOutcome:
        problem = self._validate(node)
        if problem is not None:
            code, message = problem
            logger.info("Tree rejected (%s): %s", code.value, message)
            return EvalOutcome(ok=False, error_code=code, error=message)
        return EvalOutcome(ok=True, value=self.eval(node))

    # -- Prywatne ----------------------------------------------------------

    @staticmethod
    def _eval_num_node(node: NumberNode) -> RetVal:
        # Liść zachowuje typ z czasu konstrukcji
        return node.value

    def _eval_func_node(self, node: FunctionNode) -> RetVal:
        oper = node.oper

        with np.errstate(all="ignore"):
            if oper in _UNARY_FUNCS:
                a = np.float64(self.eval(node.op1).value)
                value = float(_UNARY_FUNCS[oper](a))
            elif oper in _BINARY_FUNCS:
                a = np.float64(self.eval(node.op1).value)
                b = np.float64(self.eval(node.op2).value)
                value = float(_BINARY_FUNCS[oper](a, b))
            elif oper in EXTENSION_OPERATIONS:
                value = self._eval_extension(node)
            else:
                logger.error("Unknown operation %r in function node", oper)
                return nan_ret_val()

        result = RetVal.of(value)
        logger.debug("%s -> %s %r", self._name_of(node), result.type_name, result.value)
        return result

    def _eval_extension(self, node: FunctionNode) -> float:
        name = self._name_of(node)
        handler = self._custom.get(name)
        if handler is None:
            logger.warning("Operation %r is not supported yet; result is nan.", name)
            return float("nan")

        operands = [self.eval(op).value for op in (node.op1, node.op2) if op is not None]
        try:
            return float(handler(*operands))
        except Exception:
            logger.error("Handler for %r failed; result is nan.", name, exc_info=True)
            return float("nan")

    @staticmethod
    def _name_of(node: FunctionNode) -> str:
        if node.oper == OperType.CUSTOM:
            return node.ident or ""
        return func_name(node.oper) or ""

    def _validate(self, node: Any) -> tuple[EvalErrorCode, str] | None:
        """Pierwszy znaleziony problem w drzewie (DFS, op1 przed op2) lub None."""
        if node is None:
            return EvalErrorCode.MISSING_OPERAND, "empty expression"
        if isinstance(node, NumberNode):
            return None
        if not isinstance(node, FunctionNode):
            return EvalErrorCode.MALFORMED_NODE, f"invalid node type {type(node).__name__}"

        name = self._name_of(node)
        arity = OPERATION_ARITY.get(node.oper)
        if arity is not None:
            required = (node.op1, node.op2)[:arity]
            if any(op is None for op in required):
                given = sum(op is not None for op in (node.op1, node.op2))
                return (
                    EvalErrorCode.MISSING_OPERAND,
                    f"{name!r} expects {arity} operand(s), got {given}",
                )
        elif node.oper in EXTENSION_OPERATIONS:
            handler = self._custom.get(name)
            if handler is None:
                return (
                    EvalErrorCode.UNSUPPORTED_OPERATION,
                    f"operation {name!r} is not supported",
                )
            given = sum(op is not None for op in (node.op1, node.op2))
            if not _accepts(handler, given):
                return (
                    EvalErrorCode.UNSUPPORTED_OPERATION,
                    f"handler for {name!r} does not accept {given} operand(s)",
                )
        else:
            return EvalErrorCode.MALFORMED_NODE, f"unknown operation {node.oper!r}"

        for child in (node.op1, node.op2):
            if child is not None:
                problem = self._validate(child)
                if problem is not None:
                    return problem
        return None
