"""
contracts.py — Jedyne źródło prawdy dla wszystkich typów danych w CI LISP.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.
"""
from __future__ import annotations

import math
from enum import Enum, IntEnum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONTRACTS_VERSION = "1.0.0"


# ─────────────────────────── Wyjątki ─────────────────────────────────────

class CiLispError(Exception):
    """Bazowy wyjątek rdzenia CI LISP."""


class NodeConstructionError(CiLispError):
    """Nie udało się zbudować węzła AST (odpowiednik błędu alokacji)."""


class EvaluationError(CiLispError):
    """Drzewo nie nadaje się do ewaluacji (tryb strict)."""


class ExpressionSyntaxError(CiLispError, SyntaxError):
    """Błąd składni s-wyrażenia; `position` to offset znaku w tekście."""

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


# ─────────────────────────── Wartości liczbowe ───────────────────────────

class NumType(IntEnum):
    INT_TYPE = 0
    DOUBLE_TYPE = 1


# Nazwy typów do wyświetlania; indeks = NumType
NUM_NAMES: tuple[str, ...] = ("Integer", "Double")


def num_type_name(num_type: NumType) -> str:
    return NUM_NAMES[num_type]


def classify(value: float) -> NumType:
    """
    INT_TYPE gdy wartość nie ma części ułamkowej (ceil(v) == v).
    inf i NaN zawsze DOUBLE_TYPE.
    """
    if math.isfinite(value) and math.ceil(value) == value:
        return NumType.INT_TYPE
    return NumType.DOUBLE_TYPE


class RetVal(BaseModel):
    """Wynik ewaluacji: magnituda zawsze jako float, typ to tylko metadane."""
    model_config = ConfigDict(frozen=True)

    type: NumType
    value: float

    @classmethod
    def of(cls, value: float) -> RetVal:
        """Buduje RetVal z typem wyliczonym regułą klasyfikacji."""
        value = float(value)
        return cls(type=classify(value), value=value)

    @property
    def type_name(self) -> str:
        return num_type_name(self.type)


def nan_ret_val() -> RetVal:
    """Wartość-wartownik: INT_TYPE z NaN (brak węzła / błąd)."""
    return RetVal(type=NumType.INT_TYPE, value=math.nan)


# ─────────────────────────── Operacje ────────────────────────────────────

class OperType(IntEnum):
    # Kolejność MUSI odpowiadać FUNC_NAMES w adapters/operation_registry.py
    NEG = 0
    ABS = 1
    EXP = 2
    SQRT = 3
    ADD = 4
    SUB = 5
    MULT = 6
    DIV = 7
    REMAINDER = 8
    LOG = 9
    POW = 10
    MAX = 11
    MIN = 12
    EXP2 = 13
    CBRT = 14
    HYPOT = 15
    READ = 16
    RAND = 17
    PRINT = 18
    EQUAL = 19
    LESS = 20
    GREATER = 21
    CUSTOM = 22


# ─────────────────────────── AST ─────────────────────────────────────────

class NumberNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["number"] = "number"
    value: RetVal


class FunctionNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["function"] = "function"
    oper: OperType
    op1: Optional["AstNode"] = None
    op2: Optional["AstNode"] = None
    ident: Optional[str] = None   # tylko dla OperType.CUSTOM


AstNode = Annotated[Union[NumberNode, FunctionNode], Field(discriminator="node_type")]
FunctionNode.model_rebuild()


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalErrorCode(str, Enum):
    MALFORMED_NODE = "MALFORMED_NODE"
    MISSING_OPERAND = "MISSING_OPERAND"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"


class EvalOutcome(BaseModel):
    """
    Jawny wynik ewaluacji: odróżnia "matematyka dała NaN" od
    "drzewo było niepoprawne".
    """
    ok: bool
    value: Optional[RetVal] = None
    error_code: Optional[EvalErrorCode] = None
    error: Optional[str] = None

    def unwrap(self) -> RetVal:
        if not self.ok or self.value is None:
            raise EvaluationError(self.error or "evaluation failed")
        return self.value
