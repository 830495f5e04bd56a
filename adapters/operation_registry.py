"""
Operation Registry — mapowanie nazw funkcji na OperType.

FUNC_NAMES musi być zsynchronizowane z OperType: indeks i w tablicy
odpowiada wartości i w enumie. Nazwy spoza tablicy → OperType.CUSTOM.
"""
from __future__ import annotations

from types import MappingProxyType

from contracts import OperType

FUNC_NAMES: tuple[str, ...] = (
    "neg",
    "abs",
    "exp",
    "sqrt",
    "add",
    "sub",
    "mult",
    "div",
    "remainder",
    "log",
    "pow",
    "max",
    "min",
    "exp2",
    "cbrt",
    "hypot",
    "read",
    "rand",
    "print",
    "equal",
    "less",
    "greater",
)

if len(FUNC_NAMES) != OperType.CUSTOM:
    raise RuntimeError("FUNC_NAMES is out of sync with OperType")

# Liczba operandów wbudowanych operacji (placeholdery i CUSTOM nie mają arności)
OPERATION_ARITY = MappingProxyType({
    OperType.NEG: 1,
    OperType.ABS: 1,
    OperType.EXP: 1,
    OperType.SQRT: 1,
    OperType.LOG: 1,
    OperType.EXP2: 1,
    OperType.CBRT: 1,
    OperType.ADD: 2,
    OperType.SUB: 2,
    OperType.MULT: 2,
    OperType.DIV: 2,
    OperType.REMAINDER: 2,
    OperType.POW: 2,
    OperType.MAX: 2,
    OperType.MIN: 2,
    OperType.HYPOT: 2,
})

# Operacje bez wbudowanej implementacji, obsługiwane przez handlery
EXTENSION_OPERATIONS = frozenset({
    OperType.READ,
    OperType.RAND,
    OperType.PRINT,
    OperType.EQUAL,
    OperType.LESS,
    OperType.GREATER,
    OperType.CUSTOM,
})


def resolve_func(func_name: str) -> OperType:
    """Liniowe przeszukanie FUNC_NAMES; dokładne dopasowanie, bez case folding."""
    for i, name in enumerate(FUNC_NAMES):
        if name == func_name:
            return OperType(i)
    return OperType.CUSTOM


def func_name(oper: OperType) -> str | None:
    """Odwrotność resolve_func; None dla CUSTOM."""
    if oper == OperType.CUSTOM:
        return None
    return FUNC_NAMES[oper]
