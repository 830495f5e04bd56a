"""
printer.py — prezentacja RetVal.

DOUBLE_TYPE → wartość z `precision` miejscami po przecinku,
INT_TYPE    → wartość obcięta do liczby całkowitej.
inf/nan wyświetlane wprost, niezależnie od typu.
"""
from __future__ import annotations

import math

from rich.console import Console

from contracts import NumType, RetVal


def format_value(val: RetVal, precision: int = 2) -> str:
    if not math.isfinite(val.value):
        return str(val.value)
    if val.type == NumType.DOUBLE_TYPE:
        return f"{val.value:.{precision}f}"
    return str(int(val.value))


def format_ret_val(val: RetVal, precision: int = 2) -> str:
    """'Type: Integer Value: 5' / 'Type: Double Value: 2.75'."""
    return f"Type: {val.type_name} Value: {format_value(val, precision)}"


def print_ret_val(val: RetVal, precision: int = 2, console: Console | None = None) -> None:
    console = console or Console(highlight=False)
    console.print(format_ret_val(val, precision), markup=False)
