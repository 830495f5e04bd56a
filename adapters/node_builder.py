"""
Node Builder / Node Destructor — cykl życia węzłów AST.

create_number_node()   — liść liczbowy, typ z reguły klasyfikacji
create_function_node() — wywołanie funkcji; nazwa zachowana tylko dla CUSTOM
free_node()            — rekurencyjne zwolnienie drzewa (op1, op2, ident, węzeł)

Węzły są niemutowalne (frozen), drzewo nie ma współdzielonych poddrzew.
Pamięć odzyskuje GC; free_node czyni przejście po własności jawnym:
callback `release` dostaje każdy zwalniany obiekt dokładnie raz.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError

from adapters.operation_registry import resolve_func
from contracts import (
    AstNode,
    FunctionNode,
    NodeConstructionError,
    NumberNode,
    OperType,
    RetVal,
)

logger = logging.getLogger("ci_lisp.node_builder")

ReleaseHook = Callable[[Any], None]


def create_number_node(value: float) -> NumberNode:
    try:
        return NumberNode(value=RetVal.of(value))
    except (TypeError, ValueError, ValidationError) as exc:
        logger.error("Number node construction failed for %r: %s", value, exc)
        raise NodeConstructionError(f"cannot build number node from {value!r}") from exc


def create_function_node(
    func_name: str,
    op1: Optional[AstNode],
    op2: Optional[AstNode] = None,
) -> FunctionNode:
    """
    Buduje węzeł funkcji. Arność NIE jest tu sprawdzana,
    patrz ASTEvaluator.eval_checked().
    """
    oper = resolve_func(func_name)
    ident = func_name if oper == OperType.CUSTOM else None
    try:
        return FunctionNode(oper=oper, op1=op1, op2=op2, ident=ident)
    except ValidationError as exc:
        logger.error("Function node construction failed for %r: %s", func_name, exc)
        raise NodeConstructionError(f"cannot build function node {func_name!r}") from exc


def free_node(node: Optional[AstNode], release: ReleaseHook | None = None) -> int:
    """
    Zwalnia drzewo od korzenia. Kolejność: op1, op2, ident (tylko CUSTOM),
    na końcu sam węzeł. Zwraca liczbę zwolnionych węzłów.
    """
    if node is None:
        return 0

    freed = 0
    if isinstance(node, FunctionNode):
        freed += free_node(node.op1, release)
        freed += free_node(node.op2, release)
        if node.oper == OperType.CUSTOM and node.ident is not None and release:
            release(node.ident)

    if release:
        release(node)
    return freed + 1
