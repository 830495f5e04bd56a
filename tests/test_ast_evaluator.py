from __future__ import annotations

import logging
import math

import pytest

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.node_builder import create_function_node, create_number_node
from contracts import (
    EvalErrorCode,
    EvaluationError,
    FunctionNode,
    NumType,
    OperType,
    RetVal,
)


def _num(v):
    return create_number_node(v)


def _call(name, a, b=None):
    op1 = _num(a) if isinstance(a, (int, float)) else a
    op2 = _num(b) if isinstance(b, (int, float)) else b
    return create_function_node(name, op1, op2)


def test_missing_node_evaluates_to_integer_nan_sentinel():
    result = ASTEvaluator().eval(None)

    assert result.type == NumType.INT_TYPE
    assert math.isnan(result.value)


@pytest.mark.parametrize("value", [7, -2.5, 0.125, 1e300])
def test_number_leaf_is_returned_unchanged(value):
    leaf = _num(value)

    result = ASTEvaluator().eval(leaf)

    assert result == leaf.value
    assert result.value == value


def test_add_integers_gives_integer():
    result = ASTEvaluator().eval(_call("add", 2, 3))

    assert result == RetVal(type=NumType.INT_TYPE, value=5.0)


def test_add_fractions_gives_double():
    result = ASTEvaluator().eval(_call("add", 2.5, 0.25))

    assert result == RetVal(type=NumType.DOUBLE_TYPE, value=2.75)


def test_result_type_is_reclassified_not_propagated():
    result = ASTEvaluator().eval(_call("add", 2.5, 0.5))

    assert result == RetVal(type=NumType.INT_TYPE, value=3.0)


def test_negate_integer():
    result = ASTEvaluator().eval(_call("neg", 5))

    assert result == RetVal(type=NumType.INT_TYPE, value=-5.0)


@pytest.mark.parametrize(
    "name, a, b, expected",
    [
        ("abs", -4, None, 4.0),
        ("sqrt", 16, None, 4.0),
        ("exp", 0, None, 1.0),
        ("sub", 2, 7, -5.0),
        ("mult", 2.5, 4, 10.0),
        ("div", 7, 2, 3.5),
        ("remainder", 7, 3, 1.0),
        ("remainder", -7, 3, -1.0),
        ("remainder", 5.5, 2, 1.5),
        ("log", 1, None, 0.0),
        ("pow", 2, 10, 1024.0),
        ("max", 3, -1, 3.0),
        ("min", 3, -1, -1.0),
        ("exp2", 3, None, 8.0),
        ("hypot", 3, 4, 5.0),
    ],
)
def test_builtin_operations(name, a, b, expected):
    result = ASTEvaluator().eval(_call(name, a, b))

    assert result.value == pytest.approx(expected)


def test_cbrt_and_exp_are_approximate():
    ev = ASTEvaluator()

    assert ev.eval(_call("cbrt", 27)).value == pytest.approx(3.0)
    assert ev.eval(_call("cbrt", -8)).value == pytest.approx(-2.0)
    assert ev.eval(_call("exp", 1)).value == pytest.approx(math.e)
    assert ev.eval(_call("log", math.e)).value == pytest.approx(1.0)


def test_division_by_zero_gives_double_infinity():
    result = ASTEvaluator().eval(_call("div", 1, 0))

    assert result.value == math.inf
    assert result.type == NumType.DOUBLE_TYPE


def test_zero_by_zero_is_nan():
    result = ASTEvaluator().eval(_call("div", 0, 0))

    assert math.isnan(result.value)
    assert result.type == NumType.DOUBLE_TYPE


def test_domain_errors_follow_floating_point_semantics():
    ev = ASTEvaluator()

    assert math.isnan(ev.eval(_call("sqrt", -1)).value)
    assert math.isnan(ev.eval(_call("log", -1)).value)
    assert ev.eval(_call("log", 0)).value == -math.inf
    assert math.isnan(ev.eval(_call("remainder", 1, 0)).value)


def test_nan_propagates_through_later_operations():
    tree = _call("add", _call("sqrt", -4), 1)

    result = ASTEvaluator().eval(tree)

    assert math.isnan(result.value)


def test_nested_tree():
    tree = _call("add", _call("neg", 3), _call("mult", 2, 4))

    result = ASTEvaluator().eval(tree)

    assert result == RetVal(type=NumType.INT_TYPE, value=5.0)


def test_missing_second_operand_propagates_nan():
    result = ASTEvaluator().eval(_call("add", 1))

    assert math.isnan(result.value)
    assert result.type == NumType.DOUBLE_TYPE


def test_unary_operation_ignores_extra_operand():
    result = ASTEvaluator().eval(_call("neg", 5, 100))

    assert result.value == -5.0


def test_placeholder_operation_without_handler_is_nan(caplog):
    with caplog.at_level(logging.WARNING, logger="ci_lisp.evaluator"):
        result = ASTEvaluator().eval(_call("rand", 1))

    assert math.isnan(result.value)
    assert "'rand' is not supported" in caplog.text


def test_custom_operation_without_handler_is_nan(caplog):
    with caplog.at_level(logging.WARNING, logger="ci_lisp.evaluator"):
        result = ASTEvaluator().eval(_call("myFunc", 1, 2))

    assert math.isnan(result.value)
    assert "'myFunc'" in caplog.text


def test_custom_operation_dispatches_to_handler_by_name():
    calls = []

    def my_func(a, b):
        calls.append((a, b))
        return a * 10 + b

    ev = ASTEvaluator(custom_functions={"myFunc": my_func})
    result = ev.eval(_call("myFunc", 1, _call("add", 1, 1)))

    assert calls == [(1.0, 2.0)]
    assert result == RetVal(type=NumType.INT_TYPE, value=12.0)


def test_placeholder_builtin_can_be_registered():
    ev = ASTEvaluator()
    ev.register("less", lambda a, b: 1.0 if a < b else 0.0)

    assert ev.eval(_call("less", 1, 2)).value == 1.0
    assert ev.eval(_call("less", 2, 1)).value == 0.0


def test_handler_receives_only_present_operands():
    ev = ASTEvaluator(custom_functions={"half": lambda a: a / 2})

    result = ev.eval(_call("half", 5))

    assert result == RetVal(type=NumType.DOUBLE_TYPE, value=2.5)


def test_raising_handler_is_reported_and_yields_nan(caplog):
    ev = ASTEvaluator(custom_functions={"boom": lambda a: 1 / 0})

    with caplog.at_level(logging.ERROR, logger="ci_lisp.evaluator"):
        result = ev.eval(_call("boom", 1))

    assert math.isnan(result.value)
    assert result.type == NumType.DOUBLE_TYPE
    assert "Handler for 'boom' failed" in caplog.text
    assert "ZeroDivisionError" in caplog.text


def test_handler_returning_non_number_is_reported_and_yields_nan(caplog):
    ev = ASTEvaluator(custom_functions={"word": lambda a: "seven"})

    with caplog.at_level(logging.ERROR, logger="ci_lisp.evaluator"):
        result = ev.eval(_call("add", _call("word", 1), 1))

    assert math.isnan(result.value)
    assert "Handler for 'word' failed" in caplog.text


def test_malformed_node_is_reported_and_returns_sentinel(caplog):
    with caplog.at_level(logging.ERROR, logger="ci_lisp.evaluator"):
        result = ASTEvaluator().eval("not a node")  # type: ignore[arg-type]

    assert math.isnan(result.value)
    assert result.type == NumType.INT_TYPE
    assert "Invalid AST node type" in caplog.text


def test_evaluation_does_not_mutate_tree():
    tree = _call("add", _call("neg", 3), 4.5)
    before = tree.model_dump()

    ev = ASTEvaluator()
    ev.eval(tree)
    ev.eval(tree)

    assert tree.model_dump() == before


# -- eval_checked ------------------------------------------------------------

def test_eval_checked_returns_value_for_valid_tree():
    outcome = ASTEvaluator().eval_checked(_call("hypot", 3, 4))

    assert outcome.ok
    assert outcome.value == RetVal(type=NumType.INT_TYPE, value=5.0)
    assert outcome.unwrap().value == 5.0


def test_eval_checked_keeps_legitimate_nan_as_success():
    outcome = ASTEvaluator().eval_checked(_call("sqrt", -1))

    assert outcome.ok
    assert math.isnan(outcome.value.value)


def test_eval_checked_flags_missing_operand():
    outcome = ASTEvaluator().eval_checked(_call("mult", _call("add", 1), 2))

    assert not outcome.ok
    assert outcome.error_code == EvalErrorCode.MISSING_OPERAND
    assert "'add' expects 2 operand(s), got 1" == outcome.error


def test_eval_checked_flags_empty_tree():
    outcome = ASTEvaluator().eval_checked(None)

    assert outcome.error_code == EvalErrorCode.MISSING_OPERAND


def test_eval_checked_flags_unsupported_operation():
    outcome = ASTEvaluator().eval_checked(_call("print", 1))

    assert outcome.error_code == EvalErrorCode.UNSUPPORTED_OPERATION
    with pytest.raises(EvaluationError):
        outcome.unwrap()


def test_eval_checked_accepts_registered_custom_operation():
    ev = ASTEvaluator(custom_functions={"twice": lambda a: 2 * a})

    outcome = ev.eval_checked(_call("twice", 21))

    assert outcome.ok
    assert outcome.value.value == 42.0


def test_eval_checked_flags_malformed_child():
    bad = FunctionNode.model_construct(
        node_type="function", oper=OperType.ADD, op1="junk", op2=_num(1), ident=None,
    )

    outcome = ASTEvaluator().eval_checked(bad)

    assert outcome.error_code == EvalErrorCode.MALFORMED_NODE


def test_eval_checked_rejects_handler_with_wrong_operand_count():
    ev = ASTEvaluator(custom_functions={"one": lambda a: a})

    outcome = ev.eval_checked(_call("one", 1, 2))

    assert not outcome.ok
    assert outcome.error_code == EvalErrorCode.UNSUPPORTED_OPERATION
    assert outcome.error == "handler for 'one' does not accept 2 operand(s)"


def test_eval_checked_accepts_variadic_handler():
    ev = ASTEvaluator(custom_functions={"total": lambda *xs: sum(xs)})

    outcome = ev.eval_checked(_call("total", 1, 2))

    assert outcome.ok
    assert outcome.value.value == 3.0
