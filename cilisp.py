#!/usr/bin/env python3
"""
cilisp.py — CLI narzędzie CI LISP.

Wyniki idą na stdout, diagnostyka (logging) na stderr, więc można je
przekierować niezależnie: python cilisp.py eval -f prog.txt 2> cilisp.log

Konfiguracja: zmienne środowiskowe z prefiksem CI_LISP_ lub plik .env
(np. CI_LISP_LOG_LEVEL=DEBUG, CI_LISP_FLOAT_PRECISION=4).

Podkomendy:
    eval  — policz wyrażenia (po jednym na linię) z --text, --file lub stdin
    repl  — interaktywna pętla; 'quit' lub EOF kończy
    tree  — wypisz AST wyrażenia jako JSON

Użycie:
    python cilisp.py eval --text "(add 1 (mult 2 3))"
    python cilisp.py eval --file program.txt --strict
    python cilisp.py repl
    python cilisp.py tree --text "(hypot 3 4)"
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable

from rich.console import Console

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser import SExprParser
from adapters.node_builder import free_node
from adapters.printer import format_ret_val
from config import Settings
from contracts import ExpressionSyntaxError, RetVal

logger = logging.getLogger("ci_lisp")

_QUIT = "quit"


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_lines(args: argparse.Namespace) -> list[str]:
    if getattr(args, "file", None):
        try:
            with open(args.file, encoding="utf-8") as fh:
                text = fh.read()
        except OSError as e:
            print(f"Błąd odczytu pliku: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        text = getattr(args, "text", None) or sys.stdin.read()
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        print("Błąd: podaj wyrażenie przez --text, --file lub stdin", file=sys.stderr)
        sys.exit(1)
    return lines


def _evaluate_line(
    line: str,
    parser: SExprParser,
    evaluator: ASTEvaluator,
    strict: bool,
) -> RetVal:
    """Parsuje, liczy i zwalnia drzewo. Rzuca ExpressionSyntaxError / EvaluationError."""
    root = parser.parse(line)
    try:
        if strict:
            return evaluator.eval_checked(root).unwrap()
        return evaluator.eval(root)
    finally:
        # Pamięć odzyskuje GC; to przejście tylko odtwarza zwalnianie drzewa od korzenia
        free_node(root)


def _run_lines(lines: Iterable[str], strict: bool, precision: int) -> int:
    parser = SExprParser()
    evaluator = ASTEvaluator()
    failures = 0
    for line in lines:
        try:
            val = _evaluate_line(line, parser, evaluator, strict)
        except ExpressionSyntaxError as e:
            logger.error("Syntax error: %s", e)
            failures += 1
            continue
        except Exception as e:
            logger.error("Evaluation failed for %r: %s", line, e)
            failures += 1
            continue
        _console().print(format_ret_val(val, precision), markup=False)
    return failures


# -- podkomendy ------------------------------------------------------------

def _eval(args: argparse.Namespace, settings: Settings) -> int:
    lines = _read_lines(args)
    strict = args.strict or settings.strict_arity
    failures = _run_lines(lines, strict, settings.float_precision)
    return 1 if failures else 0


def _repl(args: argparse.Namespace, settings: Settings) -> int:
    strict = args.strict or settings.strict_arity
    parser = SExprParser()
    evaluator = ASTEvaluator()
    while True:
        try:
            line = input("> ")
        except EOFError:
            break
        line = line.strip()
        if not line:
            continue
        if line == _QUIT:
            break
        try:
            val = _evaluate_line(line, parser, evaluator, strict)
        except Exception as e:
            logger.error("%s", e)
            continue
        _console().print(format_ret_val(val, settings.float_precision), markup=False)
    return 0


def _tree(args: argparse.Namespace, settings: Settings) -> int:
    text = args.text or sys.stdin.read().strip()
    try:
        root = SExprParser().parse(text)
    except ExpressionSyntaxError as e:
        print(f"Błąd składni: {e}", file=sys.stderr)
        return 1
    print(root.model_dump_json(indent=2, exclude_none=True))
    return 0


# -- main ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    settings = Settings()

    parser = argparse.ArgumentParser(
        prog="cilisp",
        description=f"{settings.app_title} {settings.app_version}: ewaluator s-wyrażeń",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # eval
    p = sub.add_parser("eval", help="Policz wyrażenia (jedno na linię)")
    p.add_argument("--text", "-t", help="Wyrażenie(a) do policzenia")
    p.add_argument("--file", "-f", help="Ścieżka do pliku z wyrażeniami")
    p.add_argument("--strict", action="store_true",
                   help="Waliduj arność i handlery przed liczeniem")

    # repl
    p = sub.add_parser("repl", help="Interaktywna pętla (quit / EOF kończy)")
    p.add_argument("--strict", action="store_true",
                   help="Waliduj arność i handlery przed liczeniem")

    # tree
    p = sub.add_parser("tree", help="Wypisz AST wyrażenia jako JSON")
    p.add_argument("--text", "-t", help="Wyrażenie (lub stdin)")

    args = parser.parse_args(argv)
    _setup_logging(settings)

    commands = {
        "eval": _eval,
        "repl": _repl,
        "tree": _tree,
    }
    return commands[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
