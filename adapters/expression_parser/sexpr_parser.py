"""
Adapter: SExprParser
Implementuje port ExpressionParser.

Gramatyka (jedno wyrażenie na wejście):
  s_expr = NUMBER | f_expr
  f_expr = '(' FUNC s_expr ')' | '(' FUNC s_expr s_expr ')'
  NUMBER = [+-]? (digits ['.' digits*] | '.' digits)
  FUNC   = letter (letter | digit | '_')*

Drzewo budowane jest od liści w górę wyłącznie przez node_builder,
więc nazwy spoza tablicy funkcji trafiają do węzła CUSTOM.
"""
from __future__ import annotations

import logging
import re
from typing import NamedTuple

from adapters.node_builder import create_function_node, create_number_node
from contracts import AstNode, ExpressionSyntaxError

logger = logging.getLogger("ci_lisp.parser")

_TOKEN_RE = re.compile(
    r'(?P<number>[+-]?(?:\d+\.?\d*|\.\d+))'
    r'|(?P<func>[A-Za-z][A-Za-z0-9_]*)'
    r'|(?P<lparen>\()'
    r'|(?P<rparen>\))'
    r'|(?P<ws>\s+)'
)


class _Token(NamedTuple):
    kind: str     # number | func | lparen | rparen
    text: str
    pos: int


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise ExpressionSyntaxError(f"Unexpected character {text[pos]!r} at {pos}", pos)
        kind = m.lastgroup
        if kind != "ws":
            tokens.append(_Token(kind, m.group(), pos))  # type: ignore[arg-type]
        pos = m.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[_Token], text: str) -> None:
        self._tokens = tokens
        self._pos = 0
        self._end = len(text)

    def _peek(self) -> _Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _consume(self, kind: str) -> _Token:
        tok = self._peek()
        if tok is None:
            raise ExpressionSyntaxError(f"Expected {kind}, got end of input", self._end)
        if tok.kind != kind:
            raise ExpressionSyntaxError(
                f"Expected {kind}, got {tok.text!r} at {tok.pos}", tok.pos
            )
        self._pos += 1
        return tok

    def parse(self) -> AstNode:
        node = self._s_expr()
        tok = self._peek()
        if tok is not None:
            raise ExpressionSyntaxError(f"Unexpected token {tok.text!r} at {tok.pos}", tok.pos)
        return node

    def _s_expr(self) -> AstNode:
        tok = self._peek()
        if tok is None:
            raise ExpressionSyntaxError("Unexpected end of expression", self._end)
        if tok.kind == "number":
            self._pos += 1
            return create_number_node(float(tok.text))
        if tok.kind == "lparen":
            return self._f_expr()
        if tok.kind == "func":
            # Brak środowiska zmiennych, goły symbol nie jest wyrażeniem
            raise ExpressionSyntaxError(f"Unbound symbol {tok.text!r} at {tok.pos}", tok.pos)
        raise ExpressionSyntaxError(f"Unexpected token {tok.text!r} at {tok.pos}", tok.pos)

    def _f_expr(self) -> AstNode:
        self._consume("lparen")
        name = self._consume("func").text
        op1 = self._s_expr()
        op2 = None
        nxt = self._peek()
        if nxt is not None and nxt.kind != "rparen":
            op2 = self._s_expr()
        nxt = self._peek()
        if nxt is not None and nxt.kind != "rparen":
            raise ExpressionSyntaxError(
                f"Too many operands for {name!r} at {nxt.pos} (at most 2)", nxt.pos
            )
        self._consume("rparen")
        return create_function_node(name, op1, op2)


class SExprParser:
    """Parsuje pojedyncze s-wyrażenie CI LISP do AST."""

    # -- ExpressionParser protocol ------------------------------------------

    def parse(self, text: str) -> AstNode:
        text = text.strip()
        if not text:
            raise ExpressionSyntaxError("Empty expression", 0)
        tokens = _tokenize(text)
        node = _Parser(tokens, text).parse()
        logger.debug("Parsed %r", text)
        return node
