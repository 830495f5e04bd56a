"""
Expression parser adapter package.

Public import:
    from adapters.expression_parser import SExprParser
"""

from adapters.expression_parser.sexpr_parser import SExprParser

__all__ = ["SExprParser"]
