"""Group expression parser and evaluator.

Dynamic groups select devices with a boolean expression over the device
attribute view, e.g. ``role == "sensor" and starts_with(system_info.os, "linux")``.
"""

from typing import Any, Mapping

from .ast import Node
from .evaluator import MISSING, Evaluator, is_true
from .exceptions import ExpressionError, ExpressionEvaluationError, ExpressionSyntaxError
from .lexer import Lexer
from .parser import Parser


def parse_expression(expression: str) -> Node:
    """Parse an expression string into an AST."""
    lexer = Lexer(expression)
    parser = Parser(lexer)
    return parser.parse()


def evaluate_expression(node: Node, attributes: Mapping[str, Any]) -> bool:
    """Return whether a device with ``attributes`` satisfies the parsed expression."""
    return is_true(Evaluator(attributes).evaluate(node))


__all__ = [
    "parse_expression",
    "evaluate_expression",
    "MISSING",
    "Node",
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
]
