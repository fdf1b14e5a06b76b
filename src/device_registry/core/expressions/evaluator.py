"""Evaluator for group expressions.

Evaluation is total: an attribute the device does not have resolves to
``MISSING`` and every comparison or predicate touching it is false.
"""

from typing import Any, Mapping

from .ast import And, Attribute, Comparison, FunctionCall, ListLiteral, Literal, Node, Not, Or
from .exceptions import ExpressionEvaluationError


class _Missing:
    """Sentinel for attributes absent from the device attribute view."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_true(value: Any) -> bool:
    """Only a real boolean ``True`` satisfies a predicate."""
    return value is True


class Evaluator:
    """Evaluates an AST against a device's attribute view."""

    def __init__(self, attributes: Mapping[str, Any]):
        """Initialize the evaluator.

        Args:
            attributes: The device attribute view (nested mappings allowed).
        """
        self.attributes = attributes

    def evaluate(self, node: Node) -> Any:
        """Evaluate a node."""
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, Attribute):
            return self._resolve_attribute(node.path)

        if isinstance(node, ListLiteral):
            return [self.evaluate(item) for item in node.items]

        if isinstance(node, Comparison):
            return self._evaluate_comparison(node)

        if isinstance(node, And):
            return all(is_true(self.evaluate(operand)) for operand in _chain(node, And))

        if isinstance(node, Or):
            return any(is_true(self.evaluate(operand)) for operand in _chain(node, Or))

        if isinstance(node, Not):
            return not is_true(self.evaluate(node.operand))

        if isinstance(node, FunctionCall):
            return self._evaluate_function(node)

        raise ExpressionEvaluationError(f"Unknown node type: {type(node).__name__}")

    def _resolve_attribute(self, path: str) -> Any:
        """Walk a dotted path through nested mappings."""
        value: Any = self.attributes

        for part in path.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return MISSING
            value = value[part]

        return value

    def _evaluate_comparison(self, node: Comparison) -> bool:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        if left is MISSING or right is MISSING:
            return False

        op = node.operator

        if op == "==":
            return _same_kind(left, right) and left == right
        if op == "!=":
            return not (_same_kind(left, right) and left == right)
        if op == "in":
            return any(_same_kind(left, item) and left == item for item in right)

        # Ordered comparisons on incompatible types (e.g. None < 5) are false
        try:
            if op == "<":
                return bool(left < right)
            if op == ">":
                return bool(left > right)
            if op == "<=":
                return bool(left <= right)
            if op == ">=":
                return bool(left >= right)
        except TypeError:
            return False

        raise ExpressionEvaluationError(f"Unknown comparison operator: {op}")

    def _evaluate_function(self, node: FunctionCall) -> bool:
        if node.name == "exists":
            return self.evaluate(node.arguments[0]) is not MISSING

        args = [self.evaluate(arg) for arg in node.arguments]
        if any(arg is MISSING for arg in args):
            return False

        subject, operand = args

        if node.name == "contains":
            if isinstance(subject, str):
                return isinstance(operand, str) and operand in subject
            if isinstance(subject, (list, tuple)):
                return any(_same_kind(operand, item) and operand == item for item in subject)
            if isinstance(subject, Mapping):
                return isinstance(operand, str) and operand in subject
            return False

        if node.name == "starts_with":
            return isinstance(subject, str) and isinstance(operand, str) and subject.startswith(operand)

        if node.name == "ends_with":
            return isinstance(subject, str) and isinstance(operand, str) and subject.endswith(operand)

        raise ExpressionEvaluationError(f"Unknown function: {node.name}")


def _chain(node: And | Or, kind: type) -> list[Node]:
    """Operands of a left-nested run of one boolean operator, in source order.

    The parser builds ``a or b or c`` as ``Or(Or(a, b), c)``; walking the
    left spine in a loop keeps long chains off the call stack.
    """
    operands: list[Node] = []
    while isinstance(node, kind):
        operands.append(node.right)
        node = node.left
    operands.append(node)
    operands.reverse()
    return operands


def _same_kind(left: Any, right: Any) -> bool:
    """Keep booleans from comparing equal to 1 and 0."""
    return isinstance(left, bool) == isinstance(right, bool)
