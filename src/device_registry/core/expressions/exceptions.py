"""Exceptions for group expression parsing and evaluation."""


class ExpressionError(Exception):
    """Base class for all expression-related errors."""

    pass


class ExpressionSyntaxError(ExpressionError):
    """Raised when an expression cannot be parsed."""

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        super().__init__(f"{message} at position {position}" if position is not None else message)


class ExpressionEvaluationError(ExpressionError):
    """Raised when an AST contains a node the evaluator does not understand."""

    pass
