"""Parser for group expressions."""

from .ast import And, Attribute, Comparison, FunctionCall, ListLiteral, Literal, Node, Not, Or
from .exceptions import ExpressionSyntaxError
from .lexer import Lexer, Token, TokenType

COMPARISON_OPERATORS = {
    TokenType.EQ: "==",
    TokenType.NEQ: "!=",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LTE: "<=",
    TokenType.GTE: ">=",
}

# Built-in predicates and their arity
FUNCTIONS = {
    "contains": 2,
    "starts_with": 2,
    "ends_with": 2,
    "exists": 1,
}

# Parentheses and function calls nested deeper than this are rejected
MAX_NESTING_DEPTH = 32

LITERAL_TOKENS = (
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.NULL,
)


class Parser:
    """Recursive descent parser for group expressions.

    Precedence, lowest first: ``or``, ``and``, ``not``, comparisons.
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current_token: Token = self.lexer.get_next_token()
        self.depth = 0

    def error(self, message: str) -> None:
        """Raise a syntax error at the current token."""
        raise ExpressionSyntaxError(message, self.current_token.position)

    def consume(self, token_type: TokenType) -> None:
        """Consume the current token if it matches the expected type."""
        if self.current_token.type == token_type:
            self.current_token = self.lexer.get_next_token()
        else:
            self.error(f"Expected {token_type.name}, found {self.current_token.type.name}")

    def enter(self, position: int) -> None:
        """Descend one nesting level."""
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise ExpressionSyntaxError(
                f"Expression nested deeper than {MAX_NESTING_DEPTH} levels", position
            )

    def parse(self) -> Node:
        """Parse the entire expression."""
        if self.current_token.type == TokenType.EOF:
            self.error("Empty expression")
        node = self.expression()
        if self.current_token.type != TokenType.EOF:
            self.error("Unexpected token after expression")
        return node

    def expression(self) -> Node:
        """Parse logical OR expressions."""
        node = self.term()

        while self.current_token.type == TokenType.OR:
            self.consume(TokenType.OR)
            node = Or(left=node, right=self.term())

        return node

    def term(self) -> Node:
        """Parse logical AND expressions."""
        node = self.factor()

        while self.current_token.type == TokenType.AND:
            self.consume(TokenType.AND)
            node = And(left=node, right=self.factor())

        return node

    def factor(self) -> Node:
        """Parse logical NOT expressions."""
        negations = 0
        while self.current_token.type == TokenType.NOT:
            self.enter(self.current_token.position)
            self.consume(TokenType.NOT)
            negations += 1

        node = self.comparison()
        self.depth -= negations
        for _ in range(negations):
            node = Not(operand=node)
        return node

    def comparison(self) -> Node:
        """Parse comparison and membership expressions."""
        node = self.atom()
        token_type = self.current_token.type

        if token_type in COMPARISON_OPERATORS:
            self.consume(token_type)
            return Comparison(left=node, operator=COMPARISON_OPERATORS[token_type], right=self.atom())

        if token_type == TokenType.IN:
            self.consume(TokenType.IN)
            return Comparison(left=node, operator="in", right=self._list())

        return node

    def atom(self) -> Node:
        """Parse basic units: literals, attributes, function calls, parentheses."""
        token = self.current_token

        if token.type in LITERAL_TOKENS:
            self.consume(token.type)
            return Literal(token.value)

        if token.type == TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            self.enter(token.position)
            node = self.expression()
            self.consume(TokenType.RPAREN)
            self.depth -= 1
            return node

        if token.type == TokenType.IDENTIFIER:
            name = str(token.value)
            self.consume(TokenType.IDENTIFIER)

            if self.current_token.type == TokenType.LPAREN:
                return self._function_call(name, token.position)
            return Attribute(name)

        self.error(f"Unexpected token: {token.type.name}")
        return Node()  # unreachable, error() raises

    def _list(self) -> ListLiteral:
        """Parse a bracketed list of literals."""
        self.consume(TokenType.LBRACKET)
        items: list[Node] = []

        if self.current_token.type != TokenType.RBRACKET:
            items.append(self._list_item())
            while self.current_token.type == TokenType.COMMA:
                self.consume(TokenType.COMMA)
                items.append(self._list_item())

        self.consume(TokenType.RBRACKET)
        return ListLiteral(tuple(items))

    def _list_item(self) -> Node:
        token = self.current_token
        if token.type not in LITERAL_TOKENS:
            self.error("List items must be literals")
        self.consume(token.type)
        return Literal(token.value)

    def _function_call(self, name: str, position: int) -> Node:
        """Parse function call arguments and check them against the built-ins."""
        if name not in FUNCTIONS:
            raise ExpressionSyntaxError(f"Unknown function '{name}'", position)

        self.consume(TokenType.LPAREN)
        self.enter(position)
        arguments: list[Node] = []

        if self.current_token.type != TokenType.RPAREN:
            arguments.append(self.expression())
            while self.current_token.type == TokenType.COMMA:
                self.consume(TokenType.COMMA)
                arguments.append(self.expression())

        self.consume(TokenType.RPAREN)
        self.depth -= 1

        if len(arguments) != FUNCTIONS[name]:
            raise ExpressionSyntaxError(
                f"{name}() expects {FUNCTIONS[name]} argument(s), got {len(arguments)}", position
            )
        if name == "exists" and not isinstance(arguments[0], Attribute):
            raise ExpressionSyntaxError("exists() expects an attribute reference", position)

        return FunctionCall(name, tuple(arguments))
