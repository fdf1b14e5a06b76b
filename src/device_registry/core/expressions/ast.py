"""Abstract Syntax Tree nodes for group expressions."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""

    pass


@dataclass(frozen=True)
class Literal(Node):
    """A literal value (string, number, boolean, null)."""

    value: Any


@dataclass(frozen=True)
class Attribute(Node):
    """A dotted reference into the device attribute view (e.g. system_info.os)."""

    path: str


@dataclass(frozen=True)
class ListLiteral(Node):
    """A bracketed list of literals, the right-hand side of `in`."""

    items: tuple[Node, ...]


@dataclass(frozen=True)
class Comparison(Node):
    """A comparison or membership test (==, !=, <, >, <=, >=, in)."""

    left: Node
    operator: str
    right: Node


@dataclass(frozen=True)
class And(Node):
    left: Node
    right: Node


@dataclass(frozen=True)
class Or(Node):
    left: Node
    right: Node


@dataclass(frozen=True)
class Not(Node):
    operand: Node


@dataclass(frozen=True)
class FunctionCall(Node):
    """A call to one of the built-in predicates (e.g. contains(a, b))."""

    name: str
    arguments: tuple[Node, ...]
