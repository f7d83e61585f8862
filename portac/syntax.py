"""
Syntax tree nodes.

One immutable class per grammar production. Phases read the named fields;
`label` and `children` give the generic n-ary view used for drawing and
serializing the tree.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


class Node:
    line: int

    @property
    def label(self):
        return type(self).__name__

    @property
    def children(self):
        return ()


# =====================================================
# OPERANDS
# =====================================================
@dataclass(frozen=True)
class Number(Node):
    text: str
    line: int

    @property
    def label(self):
        return self.text

    @property
    def is_real(self):
        return '.' in self.text


@dataclass(frozen=True)
class Identifier(Node):
    name: str
    line: int

    @property
    def label(self):
        return self.name


@dataclass(frozen=True)
class Operator(Node):
    symbol: str
    line: int

    @property
    def label(self):
        return self.symbol


@dataclass(frozen=True)
class BinaryExpression(Node):
    """Parenthesized `( left op right )`."""
    left: "Operand"
    op: Operator
    right: "Operand"
    line: int

    @property
    def children(self):
        return (self.left, self.op, self.right)


Operand = Union[Number, Identifier, BinaryExpression]


@dataclass(frozen=True)
class ArithChain(Node):
    """Right-hand side of an assignment: first (op operand)*, evaluated left to right."""
    first: Operand
    rest: Tuple[Tuple[Operator, Operand], ...] = ()
    line: int = 0

    @property
    def label(self):
        return "Expression"

    @property
    def operands(self):
        return (self.first,) + tuple(operand for _, operand in self.rest)

    @property
    def children(self):
        nodes = [self.first]
        for op, operand in self.rest:
            nodes.extend((op, operand))
        return tuple(nodes)


# =====================================================
# CONDITIONS
# =====================================================
@dataclass(frozen=True)
class Comparison(Node):
    left: Identifier
    op: Operator
    right: Union[Identifier, Number]
    line: int

    @property
    def label(self):
        return "SimpleCondition"

    @property
    def children(self):
        return (self.left, self.op, self.right)


@dataclass(frozen=True)
class BooleanOp(Node):
    op: str  # 'E' or 'OR'
    left: "Condition"
    right: "Condition"
    line: int

    @property
    def label(self):
        return self.op

    @property
    def children(self):
        return (self.left, self.right)


@dataclass(frozen=True)
class Not(Node):
    operand: "Condition"
    line: int

    @property
    def label(self):
        return "NOT"

    @property
    def children(self):
        return (self.operand,)


Condition = Union[Comparison, BooleanOp, Not]


# =====================================================
# COMMANDS AND DECLARATIONS
# =====================================================
@dataclass(frozen=True)
class EmptyCommand(Node):
    line: int


@dataclass(frozen=True)
class Assignment(Node):
    target: Identifier
    value: ArithChain
    line: int

    @property
    def children(self):
        return (self.target, self.value)


@dataclass(frozen=True)
class Conditional(Node):
    condition: Condition
    then_branch: "Command"
    else_branch: Optional["Command"]
    line: int

    @property
    def children(self):
        if self.else_branch is None:
            return (self.condition, self.then_branch)
        return (self.condition, self.then_branch, self.else_branch)


@dataclass(frozen=True)
class Iterative(Node):
    condition: Condition
    body: "Command"
    line: int

    @property
    def children(self):
        return (self.condition, self.body)


Command = Union[Assignment, Conditional, Iterative, EmptyCommand]


@dataclass(frozen=True)
class Declaration(Node):
    type_name: str
    names: Tuple[Identifier, ...]
    line: int

    @property
    def children(self):
        return self.names


@dataclass(frozen=True)
class Program(Node):
    declarations: Tuple[Declaration, ...] = field(default=())
    commands: Tuple[Command, ...] = field(default=())
    line: int = 1

    @property
    def children(self):
        return self.declarations + self.commands


def walk(node):
    """Yield `node` and all its descendants in pre-order."""
    yield node
    for child in node.children:
        yield from walk(child)
