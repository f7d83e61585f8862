"""
IR (TAC) generation.

Walks a checked syntax tree and emits a linear list of three-address
instructions over temporaries R1, R2, ... and labels L1, L2, ...

Register numbering restarts at every statement; label numbering never
restarts. Boolean conditions are compiled with short-circuit jumps: each
condition is told where to go when it is true and/or false (a JumpTarget)
and never materializes a boolean value beyond its comparison register.
"""

import logging
from enum import Enum

from portac.errors import GeneratorInvariantError
from portac.syntax import (
    Assignment, BinaryExpression, BooleanOp, Comparison, Conditional, Identifier,
    Iterative, Not, Number,
)

log = logging.getLogger(__name__)

ARITH_OPCODES = {'+': 'ADD', '-': 'SUB', '*': 'MUL', '/': 'DIV', 'RESTO': 'MOD'}
# multiplication, division and modulo have no immediate form
IMMEDIATE_OPCODES = {'+': 'ADDI', '-': 'SUBI'}
COMPARE_OPCODES = {'>': 'CMPGT', '<': 'CMPLT', '==': 'CMPEQ',
                   '>=': 'CMPGE', '<=': 'CMPLE', '!=': 'CMPNE'}


def translate(table, op, kind):
    try:
        return table[op]
    except KeyError:
        raise GeneratorInvariantError(f"unknown {kind} operator {op!r}") from None


class TACInstruction:
    def __init__(self, op, *operands):
        self.op = op
        self.operands = operands

    def __repr__(self):
        if not self.operands:
            return self.op
        return f"{self.op} {', '.join(str(o) for o in self.operands)}"

    def __eq__(self, other):
        if not isinstance(other, TACInstruction):
            return NotImplemented
        return self.op == other.op and self.operands == other.operands

    def __hash__(self):
        return hash((self.op, self.operands))


# =====================================================
# JUMP TARGETS
# =====================================================
class Branch(Enum):
    FALLTHROUGH = "fallthrough"
    ON_TRUE = "jump-if-true"
    ON_FALSE = "jump-if-false"
    BOTH = "jump-both"


class JumpTarget:
    """Where control goes after a condition: a label for true, for false, both or neither."""

    __slots__ = ('on_true', 'on_false')

    def __init__(self, on_true=None, on_false=None):
        self.on_true = on_true
        self.on_false = on_false

    @classmethod
    def if_true(cls, label):
        return cls(on_true=label)

    @classmethod
    def if_false(cls, label):
        return cls(on_false=label)

    @property
    def branch(self):
        if self.on_true and self.on_false:
            return Branch.BOTH
        if self.on_true:
            return Branch.ON_TRUE
        if self.on_false:
            return Branch.ON_FALSE
        return Branch.FALLTHROUGH

    def swapped(self):
        return JumpTarget(self.on_false, self.on_true)

    def __eq__(self, other):
        if not isinstance(other, JumpTarget):
            return NotImplemented
        return (self.on_true, self.on_false) == (other.on_true, other.on_false)

    def __repr__(self):
        return f"JumpTarget(on_true={self.on_true!r}, on_false={self.on_false!r})"


# =====================================================
# GENERATOR
# =====================================================
class IRGenerator:
    def __init__(self):
        self.tac = []
        self.temp_count = 0
        self.label_count = 0

    def new_temp(self):
        self.temp_count += 1
        return f"R{self.temp_count}"

    def new_label(self):
        self.label_count += 1
        return f"L{self.label_count}"

    def reset_temps(self):
        self.temp_count = 0

    def emit(self, op, *operands):
        instr = TACInstruction(op, *operands)
        log.debug("emit %r", instr)
        self.tac.append(instr)
        return instr

    def gen(self, node):
        if isinstance(node, Assignment):
            self.gen_assignment(node)
        elif isinstance(node, Conditional):
            self.gen_conditional(node)
        elif isinstance(node, Iterative):
            self.gen_iterative(node)
        else:
            for child in node.children:
                self.gen(child)
        return self.tac

    # -----------------------------------------------------
    # statements
    # -----------------------------------------------------
    def gen_assignment(self, node):
        self.reset_temps()
        result = self.gen_expression(node.value)
        self.emit('STORE', node.target.name, result)

    def gen_conditional(self, node):
        self.reset_temps()
        l_else = self.new_label()
        self.gen_condition(node.condition, JumpTarget.if_false(l_else))
        self.gen(node.then_branch)
        if node.else_branch is None:
            self.emit('LABEL', l_else)
            return
        l_end = self.new_label()
        self.emit('JMP', l_end)
        self.emit('LABEL', l_else)
        self.gen(node.else_branch)
        self.emit('LABEL', l_end)

    def gen_iterative(self, node):
        self.reset_temps()
        l_start = self.new_label()
        l_end = self.new_label()
        self.emit('LABEL', l_start)
        self.gen_condition(node.condition, JumpTarget.if_false(l_end))
        self.gen(node.body)
        self.emit('JMP', l_start)
        self.emit('LABEL', l_end)

    # -----------------------------------------------------
    # expressions
    # -----------------------------------------------------
    def gen_expression(self, chain):
        """Evaluate an arithmetic chain left to right, returning the accumulator register."""
        acc = self.gen_operand(chain.first)
        for op, operand in chain.rest:
            self.apply(acc, op.symbol, operand)
        return acc

    def apply(self, acc, op, operand):
        if isinstance(operand, Number) and op in IMMEDIATE_OPCODES:
            self.emit(IMMEDIATE_OPCODES[op], acc, operand.text)
            return
        opcode = translate(ARITH_OPCODES, op, "arithmetic")
        reg = self.gen_operand(operand)
        self.emit(opcode, acc, acc, reg)

    def gen_operand(self, operand):
        if isinstance(operand, Number):
            reg = self.new_temp()
            self.emit('LOADI', reg, operand.text)
            return reg
        if isinstance(operand, Identifier):
            reg = self.new_temp()
            self.emit('LOAD', reg, operand.name)
            return reg
        if isinstance(operand, BinaryExpression):
            acc = self.gen_operand(operand.left)
            self.apply(acc, operand.op.symbol, operand.right)
            return acc
        raise GeneratorInvariantError(f"cannot evaluate {operand.label!r} as an operand", operand.line)

    # -----------------------------------------------------
    # conditions
    # -----------------------------------------------------
    def gen_condition(self, node, target):
        if isinstance(node, BooleanOp):
            if node.op == 'E':
                self.gen_and(node, target)
            elif node.op == 'OR':
                self.gen_or(node, target)
            else:
                raise GeneratorInvariantError(f"unknown boolean operator {node.op!r}", node.line)
        elif isinstance(node, Not):
            self.gen_condition(node.operand, target.swapped())
        elif isinstance(node, Comparison):
            self.gen_comparison(node, target)
        else:
            raise GeneratorInvariantError(f"{node.label!r} is not a condition", node.line)

    def gen_and(self, node, target):
        # left false decides the whole thing; without a false label the
        # short-circuit exit is a local label placed after the right side
        skip = None
        l_false = target.on_false
        if l_false is None:
            skip = l_false = self.new_label()
        self.gen_condition(node.left, JumpTarget.if_false(l_false))
        self.gen_condition(node.right, target)
        if skip:
            self.emit('LABEL', skip)

    def gen_or(self, node, target):
        skip = None
        l_true = target.on_true
        if l_true is None:
            skip = l_true = self.new_label()
        self.gen_condition(node.left, JumpTarget.if_true(l_true))
        self.gen_condition(node.right, target)
        if skip:
            self.emit('LABEL', skip)

    def gen_comparison(self, node, target):
        r1 = self.gen_operand(node.left)
        r2 = self.gen_operand(node.right)
        self.emit(translate(COMPARE_OPCODES, node.op.symbol, "comparison"), r1, r2)

        branch = target.branch
        if branch is Branch.ON_TRUE:
            self.emit('JMPTRUE', r1, target.on_true)
        elif branch is Branch.ON_FALSE:
            self.emit('JMPFALSE', r1, target.on_false)
        elif branch is Branch.BOTH:
            self.emit('JMPTRUE', r1, target.on_true)
            self.emit('JMP', target.on_false)


def generate(program):
    """TAC instruction list for a checked program."""
    return IRGenerator().gen(program)
