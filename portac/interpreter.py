"""
TAC interpreter.

Runs a generated instruction list against a variable memory and returns the
final memory. Comparison opcodes leave a boolean in their first register,
which JMPTRUE/JMPFALSE then test.
"""

import logging
import operator
import re

from portac.errors import ExecutionError

log = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 100_000

INITIAL_VALUES = {'inteiro': 0, 'real': 0.0, 'caracter': 0}

COMPARISONS = {
    'CMPGT': operator.gt, 'CMPLT': operator.lt, 'CMPEQ': operator.eq,
    'CMPGE': operator.ge, 'CMPLE': operator.le, 'CMPNE': operator.ne,
}


def parse_literal(text):
    if re.fullmatch(r'\d+', text):
        return int(text)
    if re.fullmatch(r'\d*\.\d*', text) and text != '.':
        return float(text)
    raise ExecutionError(f"malformed number literal {text!r}")


def divide(a, b):
    if b == 0:
        raise ExecutionError("division by zero")
    if isinstance(a, int) and isinstance(b, int):
        q = abs(a) // abs(b)
        return q if (a >= 0) == (b >= 0) else -q
    return a / b


def modulo(a, b):
    if b == 0:
        raise ExecutionError("modulo by zero")
    return a % b


ARITHMETIC = {
    'ADD': operator.add, 'SUB': operator.sub, 'MUL': operator.mul,
    'DIV': divide, 'MOD': modulo,
}
IMMEDIATE = {'ADDI': operator.add, 'SUBI': operator.sub}


def initial_memory(symbols):
    if symbols is None:
        return {}
    return {name: INITIAL_VALUES.get(typ, 0) for name, typ in symbols.items()}


def run_tac(tac, symbols=None, max_steps=DEFAULT_MAX_STEPS):
    """Execute `tac` and return the variable memory it leaves behind."""
    mem = initial_memory(symbols)
    regs = {}
    labels = {}
    for i, instr in enumerate(tac):
        if instr.op == 'LABEL':
            labels[instr.operands[0]] = i

    def jump(label):
        if label not in labels:
            raise ExecutionError(f"jump to undefined label {label}")
        return labels[label] + 1

    def reg(name):
        if name not in regs:
            raise ExecutionError(f"register {name} read before written")
        return regs[name]

    pc = 0
    steps = 0
    while pc < len(tac):
        steps += 1
        if steps > max_steps:
            raise ExecutionError(f"step limit of {max_steps} exceeded")
        instr = tac[pc]
        op, args = instr.op, instr.operands
        pc += 1
        if op == 'LABEL':
            continue
        if op == 'LOADI':
            regs[args[0]] = parse_literal(args[1])
        elif op == 'LOAD':
            regs[args[0]] = mem.get(args[1], 0)
        elif op == 'STORE':
            mem[args[0]] = reg(args[1])
        elif op in ARITHMETIC:
            regs[args[0]] = ARITHMETIC[op](reg(args[1]), reg(args[2]))
        elif op in IMMEDIATE:
            regs[args[0]] = IMMEDIATE[op](reg(args[0]), parse_literal(args[1]))
        elif op in COMPARISONS:
            regs[args[0]] = COMPARISONS[op](reg(args[0]), reg(args[1]))
        elif op == 'JMP':
            pc = jump(args[0])
        elif op == 'JMPTRUE':
            if reg(args[0]):
                pc = jump(args[1])
        elif op == 'JMPFALSE':
            if not reg(args[0]):
                pc = jump(args[1])
        else:
            raise ExecutionError(f"unknown opcode {op}")
    log.debug("executed %d instructions", steps)
    return mem
