"""
Recursive-descent parser (one token of lookahead).

Builds the syntax tree and fills the symbol table as declarations are
consumed. Grammar:

    Program     -> '$' Declaration* Command* '$.'
    Declaration -> Type Id (',' Id)* ';'
    Command     -> Conditional | Iterative | Assignment | <empty>
    Conditional -> 'se' Condition 'entao' Command ['senao' Command]
    Iterative   -> 'enquanto' Condition Command
    Assignment  -> Id '=' Expression (ArithOp Expression)* ';'
    Expression  -> Number | Id | '(' Expression ArithOp Expression ')'
    Condition   -> '(' (Condition | 'NOT' Condition | Id RelOp (Id|Number)) ')'
                   (('E'|'OR') Condition)*
"""

from portac.errors import SyntacticError
from portac.lexer import Lexer, TokenKind, TYPE_KINDS
from portac.symbols import SymbolTable
from portac.syntax import (
    ArithChain, Assignment, BinaryExpression, BooleanOp, Comparison, Conditional,
    Declaration, EmptyCommand, Identifier, Iterative, Not, Number, Operator, Program,
)

MAX_NESTING_DEPTH = 10
# parentheses and E/OR/NOT levels inside one expression or condition
MAX_EXPRESSION_DEPTH = 100

ARITH_OPS = (TokenKind.PLUS, TokenKind.TIMES, TokenKind.DIVIDE, TokenKind.RESTO)
BOOL_OPS = (TokenKind.AND, TokenKind.OR)
COMMAND_STARTS = (TokenKind.SE, TokenKind.ENQUANTO, TokenKind.IDENTIFIER)


class Parser:
    def __init__(self, lexer):
        if isinstance(lexer, str):
            lexer = Lexer(lexer)
        self.lexer = lexer
        self.symbols = SymbolTable()
        self.current = self.lexer.next_token()

    # -----------------------------------------------------
    # token helpers
    # -----------------------------------------------------
    def peek(self):
        return self.current

    def advance(self):
        tok = self.current
        self.current = self.lexer.next_token()
        return tok

    def expect(self, kind):
        tok = self.current
        if tok.kind is not kind:
            raise SyntacticError(f"expected {kind}, found {tok.kind}", tok.line)
        return self.advance()

    def _unexpected(self, what):
        tok = self.current
        raise SyntacticError(f"expected {what}, found {tok.kind}", tok.line)

    # -----------------------------------------------------
    # program structure
    # -----------------------------------------------------
    def parse(self):
        start = self.expect(TokenKind.PROGRAM_START)
        declarations = []
        while self.peek().kind in TYPE_KINDS:
            declarations.append(self.declaration())
        commands = []
        while self.peek().kind in COMMAND_STARTS:
            commands.append(self.command(0))
        self.expect(TokenKind.PROGRAM_END)
        return Program(tuple(declarations), tuple(commands), start.line)

    def declaration(self):
        type_tok = self.advance()
        names = [self._declared_name(type_tok.text)]
        while self.peek().kind is TokenKind.COMMA:
            self.advance()
            names.append(self._declared_name(type_tok.text))
        self.expect(TokenKind.SEMICOLON)
        return Declaration(type_tok.text, tuple(names), type_tok.line)

    def _declared_name(self, typ):
        tok = self.expect(TokenKind.IDENTIFIER)
        self.symbols.declare(tok.text, typ, tok.line)
        return Identifier(tok.text, tok.line)

    # -----------------------------------------------------
    # commands
    # -----------------------------------------------------
    def command(self, depth):
        if depth > MAX_NESTING_DEPTH:
            raise SyntacticError(
                f"nesting depth exceeds {MAX_NESTING_DEPTH}", self.peek().line)
        kind = self.peek().kind
        if kind is TokenKind.SE:
            return self.conditional(depth)
        if kind is TokenKind.ENQUANTO:
            return self.iterative(depth)
        if kind is TokenKind.IDENTIFIER:
            return self.assignment()
        return EmptyCommand(self.peek().line)

    def conditional(self, depth):
        tok = self.expect(TokenKind.SE)
        cond = self.condition()
        self.expect(TokenKind.ENTAO)
        then_branch = self.command(depth + 1)
        else_branch = None
        if self.peek().kind is TokenKind.SENAO:
            self.advance()
            else_branch = self.command(depth + 1)
        return Conditional(cond, then_branch, else_branch, tok.line)

    def iterative(self, depth):
        tok = self.expect(TokenKind.ENQUANTO)
        cond = self.condition()
        body = self.command(depth + 1)
        return Iterative(cond, body, tok.line)

    def assignment(self):
        id_tok = self.expect(TokenKind.IDENTIFIER)
        self.expect(TokenKind.ASSIGN)
        first = self.expression()
        rest = []
        while self.peek().kind in ARITH_OPS:
            op = self._operator()
            rest.append((op, self.expression()))
        self.expect(TokenKind.SEMICOLON)
        target = Identifier(id_tok.text, id_tok.line)
        return Assignment(target, ArithChain(first, tuple(rest), first.line), id_tok.line)

    # -----------------------------------------------------
    # expressions
    # -----------------------------------------------------
    def _operator(self):
        tok = self.advance()
        return Operator(tok.text, tok.line)

    def _check_nesting(self, nesting, line):
        if nesting > MAX_EXPRESSION_DEPTH:
            raise SyntacticError(
                f"expression nesting exceeds {MAX_EXPRESSION_DEPTH}", line)

    def expression(self, nesting=0):
        tok = self.peek()
        if tok.kind is TokenKind.NUMBER:
            self.advance()
            return Number(tok.text, tok.line)
        if tok.kind is TokenKind.IDENTIFIER:
            self.advance()
            return Identifier(tok.text, tok.line)
        if tok.kind is TokenKind.LPAREN:
            self._check_nesting(nesting + 1, tok.line)
            self.advance()
            left = self.expression(nesting + 1)
            if self.peek().kind not in ARITH_OPS:
                self._unexpected("arithmetic operator")
            op = self._operator()
            right = self.expression(nesting + 1)
            self.expect(TokenKind.RPAREN)
            return BinaryExpression(left, op, right, tok.line)
        self._unexpected("NUMBER, IDENTIFIER or LPAREN")

    # -----------------------------------------------------
    # conditions
    # -----------------------------------------------------
    def condition(self):
        node, _ = self._condition(0)
        return node

    def _condition(self, nesting):
        """Parse a condition chain; returns the node and its tree depth."""
        terms = [self._condition_group(nesting)]
        ops = []
        while self.peek().kind in BOOL_OPS:
            ops.append(self.advance())
            terms.append(self._condition_group(nesting))

        # E/OR group to the right: (a) E (b) OR (c) is E(a, OR(b, c))
        node, depth = terms.pop()
        while ops:
            op = ops.pop()
            left, left_depth = terms.pop()
            depth = max(left_depth, depth) + 1
            self._check_nesting(depth, op.line)
            node = BooleanOp(op.text, left, node, op.line)
        return node, depth

    def _condition_group(self, nesting):
        lparen = self.expect(TokenKind.LPAREN)
        self._check_nesting(nesting + 1, lparen.line)
        kind = self.peek().kind
        if kind is TokenKind.LPAREN:
            node, depth = self._condition(nesting + 1)
        elif kind is TokenKind.NOT:
            self.advance()
            inner, depth = self._condition(nesting + 1)
            depth += 1
            self._check_nesting(depth, lparen.line)
            node = Not(inner, lparen.line)
        elif kind is TokenKind.IDENTIFIER:
            node, depth = self.simple_condition(), 1
        else:
            self._unexpected("IDENTIFIER, NOT or LPAREN")
        self.expect(TokenKind.RPAREN)
        return node, depth

    def simple_condition(self):
        id_tok = self.expect(TokenKind.IDENTIFIER)
        op_tok = self.expect(TokenKind.RELOP)
        tok = self.peek()
        if tok.kind is TokenKind.IDENTIFIER:
            right = Identifier(tok.text, tok.line)
        elif tok.kind is TokenKind.NUMBER:
            right = Number(tok.text, tok.line)
        else:
            self._unexpected("IDENTIFIER or NUMBER")
        self.advance()
        return Comparison(Identifier(id_tok.text, id_tok.line),
                          Operator(op_tok.text, op_tok.line), right, id_tok.line)


def parse(source):
    """Parse `source` and return `(program, symbol_table)`."""
    parser = Parser(Lexer(source))
    program = parser.parse()
    return program, parser.symbols
