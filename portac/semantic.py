"""
Semantic analysis: declaration-before-use and strict type equality.

Only assignments and simple conditions carry rules; every other node is
walked through. There is no promotion between `inteiro` and `real`.
"""

from portac.errors import TypeMismatchError
from portac.syntax import Assignment, BinaryExpression, Comparison, Number


class SemanticAnalyzer:
    def __init__(self, symbols):
        self.symbols = symbols

    def analyze(self, node):
        if isinstance(node, Assignment):
            self.check_assignment(node)
        elif isinstance(node, Comparison):
            self.check_comparison(node)
        for child in node.children:
            self.analyze(child)

    def check_assignment(self, node):
        lhs_type = self.symbols.lookup(node.target.name, node.target.line)
        rtype = self.chain_type(node.value)
        if rtype != lhs_type:
            raise TypeMismatchError(lhs_type, rtype, node.line,
                                    context=f"assignment to '{node.target.name}'")

    def check_comparison(self, node):
        ltype = self.operand_type(node.left)
        rtype = self.operand_type(node.right)
        if ltype != rtype:
            raise TypeMismatchError(ltype, rtype, node.line, context="condition")

    def chain_type(self, chain):
        typ = self.operand_type(chain.first)
        for _, operand in chain.rest:
            other = self.operand_type(operand)
            if other != typ:
                raise TypeMismatchError(typ, other, operand.line, context="expression")
        return typ

    def operand_type(self, operand):
        if isinstance(operand, Number):
            return 'real' if operand.is_real else 'inteiro'
        if isinstance(operand, BinaryExpression):
            ltype = self.operand_type(operand.left)
            rtype = self.operand_type(operand.right)
            if ltype != rtype:
                raise TypeMismatchError(ltype, rtype, operand.line, context="expression")
            return ltype
        return self.symbols.lookup(operand.name, operand.line)


def check(program, symbols):
    SemanticAnalyzer(symbols).analyze(program)
