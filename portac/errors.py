"""
Compiler diagnostics.

Every phase reports failure by raising a CompileError subclass. The message
format matches the one the driver records in its error list:

    Semantic error (line 3): undeclared variable 'x'
"""


class CompileError(Exception):
    phase = "Compile"

    def __init__(self, msg, lineno=None):
        super().__init__(msg)
        self.msg = msg
        self.lineno = lineno

    def __str__(self):
        if self.lineno is not None:
            return f"{self.phase} error (line {self.lineno}): {self.msg}"
        return f"{self.phase} error: {self.msg}"


class LexicalError(CompileError):
    phase = "Lexical"


class SyntacticError(CompileError):
    phase = "Syntax"


class SemanticError(CompileError):
    phase = "Semantic"


class DuplicateDeclarationError(SemanticError):
    def __init__(self, name, lineno):
        super().__init__(f"variable '{name}' already declared", lineno)
        self.name = name


class UndeclaredVariableError(SemanticError):
    def __init__(self, name, lineno):
        super().__init__(f"undeclared variable '{name}'", lineno)
        self.name = name


class TypeMismatchError(SemanticError):
    def __init__(self, expected, found, lineno, context="assignment"):
        super().__init__(f"type mismatch in {context}: {expected} vs {found}", lineno)
        self.expected = expected
        self.found = found


class GeneratorInvariantError(CompileError):
    phase = "IRGen"


class ExecutionError(CompileError):
    phase = "Execution"
