from portac.errors import DuplicateDeclarationError, UndeclaredVariableError

TYPES = ('inteiro', 'real', 'caracter')


class SymbolTable:
    """Flat, single-scope mapping from variable name to declared type."""

    def __init__(self):
        # name -> type, kept in declaration order
        self.symbols = {}

    def declare(self, name, typ, lineno):
        if name in self.symbols:
            raise DuplicateDeclarationError(name, lineno)
        self.symbols[name] = typ

    def lookup(self, name, lineno):
        if name not in self.symbols:
            raise UndeclaredVariableError(name, lineno)
        return self.symbols[name]

    def items(self):
        return self.symbols.items()

    def as_dict(self):
        return dict(self.symbols)

    def __contains__(self, name):
        return name in self.symbols

    def __len__(self):
        return len(self.symbols)

    def __repr__(self):
        return f"SymbolTable({self.symbols!r})"
