"""
Lexical analysis.

The scanner tries one anchored master pattern at the current position, so
each token is the longest match of its rule and only ASCII letters and
digits form identifiers and numbers. Tokens are produced on demand by
next_token(); once the input is exhausted every further call returns the
EOF token.
"""

import re
from collections import namedtuple
from enum import Enum

from portac.errors import LexicalError

MAX_IDENTIFIER_LENGTH = 10


class TokenKind(Enum):
    PROGRAM_START = "PROGRAM_START"
    PROGRAM_END = "PROGRAM_END"
    TYPE_INTEIRO = "TYPE_INTEIRO"
    TYPE_REAL = "TYPE_REAL"
    TYPE_CARACTER = "TYPE_CARACTER"
    SE = "SE"
    ENTAO = "ENTAO"
    SENAO = "SENAO"
    ENQUANTO = "ENQUANTO"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    PLUS = "PLUS"
    TIMES = "TIMES"
    DIVIDE = "DIVIDE"
    RESTO = "RESTO"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    ASSIGN = "ASSIGN"
    RELOP = "RELOP"
    SEMICOLON = "SEMICOLON"
    COMMA = "COMMA"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"

    def __str__(self):
        return self.value


Token = namedtuple('Token', ['kind', 'text', 'line'])

RESERVED_WORDS = {
    'inteiro': TokenKind.TYPE_INTEIRO,
    'real': TokenKind.TYPE_REAL,
    'caracter': TokenKind.TYPE_CARACTER,
    'se': TokenKind.SE,
    'entao': TokenKind.ENTAO,
    'senao': TokenKind.SENAO,
    'enquanto': TokenKind.ENQUANTO,
    'E': TokenKind.AND,
    'OR': TokenKind.OR,
    'NOT': TokenKind.NOT,
    'RESTO': TokenKind.RESTO,
}

TYPE_KINDS = (TokenKind.TYPE_INTEIRO, TokenKind.TYPE_REAL, TokenKind.TYPE_CARACTER)

class Lexer:
    token_specification = [
        ("WHITESPACE",    r'\s+'),
        ("PROGRAM_END",   r'\$\.'),
        ("PROGRAM_START", r'\$'),
        ("NUMBER",        r'[0-9.]+'),            # "1.2.3" is one token
        ("WORD",          r'[A-Za-z][A-Za-z0-9]*'),
        ("RELOP",         r'==|!=|>=|<=|>|<'),
        ("ASSIGN",        r'='),
        ("SEMICOLON",     r';'),
        ("COMMA",         r','),
        ("LPAREN",        r'\('),
        ("RPAREN",        r'\)'),
        ("PLUS",          r'\+'),
        ("TIMES",         r'\*'),
        ("DIVIDE",        r'/'),
        ("MISMATCH",      r'.'),
    ]
    tok_regex = '|'.join(f'(?P<{n}>{p})' for n, p in token_specification)
    master_re = re.compile(tok_regex, re.DOTALL)

    def __init__(self, code):
        self.code = code
        self.reset()

    def reset(self):
        """Rewind to the start of the source."""
        self.pos = 0
        self.lineno = 1

    def __iter__(self):
        scanner = Lexer(self.code)
        while True:
            tok = scanner.next_token()
            yield tok
            if tok.kind is TokenKind.EOF:
                return

    def tokenize(self):
        """All tokens of the source, EOF included."""
        return list(self)

    def next_token(self):
        while True:
            mo = self.master_re.match(self.code, self.pos)
            if mo is None:
                return Token(TokenKind.EOF, '', self.lineno)
            kind = mo.lastgroup
            val = mo.group()
            if kind == "WHITESPACE":
                self.lineno += val.count('\n')
                self.pos = mo.end()
                continue
            if kind == "MISMATCH":
                raise LexicalError(f"unexpected character {val!r}", self.lineno)
            if kind == "WORD":
                if len(val) > MAX_IDENTIFIER_LENGTH:
                    raise LexicalError(
                        f"identifier '{val}' exceeds {MAX_IDENTIFIER_LENGTH} characters", self.lineno)
                token_kind = RESERVED_WORDS.get(val, TokenKind.IDENTIFIER)
            else:
                token_kind = TokenKind[kind]
            self.pos = mo.end()
            return Token(token_kind, val, self.lineno)
