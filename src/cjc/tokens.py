'''
dataclass Token y clases de token
'''

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

class TokenKind(str, Enum):
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    LITERAL = "LITERAL"
    OPERATOR = "OPERATOR"
    DELIM = "DELIM"
    ERROR = "ERROR"
    EOF = "EOF"

# Comparación sensible a mayúsculas
KEYWORDS: FrozenSet[str] = frozenset({"for", "during", "if", "elif", "else", "num", "dec"})

# Palabras que abren una declaración de variable
TYPE_KEYWORDS: FrozenSet[str] = frozenset({"num", "dec"})

OPERATOR_CHARS = "+-*/=!<>"
DELIM_CHARS = "();|"

# Operadores de dos caracteres reconocidos por la anticipación del lexer
TWO_CHAR_OPERATORS: FrozenSet[str] = frozenset({">=", "<="})

EOF_TEXT = "EOF"

@dataclass(frozen=True)
class Token:
    """Token clasificado. La posición (línea/columna, base 1) sólo sirve para diagnósticos."""
    kind: TokenKind
    text: str
    line: Optional[int] = field(default=None, compare=False)
    col: Optional[int] = field(default=None, compare=False)

    def is_(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        return self.kind is kind and (text is None or self.text == text)

    def __str__(self) -> str:
        return f"<{self.kind.value}, {self.text}>"
