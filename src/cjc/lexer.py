from __future__ import annotations
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .tokens import (
    Token, TokenKind, KEYWORDS, OPERATOR_CHARS, DELIM_CHARS, TWO_CHAR_OPERATORS, EOF_TEXT,
)
from .diagnostics import Diagnostic, warning

logger = logging.getLogger(__name__)

class State(Enum):
    START = "START"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    DECIMAL = "DECIMAL"
    OPERATOR = "OPERATOR"
    DELIM = "DELIM"
    ACCEPT = "ACCEPT"
    ERROR = "ERROR"

class Event(Enum):
    LETTER = "LETTER"
    DIGIT = "DIGIT"
    DOT = "DOT"
    OPERATOR_CHAR = "OPERATOR_CHAR"
    DELIM_CHAR = "DELIM_CHAR"
    WHITESPACE = "WHITESPACE"
    UNKNOWN = "UNKNOWN"
    END = "END"

# ---- Tabla de transiciones (estado, evento) -> estado ----
# Los pares ausentes van a ERROR. ACCEPT y ERROR son transitorios: tras emitir
# se vuelve a START, así que no tienen fila propia.

TRANSITIONS: Dict[Tuple[State, Event], State] = {}

def _row(state: State, **moves: State) -> None:
    for ev_name, nxt in moves.items():
        TRANSITIONS[(state, Event[ev_name])] = nxt

_row(State.START,
     LETTER=State.IDENTIFIER, DIGIT=State.NUMBER, DOT=State.ERROR,
     OPERATOR_CHAR=State.OPERATOR, DELIM_CHAR=State.DELIM,
     WHITESPACE=State.START, UNKNOWN=State.ERROR, END=State.ACCEPT)
_row(State.IDENTIFIER,
     LETTER=State.IDENTIFIER, DIGIT=State.IDENTIFIER,
     WHITESPACE=State.ACCEPT, OPERATOR_CHAR=State.ACCEPT, DELIM_CHAR=State.ACCEPT, END=State.ACCEPT)
_row(State.NUMBER,
     DIGIT=State.NUMBER, DOT=State.DECIMAL,
     WHITESPACE=State.ACCEPT, OPERATOR_CHAR=State.ACCEPT, DELIM_CHAR=State.ACCEPT, END=State.ACCEPT)
_row(State.DECIMAL,
     DIGIT=State.DECIMAL, DOT=State.ERROR,
     WHITESPACE=State.ACCEPT, OPERATOR_CHAR=State.ACCEPT, DELIM_CHAR=State.ACCEPT, END=State.ACCEPT)
# Inalcanzable con la anticipación de operadores, se conserva en la tabla
_row(State.OPERATOR,
     OPERATOR_CHAR=State.OPERATOR,
     LETTER=State.ACCEPT, DIGIT=State.ACCEPT, DELIM_CHAR=State.ACCEPT, WHITESPACE=State.ACCEPT, END=State.ACCEPT)
# Cada delimitador es un token de un carácter
_row(State.DELIM, **{ev.name: State.ACCEPT for ev in Event})

_EMIT_KIND = {
    State.NUMBER: TokenKind.LITERAL,
    State.DECIMAL: TokenKind.LITERAL,
    State.OPERATOR: TokenKind.OPERATOR,
    State.DELIM: TokenKind.DELIM,
}

def classify_char(c: str) -> Event:
    """Clase de entrada de un carácter para la tabla de transiciones.

    Letras y dígitos son los de Unicode (str.isalpha/str.isdigit): 'ñ' es letra y '²' dígito.
    """
    if c.isalpha():
        return Event.LETTER
    if c.isdigit():
        return Event.DIGIT
    if c == '.':
        return Event.DOT
    if c in OPERATOR_CHARS:
        return Event.OPERATOR_CHAR
    if c in DELIM_CHARS:
        return Event.DELIM_CHAR
    if c.isspace():
        return Event.WHITESPACE
    return Event.UNKNOWN

def next_state(state: State, event: Event) -> State:
    return TRANSITIONS.get((state, event), State.ERROR)

def _classify_buffer(text: str, state: State) -> Optional[TokenKind]:
    if state is State.IDENTIFIER:
        return TokenKind.KEYWORD if text in KEYWORDS else TokenKind.IDENTIFIER
    return _EMIT_KIND.get(state)

def tokenize_lines(lines: Iterable[str]) -> List[Token]:
    """Escanea las líneas con el autómata y devuelve los tokens, terminados en un único EOF.

    Reglas:
      - Un carácter que completa un token (ACCEPT) se vuelve a escanear como inicio
        del siguiente, salvo que sea espacio en blanco (se consume).
      - En START, los caracteres de operador se resuelven con un carácter de
        anticipación: '>=' y '<=' son un token; cualquier otro es de un carácter.
      - Un carácter sin transición produce un token ERROR con ese carácter; el
        prefijo acumulado se descarta y el escaneo continúa.
    """
    tokens: List[Token] = []
    buf: List[str] = []
    state = State.START
    tok_line = tok_col = 0
    lineno = 0

    def _emit() -> None:
        nonlocal state
        text = "".join(buf)
        if text:
            kind = _classify_buffer(text, state)
            if kind is not None:
                tokens.append(Token(kind, text, tok_line, tok_col))
        buf.clear()
        state = State.START

    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        i = 0
        while i < len(line):
            c = line[i]

            # anticipación de operadores de dos caracteres
            if state is State.START and c in OPERATOR_CHARS:
                two = line[i:i + 2]
                if two in TWO_CHAR_OPERATORS:
                    tokens.append(Token(TokenKind.OPERATOR, two, lineno, i + 1))
                    i += 2
                else:
                    tokens.append(Token(TokenKind.OPERATOR, c, lineno, i + 1))
                    i += 1
                continue

            event = classify_char(c)
            nxt = next_state(state, event)

            if nxt is State.ACCEPT:
                _emit()
                if event is Event.WHITESPACE:
                    i += 1
                continue

            if nxt is State.ERROR:
                tokens.append(Token(TokenKind.ERROR, c, lineno, i + 1))
                buf.clear()
                state = State.START
                i += 1
                continue

            if nxt is State.START:
                i += 1
                continue

            if not buf:
                tok_line, tok_col = lineno, i + 1
            buf.append(c)
            state = nxt
            i += 1

        if next_state(state, Event.END) is State.ACCEPT:
            _emit()

    if buf:
        _emit()
    tokens.append(Token(TokenKind.EOF, EOF_TEXT, max(lineno, 1), None))
    logger.debug("lexer: %d tokens", len(tokens))
    return tokens

def tokenize(text: str) -> List[Token]:
    return tokenize_lines(text.splitlines())

def tokenize_file(path: str) -> List[Token]:
    """Lee el fuente UTF-8 línea a línea y lo tokeniza."""
    with open(path, "r", encoding="utf-8") as f:
        return tokenize_lines(f)

def lexical_diagnostics(tokens: Iterable[Token], *, filename: str | None = None) -> List[Diagnostic]:
    """Advertencias (no fatales) para cada token ERROR del flujo."""
    return [
        warning(f"Carácter no reconocido: '{t.text}'", line=t.line, col=t.col, file=filename)
        for t in tokens if t.kind is TokenKind.ERROR
    ]
