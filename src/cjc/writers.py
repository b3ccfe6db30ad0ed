from __future__ import annotations
from typing import Iterable, List
from .utils import to_hex32, to_bin32
from .encoding import disassemble
from .tokens import Token
from .atoms import Atom

ATOM_HEADER = "Atom Stream:"
SEPARATOR = "-" * 35

def token_lines(tokens: Iterable[Token]) -> List[str]:
    return [str(t) for t in tokens]

def atom_lines(atoms: Iterable[Atom], *, header: bool = True) -> List[str]:
    lines = [str(a) for a in atoms]
    if header:
        return [ATOM_HEADER, *lines, SEPARATOR]
    return lines

def to_hex_lines(words: Iterable[int]) -> List[str]:
    return [to_hex32(w) for w in words]

def to_bin_lines(words: Iterable[int]) -> List[str]:
    return [to_bin32(w) for w in words]

def to_listing_lines(words: Iterable[int]) -> List[str]:
    """Listado 'índice: binario  MNEMÓNICO operandos'."""
    return [f"{i:4d}: {to_bin32(w)}  {disassemble(w)}" for i, w in enumerate(words)]

def _write_lines(lines: Iterable[str], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

def write_hex(words: Iterable[int], path: str) -> None:
    _write_lines(to_hex_lines(words), path)

def write_bin(words: Iterable[int], path: str) -> None:
    _write_lines(to_bin_lines(words), path)
