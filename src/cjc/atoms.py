'''
dataclasses de la IR lineal de tres direcciones (átomos)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

class AtomOp(str, Enum):
    MOV = "MOV"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    TST = "TST"
    JMP = "JMP"
    LBL = "LBL"
    HLT = "HLT"

ARITH_OPS = (AtomOp.ADD, AtomOp.SUB, AtomOp.MUL, AtomOp.DIV)

def _fmt(value: object) -> str:
    return "null" if value is None else str(value)

@dataclass(frozen=True)
class Atom:
    """Instrucción de la IR. Cada operación usa un subconjunto fijo de campos:

    - MOV: src1, dest
    - ADD/SUB/MUL/DIV: src1, src2, dest
    - TST: src1, src2, cmp, label (salta a label cuando la prueba falla)
    - JMP, LBL: label
    - HLT: ninguno
    """
    op: AtomOp
    src1: Optional[str] = None
    src2: Optional[str] = None
    dest: Optional[str] = None
    cmp: Optional[int] = None
    label: Optional[str] = None

    def __str__(self) -> str:
        return (f"Atom({self.op.value}, {_fmt(self.src1)}, {_fmt(self.src2)}, "
                f"{_fmt(self.dest)}, {_fmt(self.cmp)}, {_fmt(self.label)})")

# ---- Constructores ----

def mov(src: str, dest: str) -> Atom:
    return Atom(AtomOp.MOV, src1=src, dest=dest)

def arith(op: AtomOp, src1: str, src2: str, dest: str) -> Atom:
    if op not in ARITH_OPS:
        raise ValueError(f"Operación aritmética inválida: {op}")
    return Atom(op, src1=src1, src2=src2, dest=dest)

def tst(src1: str, src2: str, cmp: int, label: str) -> Atom:
    return Atom(AtomOp.TST, src1=src1, src2=src2, cmp=cmp, label=label)

def jmp(label: str) -> Atom:
    return Atom(AtomOp.JMP, label=label)

def lbl(label: str) -> Atom:
    return Atom(AtomOp.LBL, label=label)

def hlt() -> Atom:
    return Atom(AtomOp.HLT)

class ExprResult(NamedTuple):
    """Resultado de compilar una expresión: nombre del valor y código de comparación (0 = ninguno)."""
    name: str
    cmp: int = 0
