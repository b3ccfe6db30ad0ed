# src/cjc/codegen.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from . import encoding as enc
from .atoms import Atom, AtomOp
from .regs import ACCUMULATOR
from .diagnostics import UndefinedLabelError

logger = logging.getLogger(__name__)

# ---------- Resultados de las pasadas ----------

@dataclass(frozen=True)
class PendingJump:
    index: int      # índice de la palabra JMP a parchear
    label: str

@dataclass
class EmitResult:
    """Estado al terminar la pasada 1 (emisión)."""
    words: List[int] = field(default_factory=list)
    addresses: Dict[str, int] = field(default_factory=dict)   # operando -> dirección
    labels: Dict[str, int] = field(default_factory=dict)      # etiqueta -> índice de instrucción
    pending: List[PendingJump] = field(default_factory=list)

@dataclass(frozen=True)
class CodeGenResult:
    words: List[int]
    addresses: Dict[str, int]
    labels: Dict[str, int]

_ARITH = {
    AtomOp.ADD: enc.add,
    AtomOp.SUB: enc.sub,
    AtomOp.MUL: enc.mul,
    AtomOp.DIV: enc.div,
}

# ---------- Pasada 1 (emisión) ----------

def _require(atom: Atom, *names: str) -> None:
    missing = [n for n in names if getattr(atom, n) is None]
    if missing:
        raise ValueError(f"{atom.op.value} requiere {', '.join(names)}: {atom}")

def emit_pass(atoms: Sequence[Atom]) -> EmitResult:
    """Recorre los átomos en orden, asigna direcciones y emite palabras.

    Los saltos se emiten como 'JMP 0' y quedan en la lista de pendientes.
    """
    out = EmitResult()

    def addr(name: str) -> int:
        # orden de primer uso, espacio único para variables, literales y temporales
        a = out.addresses.get(name)
        if a is None:
            a = len(out.addresses)
            out.addresses[name] = a
            logger.debug("codegen: %s -> @%d", name, a)
        return a

    def placeholder_jump(label: str) -> None:
        out.pending.append(PendingJump(len(out.words), label))
        out.words.append(enc.jmp(0))

    for a in atoms:
        op = a.op
        if op is AtomOp.LBL:
            _require(a, "label")
            out.labels[a.label] = len(out.words)
        elif op is AtomOp.MOV:
            _require(a, "src1", "dest")
            src, dest = addr(a.src1), addr(a.dest)
            out.words.append(enc.lod(ACCUMULATOR, src))
            out.words.append(enc.sto(ACCUMULATOR, dest))
        elif op in _ARITH:
            _require(a, "src1", "src2", "dest")
            a1, a2, d = addr(a.src1), addr(a.src2), addr(a.dest)
            out.words.append(enc.lod(ACCUMULATOR, a1))
            out.words.append(_ARITH[op](ACCUMULATOR, a2))
            out.words.append(enc.sto(ACCUMULATOR, d))
        elif op is AtomOp.TST:
            _require(a, "src1", "src2", "cmp", "label")
            a1, a2 = addr(a.src1), addr(a.src2)
            out.words.append(enc.lod(ACCUMULATOR, a1))
            out.words.append(enc.cmp(ACCUMULATOR, a.cmp, a2))
            placeholder_jump(a.label)
        elif op is AtomOp.JMP:
            _require(a, "label")
            placeholder_jump(a.label)
        elif op is AtomOp.HLT:
            out.words.append(enc.hlt())
        else:
            raise ValueError(f"Átomo desconocido: {a}")

    logger.debug("codegen: pass 1 emitted %d words, %d pending jumps", len(out.words), len(out.pending))
    return out

# ---------- Pasada 2 (parcheo) ----------

def patch_pass(emitted: EmitResult) -> List[int]:
    """Reescribe el campo de dirección de cada salto pendiente.

    Trabaja sobre una copia: si alguna etiqueta no existe se lanza
    UndefinedLabelError y no se devuelve ninguna lista parcial.
    """
    words = list(emitted.words)
    for pj in emitted.pending:
        target = emitted.labels.get(pj.label)
        if target is None:
            raise UndefinedLabelError(pj.label)
        words[pj.index] = enc.patch_address(words[pj.index], target)
        logger.debug("codegen: patched #%d -> %s (%d)", pj.index, pj.label, target)
    return words

def generate(atoms: Sequence[Atom]) -> CodeGenResult:
    emitted = emit_pass(atoms)
    words = patch_pass(emitted)
    return CodeGenResult(words=words, addresses=dict(emitted.addresses), labels=dict(emitted.labels))
