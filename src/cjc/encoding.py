# src/cjc/encoding.py
from __future__ import annotations
from dataclasses import dataclass

from .isa import (
    spec_for_opcode, CMP_NAMES,
    OPC_CLR, OPC_ADD, OPC_SUB, OPC_MUL, OPC_DIV, OPC_JMP, OPC_CMP, OPC_LOD, OPC_STO, OPC_HLT,
)
from .regs import ACCUMULATOR, reg_name
from .utils import u32, mask, is_unsigned_nbit, split_bits
from .diagnostics import EncodingRangeError

# ---------------- Formato de palabra ----------------
#
#   bits 0-3   : opcode
#   bit  4     : reservado (0)
#   bits 5-7   : cmp
#   bits 8-11  : r
#   bits 12-31 : a
#
OPCODE_BITS = 4
CMP_BITS = 3
REG_BITS = 4
ADDR_BITS = 20

CMP_SHIFT = 5
REG_SHIFT = 8
ADDR_SHIFT = 12

ADDR_MASK = mask(ADDR_BITS) << ADDR_SHIFT

FIELDS = ((3, 0), (7, 5), (11, 8), (31, 12))

@dataclass(frozen=True)
class Decoded:
    opcode: int
    cmp: int
    reg: int
    address: int

def _check(field: str, value: int, bits: int) -> int:
    if not is_unsigned_nbit(value, bits):
        raise EncodingRangeError(field, value, bits)
    return value

# ---------------- Empaquetado ----------------

def encode(opcode: int, cmp: int, reg: int, address: int) -> int:
    """Empaqueta los cuatro campos en una palabra de 32 bits.

    Cada campo se valida contra su ancho; un valor que no cabe lanza
    EncodingRangeError en lugar de truncarse.
    """
    _check("opcode", opcode, OPCODE_BITS)
    _check("cmp", cmp, CMP_BITS)
    _check("reg", reg, REG_BITS)
    _check("address", address, ADDR_BITS)
    return u32(opcode |
               (cmp << CMP_SHIFT) |
               (reg << REG_SHIFT) |
               (address << ADDR_SHIFT))

def decode(word: int) -> Decoded:
    """Desempaqueta una palabra en sus campos (el bit 4 se ignora)."""
    opcode, cmp, reg, address = split_bits(u32(word), FIELDS)
    return Decoded(opcode=opcode, cmp=cmp, reg=reg, address=address)

def patch_address(word: int, address: int) -> int:
    """Reescribe sólo el campo de dirección; opcode/cmp/registro se conservan."""
    _check("address", address, ADDR_BITS)
    return u32((word & ~ADDR_MASK) | (address << ADDR_SHIFT))

# ---------------- Constructores por opcode ----------------

def clr(r: int) -> int:
    return encode(OPC_CLR, 0, r, 0)

def add(r: int, address: int) -> int:
    return encode(OPC_ADD, 0, r, address)

def sub(r: int, address: int) -> int:
    return encode(OPC_SUB, 0, r, address)

def mul(r: int, address: int) -> int:
    return encode(OPC_MUL, 0, r, address)

def div(r: int, address: int) -> int:
    return encode(OPC_DIV, 0, r, address)

def lod(r: int, address: int) -> int:
    return encode(OPC_LOD, 0, r, address)

def sto(r: int, address: int) -> int:
    return encode(OPC_STO, 0, r, address)

def cmp(r: int, cmp_code: int, address: int) -> int:
    return encode(OPC_CMP, cmp_code, r, address)

def jmp(address: int) -> int:
    # JMP siempre usa registro 0 y condición 0
    return encode(OPC_JMP, 0, ACCUMULATOR, address)

def hlt() -> int:
    return encode(OPC_HLT, 0, 0, 0)

# ---------------- Desensamblado ----------------

def disassemble(word: int) -> str:
    """Texto legible de una palabra, p.ej. 'LOD acc, 3' o 'CMP acc, <, 1'."""
    d = decode(word)
    sp = spec_for_opcode(d.opcode)
    if sp is None:
        return f".word {word:#010x}"
    ops = []
    if sp.uses_reg:
        ops.append(reg_name(d.reg))
    if sp.uses_cmp:
        ops.append(CMP_NAMES.get(d.cmp) or str(d.cmp))
    if sp.uses_addr:
        ops.append(str(d.address))
    mn = sp.mnemonic.upper()
    return f"{mn} {', '.join(ops)}" if ops else mn
