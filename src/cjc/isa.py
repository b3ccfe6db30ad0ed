'''
tabla formal de la máquina de acumulador (opcodes, campos usados, códigos de comparación)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

@dataclass(frozen=True)
class ISpec:
    """Especificación de una instrucción.

    - opcode: campo de 4 bits (bits 0-3)
    - uses_reg / uses_cmp / uses_addr: qué campos lleva la forma del mnemónico;
      los que no usa se codifican a 0
    """
    mnemonic: str
    opcode: int
    uses_reg: bool = True
    uses_cmp: bool = False
    uses_addr: bool = True

# Constantes de opcode
OPC_CLR = 0
OPC_ADD = 1
OPC_SUB = 2
OPC_MUL = 3
OPC_DIV = 4
OPC_JMP = 5
OPC_CMP = 6
OPC_LOD = 7
OPC_STO = 8
OPC_HLT = 9

BY_OPCODE: Dict[int, ISpec] = {}

def _add(spec: ISpec) -> None:
    BY_OPCODE[spec.opcode] = spec

_add(ISpec("clr", OPC_CLR, uses_addr=False))
_add(ISpec("add", OPC_ADD))
_add(ISpec("sub", OPC_SUB))
_add(ISpec("mul", OPC_MUL))
_add(ISpec("div", OPC_DIV))
_add(ISpec("jmp", OPC_JMP, uses_reg=False))           # r=0, cmp=0
_add(ISpec("cmp", OPC_CMP, uses_cmp=True))
_add(ISpec("lod", OPC_LOD))
_add(ISpec("sto", OPC_STO))
_add(ISpec("hlt", OPC_HLT, uses_reg=False, uses_addr=False))

def spec_for_opcode(opcode: int) -> Optional[ISpec]:
    return BY_OPCODE.get(opcode)

# ---- Códigos de comparación (campo de 3 bits) ----

CMP_NONE = 0

CMP_CODES: Dict[str, int] = {
    "=": 1,
    "<": 2,
    ">": 3,
    "<=": 4,
    ">=": 5,
    "!=": 6,
    "!": 6,
}

# Forma canónica para listados
CMP_NAMES: Dict[int, str] = {
    0: "",
    1: "=",
    2: "<",
    3: ">",
    4: "<=",
    5: ">=",
    6: "!=",
}

def cmp_code(op: Optional[str]) -> int:
    """Código de comparación de un operador relacional; 0 si no hay operador."""
    if op is None:
        return CMP_NONE
    return CMP_CODES.get(op, CMP_NONE)
