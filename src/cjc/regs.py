'''
banco de registros de la máquina de acumulador (r0..r15)
'''

from __future__ import annotations

# Campo de registro de 4 bits
NUM_REGS = 16

# El acumulador es el registro implícito de LOD/STO/ADD/.../CMP
ACCUMULATOR = 0

def reg_name(num: int) -> str:
    """Nombre para listados: 'acc' para el acumulador, 'rN' para el resto."""
    if not 0 <= num < NUM_REGS:
        raise ValueError(f"Registro inválido: {num}")
    return "acc" if num == ACCUMULATOR else f"r{num}"
