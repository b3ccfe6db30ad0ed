'''
clase Diagnostic, helpers (línea/columna) y excepciones del compilador
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia", "nota"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Abarca errores, advertencias y notas, con ubicación opcional (archivo, línea y columna)
    y un mensaje de ayuda (pista) para orientar la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file)

def warning(message: str, *, line: int | None = None, col: int | None = None,
            file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, col, hint, file)

# ---- Errores fatales ----

class CompileError(Exception):
    """Error fatal de compilación; lleva el Diagnostic que lo describe."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic

    def with_file(self, file: Optional[str]) -> "CompileError":
        """Completa el nombre de archivo del diagnóstico (si faltaba)."""
        if file is not None and self.diagnostic.file is None:
            d = self.diagnostic
            self.diagnostic = Diagnostic(d.severity, d.message, d.line, d.col, d.hint, file)
            self.args = (str(self.diagnostic),)
        return self

class ParseError(CompileError):
    """Violación de la gramática: token inesperado, delimitador ausente o tokens sobrantes."""

class UndefinedLabelError(CompileError):
    """Un JMP/TST apunta a una etiqueta que nunca se definió."""

    def __init__(self, label: str):
        super().__init__(error(f"Etiqueta no definida: {label}",
                               hint="cada etiqueta usada por JMP/TST necesita su LBL"))
        self.label = label

class EncodingRangeError(CompileError):
    """Un campo de la palabra de instrucción no cabe en su ancho de bits."""

    def __init__(self, field: str, value: int, bits: int):
        super().__init__(error(f"Campo '{field}' fuera de rango: {value} (máximo {(1 << bits) - 1}, {bits} bits)"))
        self.field = field
        self.value = value
        self.bits = bits
