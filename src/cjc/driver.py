from __future__ import annotations
import argparse, logging, os, sys
from dataclasses import dataclass
from typing import List, Optional

from .tokens import Token
from .atoms import Atom
from .lexer import tokenize, tokenize_file, lexical_diagnostics
from .parser import parse
from .codegen import generate, CodeGenResult
from .diagnostics import CompileError, Diagnostic
from .writers import (
    token_lines, atom_lines, to_bin_lines, to_hex_lines, to_listing_lines, write_bin, write_hex,
)

LOG = logging.getLogger("cjc.driver")

DEFAULT_SOURCE = "main.cj"

@dataclass(frozen=True)
class CompileResult:
    tokens: List[Token]
    atoms: List[Atom]
    code: CodeGenResult
    diagnostics: List[Diagnostic]

    @property
    def words(self) -> List[int]:
        return self.code.words

def compile_tokens(tokens: List[Token], *, filename: Optional[str] = None,
                   diagnostics: Optional[List[Diagnostic]] = None) -> CompileResult:
    diags = diagnostics if diagnostics is not None else lexical_diagnostics(tokens, filename=filename)
    try:
        atoms = parse(tokens, filename=filename)
        code = generate(atoms)
    except CompileError as ex:
        raise ex.with_file(filename)
    LOG.debug("compiled %s: %d tokens, %d atoms, %d words",
              filename or "<mem>", len(tokens), len(atoms), len(code.words))
    return CompileResult(tokens=tokens, atoms=atoms, code=code, diagnostics=diags)

def compile_text(text: str, *, filename: str | None = None) -> CompileResult:
    """Lexer, parser y generador de código sobre un texto en memoria.
    Los errores léxicos vuelven como advertencias; los fatales se lanzan (CompileError)."""
    return compile_tokens(tokenize(text), filename=filename)

def compile_file(path: str) -> CompileResult:
    return compile_tokens(tokenize_file(path), filename=path)

def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cjc", description="Compilador de .cj a palabras de 32 bits")
    ap.add_argument("source", nargs="?", default=DEFAULT_SOURCE,
                    help=f"archivo fuente (por defecto {DEFAULT_SOURCE})")
    ap.add_argument("--no-tokens", action="store_true", help="no imprimir los tokens")
    ap.add_argument("--no-atoms", action="store_true", help="no imprimir los átomos")
    ap.add_argument("--hex", action="store_true", help="imprimir las palabras en hexadecimal")
    ap.add_argument("--listing", action="store_true", help="imprimir un listado desensamblado")
    ap.add_argument("--out-bin", help="archivo de salida con palabras en binario ASCII")
    ap.add_argument("--out-hex", help="archivo de salida con palabras en hexadecimal")
    ap.add_argument("--log-level", default=os.environ.get("CJC_LOG", "WARNING"),
                    help="nivel de logging (por defecto WARNING)")
    return ap

def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        tokens = tokenize_file(args.source)
    except FileNotFoundError:
        print(f"ERROR: archivo no encontrado: {args.source}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    # los errores léxicos no son fatales: se imprimen antes que cualquier error de sintaxis
    diags = lexical_diagnostics(tokens, filename=args.source)
    for d in diags:
        print(d, file=sys.stderr)

    # el volcado de tokens sale aunque el análisis sintáctico falle después
    if not args.no_tokens:
        for line in token_lines(tokens):
            print(line)

    try:
        result = compile_tokens(tokens, filename=args.source, diagnostics=diags)
    except CompileError as ex:
        print(ex.diagnostic, file=sys.stderr)
        return 1

    out: List[str] = []
    if not args.no_atoms:
        out += atom_lines(result.atoms)
    if args.listing:
        out += to_listing_lines(result.words)
    elif args.hex:
        out += to_hex_lines(result.words)
    else:
        out += to_bin_lines(result.words)
    for line in out:
        print(line)

    try:
        if args.out_bin:
            write_bin(result.words, args.out_bin)
        if args.out_hex:
            write_hex(result.words, args.out_hex)
    except OSError as ex:
        print(f"ERROR al escribir salidas: {ex}", file=sys.stderr)
        return 3

    LOG.info("OK: %d instrucciones", len(result.words))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
