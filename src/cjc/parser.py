# src/cjc/parser.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .tokens import Token, TokenKind, TYPE_KEYWORDS, EOF_TEXT
from .atoms import Atom, AtomOp, ExprResult, mov, arith, tst, jmp, lbl
from .isa import cmp_code
from .diagnostics import ParseError, error

logger = logging.getLogger(__name__)

REL_OPS = (">", ">=", "<", "<=", "=", "!")
ADD_OPS = {"+": AtomOp.ADD, "-": AtomOp.SUB}
MUL_OPS = {"*": AtomOp.MUL, "/": AtomOp.DIV}

# Operando contra el que se compara el resultado de una condición
TEST_ZERO = "0"

STMT_KEYWORDS = TYPE_KEYWORDS | {"if", "for", "during"}

@dataclass
class CompilationContext:
    """Contadores de temporales (t0, t1, ...) y etiquetas (L0, L1, ...) de una unidad.

    Son monótonos: un nombre nunca se reutiliza dentro de la misma compilación.
    """
    temp_counter: int = 0
    label_counter: int = 0

    def new_temp(self) -> str:
        name = f"t{self.temp_counter}"
        self.temp_counter += 1
        return name

    def new_label(self) -> str:
        name = f"L{self.label_counter}"
        self.label_counter += 1
        return name

class Parser:
    """Descenso recursivo con un token de anticipación que traduce a átomos.

    Gramática (|expr| es una expresión entre barras):
      Program    := StmtList EOF
      Stmt       := VarDecl ';' | Assign ';' | If | For | During
      VarDecl    := ('num'|'dec') IDENT ['='] [Expr]
      Assign     := IDENT ['='] Expr
      If         := 'if' |Expr| '(' StmtList ')' { 'elif' |Expr| '(' StmtList ')' } [ 'else' '(' StmtList ')' ]
      For        := 'for' |Init| |Expr| |Update| '(' StmtList ')'
      During     := 'during' |Expr| '(' StmtList ')'
      Expr       := AddExpr [ RelOp AddExpr ]
      AddExpr    := MulExpr { ('+'|'-') MulExpr }
      MulExpr    := Primary { ('*'|'/') Primary }
      Primary    := LITERAL | IDENT | |Expr|
    """

    def __init__(self, tokens: Sequence[Token], ctx: Optional[CompilationContext] = None,
                 *, filename: Optional[str] = None):
        self.tokens = list(tokens)
        self.pos = 0
        self.ctx = ctx if ctx is not None else CompilationContext()
        self.atoms: List[Atom] = []
        self.filename = filename

    # ---------------- Navegación de tokens ----------------

    def current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        last = self.tokens[-1] if self.tokens else None
        return Token(TokenKind.EOF, EOF_TEXT, last.line if last else None, None)

    def _advance(self) -> Token:
        t = self.current()
        self.pos += 1
        return t

    def _fail(self, expected: str) -> ParseError:
        t = self.current()
        return ParseError(error(f"Se esperaba {expected} pero se encontró {t}",
                                line=t.line, col=t.col, file=self.filename))

    def _at(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        return self.current().is_(kind, text)

    def _accept(self, kind: TokenKind, text: Optional[str] = None) -> Optional[Token]:
        if self._at(kind, text):
            return self._advance()
        return None

    def _expect(self, kind: TokenKind, text: Optional[str] = None) -> Token:
        t = self._accept(kind, text)
        if t is None:
            raise self._fail(f"'{text}'" if text is not None else kind.value)
        return t

    def _expect_delim(self, text: str) -> Token:
        return self._expect(TokenKind.DELIM, text)

    def _emit(self, atom: Atom) -> None:
        self.atoms.append(atom)

    def _take_atoms_since(self, mark: int) -> List[Atom]:
        """Retira y devuelve los átomos emitidos desde 'mark' (para reubicarlos)."""
        taken = self.atoms[mark:]
        del self.atoms[mark:]
        return taken

    # ---------------- Programa y sentencias ----------------

    def parse_program(self) -> List[Atom]:
        self.parse_stmt_list()
        if not self._at(TokenKind.EOF):
            raise self._fail("fin de programa")
        logger.debug("parser: parsing complete, %d atoms", len(self.atoms))
        return self.atoms

    def _starts_stmt(self, t: Token) -> bool:
        return (
            (t.kind is TokenKind.KEYWORD and t.text in STMT_KEYWORDS)
            or t.kind is TokenKind.IDENTIFIER
        )

    def parse_stmt_list(self) -> None:
        while self._starts_stmt(self.current()):
            self.parse_stmt()

    def parse_stmt(self) -> None:
        t = self.current()
        if t.kind is TokenKind.KEYWORD and t.text in TYPE_KEYWORDS:
            self.parse_var_decl()
            self._expect_delim(";")
        elif t.kind is TokenKind.IDENTIFIER:
            self.parse_assignment()
            self._expect_delim(";")
        elif t.is_(TokenKind.KEYWORD, "if"):
            self.parse_if()
        elif t.is_(TokenKind.KEYWORD, "for"):
            self.parse_for()
        elif t.is_(TokenKind.KEYWORD, "during"):
            self.parse_during()
        else:
            raise self._fail("una sentencia")

    def _accept_assign_op(self) -> bool:
        return self._accept(TokenKind.OPERATOR, "=") is not None

    def parse_var_decl(self) -> None:
        self._expect(TokenKind.KEYWORD)
        var = self._expect(TokenKind.IDENTIFIER).text
        if self._accept_assign_op() or self._starts_expr(self.current()):
            value = self.parse_expr()
            self._emit(mov(value.name, var))

    def parse_assignment(self) -> None:
        var = self._expect(TokenKind.IDENTIFIER).text
        self._accept_assign_op()
        value = self.parse_expr()
        self._emit(mov(value.name, var))

    def _parse_condition(self) -> ExprResult:
        self._expect_delim("|")
        cond = self.parse_expr()
        self._expect_delim("|")
        return cond

    def _parse_block(self) -> None:
        self._expect_delim("(")
        self.parse_stmt_list()
        self._expect_delim(")")

    def parse_if(self) -> None:
        self._expect(TokenKind.KEYWORD, "if")
        cond = self._parse_condition()
        else_label = self.ctx.new_label()
        end_label = self.ctx.new_label()

        self._emit(tst(cond.name, TEST_ZERO, cond.cmp, else_label))
        self._parse_block()
        self._emit(jmp(end_label))
        self._emit(lbl(else_label))

        # elif/else caen al siguiente bloque sin salto al final
        while self._accept(TokenKind.KEYWORD, "elif"):
            cond = self._parse_condition()
            next_label = self.ctx.new_label()
            self._emit(tst(cond.name, TEST_ZERO, cond.cmp, next_label))
            self._parse_block()
            self._emit(lbl(next_label))

        if self._accept(TokenKind.KEYWORD, "else"):
            self._parse_block()

        self._emit(lbl(end_label))

    def parse_for(self) -> None:
        self._expect(TokenKind.KEYWORD, "for")

        self._expect_delim("|")
        t = self.current()
        if t.kind is TokenKind.KEYWORD and t.text in TYPE_KEYWORDS:
            self.parse_var_decl()
        elif t.kind is TokenKind.IDENTIFIER:
            self.parse_assignment()
        self._expect_delim("|")

        mark = len(self.atoms)
        cond = self._parse_condition()
        cond_atoms = self._take_atoms_since(mark)

        update_label = self.ctx.new_label()
        self._expect_delim("|")
        update_pos = self.pos
        self._parse_update()
        self._expect_delim("|")

        self._emit_loop(cond, cond_atoms, update_label, update_pos)

    def _parse_update(self) -> None:
        if self._at(TokenKind.IDENTIFIER):
            self.parse_assignment()

    def parse_during(self) -> None:
        self._expect(TokenKind.KEYWORD, "during")
        mark = len(self.atoms)
        cond = self._parse_condition()
        cond_atoms = self._take_atoms_since(mark)
        self._emit_loop(cond, cond_atoms)

    def _emit_loop(self, cond: ExprResult, cond_atoms: List[Atom],
                   update_label: Optional[str] = None, update_pos: Optional[int] = None) -> None:
        # inicio: condición recalculada en cada vuelta; fin: salida cuando falla
        loop_start = self.ctx.new_label()
        loop_end = self.ctx.new_label()

        self._emit(lbl(loop_start))
        self.atoms.extend(cond_atoms)
        self._emit(tst(cond.name, TEST_ZERO, cond.cmp, loop_end))

        self._parse_block()

        if update_label is not None:
            # la actualización se vuelve a emitir tras el cuerpo, con temporales nuevos
            self._emit(lbl(update_label))
            resume = self.pos
            self.pos = update_pos
            self._parse_update()
            self.pos = resume

        self._emit(jmp(loop_start))
        self._emit(lbl(loop_end))

    # ---------------- Expresiones ----------------

    def _starts_expr(self, t: Token) -> bool:
        return t.kind in (TokenKind.LITERAL, TokenKind.IDENTIFIER) or t.is_(TokenKind.DELIM, "|")

    def parse_expr(self) -> ExprResult:
        return self.parse_rel_expr()

    def parse_rel_expr(self) -> ExprResult:
        left = self.parse_add_expr()
        t = self.current()
        if t.kind is TokenKind.OPERATOR and t.text in REL_OPS:
            self._advance()
            right = self.parse_add_expr()
            result = self.ctx.new_temp()
            self._emit(arith(AtomOp.SUB, left, right, result))
            return ExprResult(result, cmp_code(t.text))
        return ExprResult(left)

    def parse_add_expr(self) -> str:
        left = self.parse_mul_expr()
        while self.current().kind is TokenKind.OPERATOR and self.current().text in ADD_OPS:
            op = ADD_OPS[self._advance().text]
            right = self.parse_mul_expr()
            result = self.ctx.new_temp()
            self._emit(arith(op, left, right, result))
            left = result
        return left

    def parse_mul_expr(self) -> str:
        left = self.parse_primary()
        while self.current().kind is TokenKind.OPERATOR and self.current().text in MUL_OPS:
            op = MUL_OPS[self._advance().text]
            right = self.parse_primary()
            result = self.ctx.new_temp()
            self._emit(arith(op, left, right, result))
            left = result
        return left

    def parse_primary(self) -> str:
        t = self.current()
        if t.kind in (TokenKind.LITERAL, TokenKind.IDENTIFIER):
            self._advance()
            return t.text
        if t.is_(TokenKind.DELIM, "|"):
            self._advance()
            # el código de comparación interno no se propaga
            inner = self.parse_expr()
            self._expect_delim("|")
            return inner.name
        raise self._fail("un literal, identificador o '|expr|'")

def parse(tokens: Sequence[Token], *, filename: Optional[str] = None,
          ctx: Optional[CompilationContext] = None) -> List[Atom]:
    """Valida la secuencia de tokens y devuelve los átomos; lanza ParseError ante el primer error."""
    return Parser(tokens, ctx, filename=filename).parse_program()
