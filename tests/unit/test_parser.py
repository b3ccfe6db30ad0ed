import pytest
from src.cjc.lexer import tokenize
from src.cjc.parser import parse, Parser, CompilationContext
from src.cjc.atoms import Atom, AtomOp, mov, arith, tst, jmp, lbl
from src.cjc.diagnostics import ParseError

ADD, SUB, MUL, DIV = AtomOp.ADD, AtomOp.SUB, AtomOp.MUL, AtomOp.DIV

def _atoms(src):
    return parse(tokenize(src))

def test_declarations_and_assignment():
    assert _atoms("num x 5; num y 3; z = x + y;") == [
        mov("5", "x"),
        mov("3", "y"),
        arith(ADD, "x", "y", "t0"),
        mov("t0", "z"),
    ]

@pytest.mark.parametrize("src, expected", [
    ("num x;", []),
    ("dec r;", []),
    ("num x = 5;", [mov("5", "x")]),
    ("dec r 2.5;", [mov("2.5", "r")]),
    ("x 7;", [mov("7", "x")]),
    ("x = y;", [mov("y", "x")]),
])
def test_var_decl_forms(src, expected):
    assert _atoms(src) == expected

def test_precedence_and_associativity():
    assert _atoms("z = a + b * c;") == [
        arith(MUL, "b", "c", "t0"), arith(ADD, "a", "t0", "t1"), mov("t1", "z"),
    ]
    assert _atoms("z = a - b - c;") == [
        arith(SUB, "a", "b", "t0"), arith(SUB, "t0", "c", "t1"), mov("t1", "z"),
    ]
    assert _atoms("z = a / b * c;") == [
        arith(DIV, "a", "b", "t0"), arith(MUL, "t0", "c", "t1"), mov("t1", "z"),
    ]

def test_pipe_grouping():
    assert _atoms("z = |a + b| * c;") == [
        arith(ADD, "a", "b", "t0"), arith(MUL, "t0", "c", "t1"), mov("t1", "z"),
    ]

def test_if_else_shape():
    atoms = _atoms("if |x < 5| ( y = 1; ) else ( y = 2; )")
    assert atoms == [
        arith(SUB, "x", "5", "t0"),
        tst("t0", "0", 2, "L0"),
        mov("1", "y"),
        jmp("L1"),
        lbl("L0"),
        mov("2", "y"),
        lbl("L1"),
    ]
    assert sum(a.op is AtomOp.TST for a in atoms) == 1
    assert sum(a.op is AtomOp.JMP for a in atoms) == 1
    assert sum(a.op is AtomOp.LBL for a in atoms) == 2

def test_if_elif_else_falls_through():
    src = "if |a < 1| ( x = 1; ) elif |a < 2| ( x = 2; ) else ( x = 3; )"
    assert _atoms(src) == [
        arith(SUB, "a", "1", "t0"),
        tst("t0", "0", 2, "L0"),
        mov("1", "x"),
        jmp("L1"),
        lbl("L0"),
        arith(SUB, "a", "2", "t1"),
        tst("t1", "0", 2, "L2"),
        mov("2", "x"),
        lbl("L2"),
        mov("3", "x"),
        lbl("L1"),
    ]

def test_if_without_relational_uses_code_zero():
    assert _atoms("if |x| ( y = 1; )") == [
        tst("x", "0", 0, "L0"), mov("1", "y"), jmp("L1"), lbl("L0"), lbl("L1"),
    ]

@pytest.mark.parametrize("op, code", [
    ("=", 1), ("<", 2), (">", 3), ("<=", 4), (">=", 5), ("!", 6),
])
def test_comparison_codes(op, code):
    atoms = _atoms(f"if |x {op} 5| ( y = 1; )")
    (t,) = [a for a in atoms if a.op is AtomOp.TST]
    assert t.cmp == code

def test_nested_comparison_code_not_propagated():
    atoms = _atoms("if ||x < 5|| ( )")
    (t,) = [a for a in atoms if a.op is AtomOp.TST]
    assert t.cmp == 0 and t.src1 == "t0"

def test_not_equal_pair_is_a_syntax_error():
    # '!=' llega como '!' seguido de '='
    with pytest.raises(ParseError):
        _atoms("if |x != 5| ( y = 1; )")

def test_during_loop_recomputes_condition():
    assert _atoms("during |i < 10| ( i = i + 1; )") == [
        lbl("L0"),
        arith(SUB, "i", "10", "t0"),
        tst("t0", "0", 2, "L1"),
        arith(ADD, "i", "1", "t1"),
        mov("t1", "i"),
        jmp("L0"),
        lbl("L1"),
    ]

def test_for_loop_shape():
    src = "for |num i = 0| |i < 3| |i = i + 1| ( s = s + i; )"
    assert _atoms(src) == [
        mov("0", "i"),
        arith(ADD, "i", "1", "t1"),
        mov("t1", "i"),
        lbl("L1"),
        arith(SUB, "i", "3", "t0"),
        tst("t0", "0", 2, "L2"),
        arith(ADD, "s", "i", "t2"),
        mov("t2", "s"),
        lbl("L0"),
        arith(ADD, "i", "1", "t3"),
        mov("t3", "i"),
        jmp("L1"),
        lbl("L2"),
    ]

def test_for_update_emitted_in_header_and_after_body():
    atoms = _atoms("for |i 0| |i < 3| |i = i + 1| ( s = s + i; )")
    assigns_to_i = [a for a in atoms if a.op is AtomOp.MOV and a.dest == "i"]
    assert [a.src1 for a in assigns_to_i] == ["0", "t1", "t3"]
    # la reemisión va justo después de la etiqueta de actualización
    update_at = atoms.index(lbl("L0"))
    assert atoms[update_at + 2] == assigns_to_i[-1]
    assert atoms[update_at + 3] == jmp("L1")

def test_for_loop_empty_init_and_update():
    assert _atoms("for || |i > 0| || ( )") == [
        lbl("L1"),
        arith(SUB, "i", "0", "t0"),
        tst("t0", "0", 3, "L2"),
        lbl("L0"),
        jmp("L1"),
        lbl("L2"),
    ]

def test_names_are_unique_and_labels_defined_once():
    src = """
    num s 0;
    for |num i 0| |i < 4| |i = i + 1| (
        if |i = 2| ( s = s + i * 2; ) elif |i > 2| ( s = s - 1; ) else ( s = s + 1; )
        during |s > 100| ( s = s / 2; )
    )
    """
    atoms = _atoms(src)
    defined = [a.label for a in atoms if a.op is AtomOp.LBL]
    assert len(defined) == len(set(defined))
    used = {a.label for a in atoms if a.op in (AtomOp.JMP, AtomOp.TST)}
    assert used <= set(defined)
    temps = [a.dest for a in atoms if a.op in (ADD, SUB, MUL, DIV)]
    assert len(temps) == len(set(temps))

def test_context_counters_are_shared():
    ctx = CompilationContext()
    parse(tokenize("x = a + b;"), ctx=ctx)
    atoms = parse(tokenize("y = a + b;"), ctx=ctx)
    assert atoms[0].dest == "t1"
    assert ctx.temp_counter == 2

def test_parser_current_past_end_is_eof():
    p = Parser([])
    assert p.current().text == "EOF"
    assert p.parse_program() == []

# --- errores de sintaxis ---
@pytest.mark.parametrize("src, needle", [
    ("x = 1", "';'"),
    ("x = 1; )", "fin de programa"),
    ("x = ;", "literal"),
    ("num 5;", "IDENTIFIER"),
    ("if x < 5 ( y = 1; )", "'|'"),
    ("if |x| y = 1;", "'('"),
    ("during |x| ( y = 1;", "')'"),
    ("x = 5 @;", "<ERROR, @>"),
    ("else ( )", "fin de programa"),
    ("z = x + y", "<EOF, EOF>"),
])
def test_syntax_errors(src, needle):
    with pytest.raises(ParseError) as ei:
        _atoms(src)
    assert needle in str(ei.value)

def test_syntax_error_position():
    with pytest.raises(ParseError) as ei:
        parse(tokenize("num x 5;\ny = ;"), filename="p.cj")
    d = ei.value.diagnostic
    assert (d.file, d.line, d.col) == ("p.cj", 2, 5)
    assert "<DELIM, ;>" in d.message

def test_atom_str_uses_null():
    assert str(mov("5", "x")) == "Atom(MOV, 5, null, x, null, null)"
    assert str(tst("t0", "0", 2, "L0")) == "Atom(TST, t0, 0, null, 2, L0)"
    assert str(Atom(AtomOp.HLT)) == "Atom(HLT, null, null, null, null, null)"
