from __future__ import annotations

import io

import pytest

from loxterp import AstPrinter, ModuleInfo, Parser, scan
from loxterp import nodes
from loxterp.tokens import TokenType


def _parse(source: str):
    err = io.StringIO()
    info = ModuleInfo(stream=err)
    statements = Parser(scan(source, info), info).parse()
    return statements, err.getvalue().splitlines()


def _print(source: str) -> str:
    statements, errors = _parse(source)
    assert errors == []
    return AstPrinter().print_program(statements)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("print 1 + 2 * 3;", "(out (+ 1.0 (* 2.0 3.0)))"),
        ("(1 + 2) * 3;", "(* (par (+ 1.0 2.0)) 3.0)"),
        ("-a - !b;", "(- (- a) (! b))"),
        ("10 % 3 / 2;", "(/ (% 10.0 3.0) 2.0)"),
        ("a = b = c;", "(let a = (let b = c))"),
        ("a or b and c == d < e;", "(or a (and b (== c (< d e))))"),
        ("1 != 2 >= 3 - 4;", "(!= 1.0 (>= 2.0 (- 3.0 4.0)))"),
        ("x.y.z = f(1)(2);", "(.= (. x y) z (call (call f 1.0) 2.0))"),
        ("var s = \"hi\";", '(new s = "hi")'),
        ("const k = nil;", "(const k = nil)"),
        ("var u;", "(new u = nil)"),
        ("print true and !false;", "(out (and true (! false)))"),
    ],
)
def test_precedence_and_shapes(source, expected):
    assert _print(source) == expected


def test_for_loop_desugars_to_block_with_while():
    statements, errors = _parse("for (var i = 0; i < 3; i = i + 1) print i;")
    assert errors == []
    (block,) = statements
    assert isinstance(block, nodes.Block)
    init, loop = block.statements
    assert isinstance(init, nodes.Var)
    assert isinstance(loop, nodes.While)
    assert isinstance(loop.body, nodes.Print)
    assert isinstance(loop.increment, nodes.Assign)


def test_for_loop_without_clauses_loops_forever_on_true():
    statements, errors = _parse("for (;;) break;")
    assert errors == []
    (loop,) = statements
    assert isinstance(loop, nodes.While)
    assert isinstance(loop.condition, nodes.Literal) and loop.condition.value is True
    assert loop.increment is None


def test_class_with_superclass_and_bare_methods():
    statements, errors = _parse(
        "class B : A { init(x) { this.x = x; } get() { return super.get(); } }"
    )
    assert errors == []
    (klass,) = statements
    assert isinstance(klass, nodes.Class)
    assert klass.superclass.name.lexeme == "A"
    assert [m.name.lexeme for m in klass.methods] == ["init", "get"]
    ret = klass.methods[1].body[0]
    assert isinstance(ret.value, nodes.Call)
    assert isinstance(ret.value.callee, nodes.Super)


def test_function_declarations_and_lambdas():
    statements, errors = _parse(
        "fun f(a) { return a; }\n"
        "def g() {}\n"
        "var h = lambda (a, b) { return a + b; };\n"
        "var k = fun (x) { return x; };\n"
    )
    assert errors == []
    f, g, h, k = statements
    assert isinstance(f, nodes.Function) and f.name.lexeme == "f"
    assert isinstance(g, nodes.Function) and g.name.lexeme == "g"
    assert isinstance(h.initializer, nodes.Lambda)
    assert h.initializer.function.name is None
    assert [p.lexeme for p in h.initializer.function.params] == ["a", "b"]
    assert isinstance(k.initializer, nodes.Lambda)


def test_var_and_const_carry_their_kind():
    statements, _ = _parse("var a = 1; const b = 2;")
    assert statements[0].kind is TokenType.VAR and not statements[0].is_const
    assert statements[1].kind is TokenType.CONST and statements[1].is_const


def test_import_forms():
    statements, errors = _parse('import math;\nimport "lib/util.lox" as util;')
    assert errors == []
    plain, aliased = statements
    assert plain.module_name == "math" and plain.binding_name == "math"
    assert aliased.module_name == "lib/util.lox" and aliased.binding_name == "util"


def test_recovers_after_syntax_errors():
    statements, errors = _parse("var = 1;\nprint 2;\nprint ;\nvar ok = 3;")
    assert errors == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 3] Error at ';': Expect expression.",
    ]
    assert [type(s).__name__ for s in statements] == ["Print", "Var"]


def test_synchronizes_on_statement_keyword():
    statements, errors = _parse("print (1 + ;\nclass A {}\n")
    assert errors == ["[line 1] Error at ';': Expect expression."]
    assert [type(s).__name__ for s in statements] == ["Class"]


def test_invalid_assignment_target_is_reported_without_resync():
    statements, errors = _parse("1 = 2; print 3;")
    assert errors == ["[line 1] Error at '=': Invalid assignment target."]
    assert len(statements) == 2


def test_error_at_end():
    _, errors = _parse("print 1")
    assert errors == ["[line 1] Error at end: Expect ';' after value."]


def test_too_many_arguments_is_reported():
    source = "f(" + ", ".join(["1"] * 256) + ");"
    statements, errors = _parse(source)
    assert errors == ["[line 1] Error at '1': Can't have more than 255 arguments."]
    assert len(statements[0].expression.arguments) == 256


def test_printer_renders_blocks_and_classes():
    text = _print("class A : B { m() { print this; } }")
    assert text == "(class A : B {\n  (fun m () {\n    (out this)\n  })\n})"
