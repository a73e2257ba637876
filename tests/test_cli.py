from __future__ import annotations

import io
import os
import subprocess
import sys
from pathlib import Path

from loxterp.__main__ import main, run_prompt

FIXTURES = Path(__file__).parent / "fixtures"
SRC = Path(__file__).resolve().parents[1] / "src"


def _run_module(*args: str, **kwargs) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "loxterp", *args],
        check=False,
        capture_output=True,
        text=True,
        env=env,
        **kwargs,
    )


def test_module_executes_kitchen_sink_script() -> None:
    proc = _run_module(str(FIXTURES / "kitchen_sink.lox"))
    assert proc.returncode == 0, proc.stderr
    assert proc.stderr == ""
    assert proc.stdout.splitlines() == [
        "4",
        "2",
        "square of area 9",
        'tab\tand "quotes"',
        "1",
    ]


def test_static_error_exit_code(tmp_path: Path, capsys) -> None:
    script = tmp_path / "bad.lox"
    script.write_text('print "never";\nprint ;\n')
    assert main([str(script)]) == 65
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "[line 2] Error at ';': Expect expression.\n"


def test_runtime_error_exit_code(tmp_path: Path, capsys) -> None:
    script = tmp_path / "boom.lox"
    script.write_text('print "before";\nprint -"x";\nprint "after";\n')
    assert main([str(script)]) == 70
    captured = capsys.readouterr()
    assert captured.out == "before\n"
    assert captured.err == "Operand must be a number.\n[line 2]\n"


def test_missing_script(tmp_path: Path, capsys) -> None:
    missing = tmp_path / "missing.lox"
    assert main([str(missing)]) == 71
    assert f"Error reading file: {missing}" in capsys.readouterr().err


def test_too_many_arguments_is_a_usage_error(capsys) -> None:
    assert main(["one.lox", "two.lox"]) == 64
    assert "usage: python -m loxterp" in capsys.readouterr().err


def test_search_path_option(tmp_path: Path, capsys) -> None:
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "greet.lox").write_text('var message = "hi from lib";\n')
    script = tmp_path / "app" / "main.lox"
    script.parent.mkdir()
    script.write_text("import greet;\nprint greet.message;\n")

    assert main(["-I", str(lib), str(script)]) == 0
    assert capsys.readouterr().out == "hi from lib\n"


def test_loxpath_environment_variable(tmp_path: Path, capsys, monkeypatch) -> None:
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "greet.lox").write_text('var message = "hi from LOXPATH";\n')
    script = tmp_path / "main.lox"
    script.write_text("import greet;\nprint greet.message;\n")
    monkeypatch.setenv("LOXPATH", str(lib))

    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "hi from LOXPATH\n"


def test_print_ast(tmp_path: Path, capsys) -> None:
    script = tmp_path / "ast.lox"
    script.write_text("var a = 1 + 2;\nprint (a);\n")
    assert main(["--print-ast", str(script)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "(new a = (+ 1.0 2.0))",
        "(out (par a))",
        "3",
    ]


def test_prompt_keeps_state_and_recovers_from_errors(capsys) -> None:
    stdin = io.StringIO('var a = 1;\nprint a + ;\nprint nil + 1;\nprint a + 1;\n')
    assert run_prompt(search_paths=[], stdin=stdin) == 0
    captured = capsys.readouterr()
    assert captured.out == "> > > > 2\n> "
    assert captured.err.splitlines() == [
        "[line 1] Error at ';': Expect expression.",
        "Operands must be two numbers or two strings.",
        "[line 1]",
    ]


def test_prompt_closures_survive_between_lines(capsys) -> None:
    stdin = io.StringIO(
        "fun make() { var n = 0; fun inc() { n = n + 1; return n; } return inc; }\n"
        "var inc = make();\n"
        "inc();\n"
        "print inc();\n"
    )
    assert run_prompt(search_paths=[], stdin=stdin) == 0
    assert capsys.readouterr().out == "> > > > 2\n> "
