import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .main import Interpreter
from .module_info import ModuleInfo
from .printer import AstPrinter

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_IOERR = 71

PROMPT = "> "


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m loxterp",
        usage="python -m loxterp [-I DIR] [--print-ast] [-v] [script]",
    )
    parser.add_argument("script", nargs="?")
    parser.add_argument(
        "-I",
        "--path",
        action="append",
        default=[],
        metavar="DIR",
        help="extra directory to search for imported modules",
    )
    parser.add_argument(
        "--print-ast",
        action="store_true",
        help="print the parsed syntax tree before running",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def _search_paths(extra: List[str]) -> List[str]:
    paths = list(extra)
    env_path = os.environ.get("LOXPATH")
    if env_path:
        paths.extend(p for p in env_path.split(os.pathsep) if p)
    return paths


def run_file(path: Path, *, search_paths: List[str], print_ast: bool = False) -> int:
    try:
        source = path.read_text()
    except OSError:
        print(f"Error reading file: {path}", file=sys.stderr)
        return EX_IOERR

    module_info = ModuleInfo()
    interpreter = Interpreter(module_info, search_paths=search_paths)
    code = interpreter.compile(source, filename=str(path))
    if print_ast:
        print(AstPrinter().print_program(code.statements))
    interpreter.execute(code)

    if module_info.had_error:
        return EX_DATAERR
    if module_info.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def run_prompt(
    *,
    search_paths: List[str],
    print_ast: bool = False,
    stdin: Optional[TextIO] = None,
) -> int:
    stdin = stdin if stdin is not None else sys.stdin
    interpreter = Interpreter(search_paths=search_paths)
    while True:
        print(PROMPT, end="", flush=True)
        line = stdin.readline()
        if not line:
            break
        code = interpreter.compile(line, filename="<stdin>")
        if print_ast:
            print(AstPrinter().print_program(code.statements))
        interpreter.execute(code)
        interpreter.module_info.reset()
    return EX_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args_list = sys.argv[1:] if argv is None else argv
    try:
        args = parser.parse_args(args_list)
    except SystemExit as exc:
        return EX_USAGE if exc.code else EX_OK

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    search_paths = _search_paths(args.path)
    if args.script is None:
        return run_prompt(search_paths=search_paths, print_ast=args.print_ast)
    return run_file(Path(args.script), search_paths=search_paths, print_ast=args.print_ast)


if __name__ == "__main__":
    raise SystemExit(main())
