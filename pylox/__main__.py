"""CLI entry point for the Lox interpreter.

Usage:
    python -m pylox [-v|-vv|-vvv] [--max-depth N] <program_file>
    python -m pylox [-v...] --emit-ast <program_file>
    python -m pylox [-v...] --ast <ast_json_file>
    python -m pylox [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --max-depth   Maximum nesting of function calls before "Stack overflow."
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive prompt starts; definitions persist
between lines and errors are reported without leaving the prompt.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Exit status follows the usual Lox
convention: 64 for bad usage, 65 for scan or parse errors, 66 for a
missing input file and 70 for runtime errors.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_from_obj, ast_to_obj
from .errors import LoxError, ParseErrors, ScanError
from .interpreter import DEFAULT_MAX_CALL_DEPTH, Interpreter
from .parser import parse_program

EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EXIT_NOINPUT)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str):
    try:
        return parse_program(source)
    except (ScanError, ParseErrors) as e:
        print(str(e), file=sys.stderr)
        sys.exit(EXIT_DATAERR)


def execute_or_exit(interpreter: Interpreter, statements) -> None:
    try:
        interpreter.run(statements)
    except LoxError as e:
        print(str(e), file=sys.stderr)
        sys.exit(EXIT_SOFTWARE)


def run_prompt(interpreter: Interpreter) -> None:
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        try:
            interpreter.interpret(parse_program(line))
        except LoxError as e:
            print(str(e), file=sys.stderr)
    interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='pylox', description='Lox language interpreter')
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_CALL_DEPTH, metavar='N',
                        help='maximum function call depth (default: %(default)s)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Lox program file (.lox) to execute')
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2; Lox tools report usage errors as 64
        sys.exit(EXIT_USAGE if e.code else 0)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements = parse_or_exit(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        data = json.loads(read_source(Path(args.ast)))
        statements = ast_from_obj(data)
    elif args.program:
        statements = parse_or_exit(read_source(Path(args.program)))
    else:
        run_prompt(Interpreter(max_call_depth=args.max_depth, debug_level=args.v))
        return
    interpreter = Interpreter(max_call_depth=args.max_depth, debug_level=args.v)
    execute_or_exit(interpreter, statements)


if __name__ == '__main__':
    main()
