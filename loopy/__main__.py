"""CLI entry point for the Loopy interpreter.

Usage:
    python -m loopy [-v|-vv|-vvv] [program_file]
    python -m loopy [-v...] --emit-ast [program_file]
    python -m loopy [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given program and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

The program file defaults to `example.txt`. Debug information is written
to `debug.txt` in the current directory when verbosity is greater than
zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import SpanError, format_error
from .interpreter import Evaluator
from .parser import parse_program

DEFAULT_PROGRAM = 'example.txt'


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Loopy language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', action='store_true', help='emit AST JSON for the program instead of running it')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', default=DEFAULT_PROGRAM, help=f'Loopy program file (default: {DEFAULT_PROGRAM})')
    args = parser.parse_args(argv)

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        try:
            with open(ast_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Error reading file: {e}", file=sys.stderr)
            sys.exit(1)
        try:
            program = ast_from_obj(data)
        except (KeyError, TypeError, ValueError) as e:
            print(f"Error reading file: malformed AST: {e!r}", file=sys.stderr)
            sys.exit(1)
        print("Starting...")
        try:
            Evaluator(debug_level=args.v).evaluate(program)
        except SpanError as e:
            print(f"Error: {e.message}, at {e.span.start}..{e.span.end}", file=sys.stderr)
            sys.exit(1)
        print("Success")
        return

    program_file = Path(args.program)
    try:
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        program = parse_program(source)
    except SpanError as e:
        print(f"Error: {format_error(e, source)}", file=sys.stderr)
        sys.exit(1)

    # Emit AST mode
    if args.emit_ast:
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    print("Starting...")
    try:
        Evaluator(debug_level=args.v).evaluate(program)
    except SpanError as e:
        print(f"Error: {format_error(e, source)}", file=sys.stderr)
        sys.exit(1)
    print("Success")


if __name__ == '__main__':
    main()
