"""CLI entry point for the tinybasic interpreter.

Usage:
    python -m tinybasic [-v|-vv|-vvv|-vvvv]
    python -m tinybasic [-v...] <program_file>
    python -m tinybasic [-v...] --emit-ast <program_file>
    python -m tinybasic [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given program file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive console is started. Debug
information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import program_from_obj, program_to_obj
from .console import Console, describe_error
from .errors import StorageError
from .interpreter import Interpreter
from .program import ProgramStore
from .storage import LoadResult, load_file
from .types import AbortedAt


def load_or_exit(path: str) -> LoadResult:
    try:
        loaded = load_file(path)
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if loaded.failures:
        for _, err in loaded.failures:
            print(describe_error(err), file=sys.stderr)
        sys.exit(1)
    return loaded


def run_or_exit(program: ProgramStore, debug_level: int) -> None:
    interpreter = Interpreter(program, debug_level=debug_level)
    try:
        result = interpreter.run()
    finally:
        interpreter.close()
    if isinstance(result, AbortedAt):
        print(str(result), file=sys.stderr)
        sys.exit(1)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="tinybasic interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='BASIC_FILE', help='emit AST JSON for the given program file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file (.bas) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        loaded = load_or_exit(str(program_file))
        obj = program_to_obj(loaded.program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        try:
            program = program_from_obj(data)
        except (ValueError, KeyError, TypeError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        run_or_exit(program, args.v)
        return

    # Interactive console
    if not args.program:
        interpreter = Interpreter(debug_level=args.v)
        try:
            Console(interpreter).loop()
        finally:
            interpreter.close()
        return

    # Default: execute source file
    loaded = load_or_exit(args.program)
    run_or_exit(loaded.program, args.v)


if __name__ == '__main__':
    main()
