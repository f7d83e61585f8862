import argparse
import logging
import sys
from pathlib import Path

from portac import report
from portac.compiler import compile_source

log = logging.getLogger(__name__)

PHASE_FILES = {
    'tokens': "phase1_lexical.txt",
    'ast': "phase2_syntax.txt",
    'checked': "phase3_semantic.txt",
    'tac': "phase4_tac.txt",
}


def write_reports(result, out_dir):
    """Write one report per completed phase; returns the paths written."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []

    def write(name, text):
        path = out_dir / name
        path.write_text(text + "\n", encoding="utf-8")
        written.append(path)

    if result['tokens']:
        write(PHASE_FILES['tokens'], report.render_tokens(result['tokens']))
    if result['ast'] is not None:
        write(PHASE_FILES['ast'], report.render_tree(result['ast']))
    if result['checked']:
        write(PHASE_FILES['checked'], report.render_symbol_table(result['symbol_table']))
    if result['tac']:
        write(PHASE_FILES['tac'], report.render_tac(result['tac']))
    if result['errors']:
        write("error.txt", "\n".join(result['errors']))
    return written


def build_arg_parser():
    ap = argparse.ArgumentParser(prog="portac", description="Compile a $ ... $. program to TAC")
    ap.add_argument("source", type=Path, help="source file")
    ap.add_argument("-o", "--out-dir", type=Path, default=Path("."),
                    help="directory for the phase reports (default: current directory)")
    ap.add_argument("--run", action="store_true", help="execute the generated TAC")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return ap


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format='%(levelname)s:%(name)s: %(message)s')

    code = args.source.read_text(encoding="utf-8")
    result = compile_source(code, execute=args.run)
    for path in write_reports(result, args.out_dir):
        log.info("wrote %s", path)

    if result['errors']:
        for err in result['errors']:
            print(err, file=sys.stderr)
        return 1
    if args.run:
        for name, value in result['memory'].items():
            print(f"{name} = {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
