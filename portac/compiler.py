"""
Compiler driver.

Runs the phases in order (lexer -> parser -> semantic analysis -> TAC
generation, optionally followed by execution) and collects each phase's
output. The first CompileError stops the pipeline and the later phases do not
run. The exception itself is kept in result['error'] (its phase and lineno
stay available) and its message in result['errors'].
"""

import logging

from portac.errors import CompileError
from portac.interpreter import DEFAULT_MAX_STEPS, run_tac
from portac.lexer import Lexer
from portac.parser import Parser
from portac.semantic import SemanticAnalyzer
from portac.tacgen import IRGenerator

log = logging.getLogger(__name__)


def empty_result():
    return {
        'tokens': [],
        'ast': None,
        'symbol_table': None,
        'checked': False,
        'tac': [],
        'memory': {},
        'errors': [],
        'error': None,
    }


def compile_source(code, execute=False, max_steps=DEFAULT_MAX_STEPS):
    result = empty_result()
    try:
        _run_phases(code, result, execute, max_steps)
    except CompileError as exc:
        log.warning("%s", exc)
        result['error'] = exc
        result['errors'] = [str(exc)]
    return result


def _run_phases(code, result, execute, max_steps):
    log.info("Phase 1: lexical analysis")
    result['tokens'] = Lexer(code).tokenize()

    log.info("Phase 2: syntax analysis")
    parser = Parser(Lexer(code))
    ast = parser.parse()
    result['ast'] = ast
    result['symbol_table'] = parser.symbols

    log.info("Phase 3: semantic analysis")
    SemanticAnalyzer(parser.symbols).analyze(ast)
    result['checked'] = True

    log.info("Phase 4: TAC generation")
    result['tac'] = IRGenerator().gen(ast)
    log.info("generated %d instructions", len(result['tac']))

    if execute:
        log.info("Executing TAC")
        result['memory'] = run_tac(result['tac'], parser.symbols, max_steps)


TEST_PROGRAM = r'''
$
inteiro a, b;
a = 1;
se (a == 1) entao b = a + 1;
senao b = 0;
$.
'''

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    for instr in compile_source(TEST_PROGRAM)['tac']:
        print(instr)
