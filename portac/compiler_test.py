import tempfile
import unittest
from pathlib import Path

from portac import report
from portac.cli import main
from portac.compiler import TEST_PROGRAM, compile_source
from portac.errors import SyntacticError, TypeMismatchError
from portac.lexer import TokenKind
from portac.syntax import Conditional

SCENARIO = "$ inteiro a,b; a=1; se (a==1) entao b=a+1; senao b=0; $."


class CompileSourceTests(unittest.TestCase):
    def test_scenario_artifacts(self):
        result = compile_source(SCENARIO)
        self.assertEqual(result['errors'], [])
        self.assertGreaterEqual(len(result['tokens']), 20)
        self.assertEqual(result['tokens'][-2].kind, TokenKind.PROGRAM_END)
        self.assertEqual(result['tokens'][-1].kind, TokenKind.EOF)
        self.assertTrue(any(isinstance(c, Conditional) for c in result['ast'].children))
        self.assertTrue(result['checked'])
        self.assertEqual(len(result['tac']), 14)
        self.assertEqual(result['memory'], {})

    def test_lexical_error_stops_everything(self):
        result = compile_source("$ inteiro a; a = 1 ? 2; $.")
        self.assertEqual(result['errors'], ["Lexical error (line 1): unexpected character '?'"])
        self.assertEqual(result['tokens'], [])
        self.assertIsNone(result['ast'])

    def test_syntax_error_keeps_tokens(self):
        result = compile_source("$ inteiro a a = 1; $.")
        self.assertTrue(result['tokens'])
        self.assertIsNone(result['ast'])
        self.assertTrue(result['errors'][0].startswith("Syntax error (line 1)"))

    def test_semantic_error_keeps_tree(self):
        result = compile_source("$ inteiro x; real y;\nx = y;\n$.")
        self.assertIsNotNone(result['ast'])
        self.assertFalse(result['checked'])
        self.assertEqual(result['tac'], [])
        self.assertEqual(result['errors'],
                         ["Semantic error (line 2): type mismatch in assignment to 'x': inteiro vs real"])

    def test_error_object_is_kept(self):
        result = compile_source("$ inteiro x; real y;\nx = y;\n$.")
        self.assertIsInstance(result['error'], TypeMismatchError)
        self.assertEqual(result['error'].lineno, 2)
        self.assertEqual(result['error'].phase, "Semantic")
        self.assertEqual(result['errors'], [str(result['error'])])
        self.assertIsNone(compile_source(SCENARIO)['error'])

    def test_long_condition_chain_is_a_syntax_error(self):
        code = "$ inteiro a; se " + " E ".join(["(a > 1)"] * 600) + " entao a = 0; $."
        result = compile_source(code)
        self.assertIsInstance(result['error'], SyntacticError)
        self.assertEqual(len(result['errors']), 1)
        self.assertTrue(result['errors'][0].startswith("Syntax error (line 1): expression nesting"))

    def test_duplicate_declaration_reported(self):
        result = compile_source("$ inteiro x; inteiro x; $.")
        self.assertEqual(result['errors'], ["Semantic error (line 1): variable 'x' already declared"])

    def test_sample_program_compiles(self):
        self.assertEqual(compile_source(TEST_PROGRAM)['errors'], [])


class ReportTests(unittest.TestCase):
    def test_tree_drawing(self):
        result = compile_source("$ inteiro a;\na = 1;\n$.")
        self.assertEqual(report.render_tree(result['ast']).splitlines(), [
            "└── Program (L1)",
            "    ├── Declaration (L1)",
            "    │   └── a (L1)",
            "    └── Assignment (L2)",
            "        ├── a (L2)",
            "        └── Expression (L2)",
            "            └── 1 (L2)",
        ])

    def test_symbol_table(self):
        result = compile_source("$ inteiro a; real b; $.")
        self.assertEqual(report.render_symbol_table(result['symbol_table']).splitlines(), [
            "ID: a          | category: inteiro variable",
            "ID: b          | category: real variable",
        ])

    def test_tokens_skip_eof(self):
        text = report.render_tokens(compile_source("$ $.")['tokens'])
        self.assertEqual(len(text.splitlines()), 2)
        self.assertNotIn("EOF", text)


class CliTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def compile_file(self, code, *extra):
        src = self.dir / "program.txt"
        src.write_text(code, encoding="utf-8")
        return main([str(src), "-q", "-o", str(self.dir / "out"), *extra])

    def test_success_writes_all_phases(self):
        self.assertEqual(self.compile_file(SCENARIO), 0)
        out = self.dir / "out"
        names = sorted(p.name for p in out.iterdir())
        self.assertEqual(names, ["phase1_lexical.txt", "phase2_syntax.txt",
                                 "phase3_semantic.txt", "phase4_tac.txt"])
        self.assertIn("CMPEQ R1, R2", (out / "phase4_tac.txt").read_text(encoding="utf-8"))

    def test_failure_writes_error_file(self):
        self.assertEqual(self.compile_file("$ inteiro x; y = 1; $."), 1)
        out = self.dir / "out"
        self.assertTrue((out / "error.txt").exists())
        self.assertFalse((out / "phase3_semantic.txt").exists())
        self.assertIn("undeclared variable 'y'", (out / "error.txt").read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
