import unittest
from unittest.mock import patch

from portac.app import app

SCENARIO = "$ inteiro a,b; a=1; se (a==1) entao b=a+1; senao b=0; $."


class CompileEndpointTests(unittest.TestCase):
    def setUp(self):
        app.config.update(TESTING=True)
        self.client = app.test_client()

    def test_compile(self):
        resp = self.client.post("/compile", json={"code": SCENARIO})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["errors"], [])
        self.assertEqual(data["tokens"][0], {"kind": "PROGRAM_START", "text": "$", "line": 1})
        self.assertEqual(data["tokens"][-1]["kind"], "PROGRAM_END")
        self.assertEqual(data["symbol_table"], {"a": "inteiro", "b": "inteiro"})
        self.assertEqual(data["ast"]["type"], "Program")
        self.assertEqual(data["ast"]["commands"][1]["type"], "Conditional")
        self.assertEqual(data["ast"]["commands"][1]["condition"]["op"], "==")
        self.assertIn("CMPEQ R1, R2", data["tac"])
        self.assertEqual(data["memory"], {})

    def test_execute(self):
        resp = self.client.post("/compile", json={"code": SCENARIO, "execute": True})
        self.assertEqual(resp.get_json()["memory"], {"a": 1, "b": 2})

    def test_compile_error(self):
        resp = self.client.post("/compile", json={"code": "$ inteiro x; real y; x = y; $."})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(len(data["errors"]), 1)
        self.assertIn("type mismatch", data["errors"][0])
        self.assertEqual(data["tac"], [])

    def test_execute_must_be_boolean(self):
        resp = self.client.post("/compile", json={"code": SCENARIO, "execute": "false"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["errors"], ["'execute' must be a JSON boolean"])
        resp = self.client.post("/compile", json={"code": SCENARIO, "execute": False})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["memory"], {})

    def test_bad_request(self):
        resp = self.client.post("/compile", data="not json", content_type="text/plain")
        self.assertEqual(resp.status_code, 400)

    def test_unexpected_failure(self):
        with patch("portac.app.compile_source", side_effect=RuntimeError("boom")):
            resp = self.client.post("/compile", json={"code": SCENARIO})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()["errors"], ["Unexpected error: boom"])


if __name__ == "__main__":
    unittest.main()
