from flask import Flask, request, jsonify
from flask_cors import CORS

from portac import syntax
from portac.compiler import compile_source
from portac.interpreter import DEFAULT_MAX_STEPS
from portac.lexer import TokenKind

app = Flask(__name__)
app.config.update(PORTAC_EXECUTE=False, PORTAC_MAX_STEPS=DEFAULT_MAX_STEPS)
app.config.from_prefixed_env()
CORS(app)  # allow cross-origin requests


def ast_to_dict(node):
    """
    Serialize AST to dict recursively
    """
    if node is None:
        return None
    d = {"type": type(node).__name__, "line": node.line}
    if isinstance(node, syntax.Program):
        d["declarations"] = [ast_to_dict(n) for n in node.declarations]
        d["commands"] = [ast_to_dict(n) for n in node.commands]
    elif isinstance(node, syntax.Declaration):
        d["type_name"] = node.type_name
        d["names"] = [n.name for n in node.names]
    elif isinstance(node, syntax.Assignment):
        d["target"] = node.target.name
        d["value"] = ast_to_dict(node.value)
    elif isinstance(node, syntax.ArithChain):
        d["first"] = ast_to_dict(node.first)
        d["rest"] = [{"op": op.symbol, "operand": ast_to_dict(operand)}
                     for op, operand in node.rest]
    elif isinstance(node, syntax.BinaryExpression):
        d["op"] = node.op.symbol
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif isinstance(node, syntax.Conditional):
        d["condition"] = ast_to_dict(node.condition)
        d["then_branch"] = ast_to_dict(node.then_branch)
        d["else_branch"] = ast_to_dict(node.else_branch)
    elif isinstance(node, syntax.Iterative):
        d["condition"] = ast_to_dict(node.condition)
        d["body"] = ast_to_dict(node.body)
    elif isinstance(node, syntax.Comparison):
        d["op"] = node.op.symbol
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif isinstance(node, syntax.BooleanOp):
        d["op"] = node.op
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif isinstance(node, syntax.Not):
        d["operand"] = ast_to_dict(node.operand)
    elif isinstance(node, syntax.Number):
        d["text"] = node.text
    elif isinstance(node, syntax.Identifier):
        d["name"] = node.name
    return d


def empty_response():
    return {
        "tokens": [],
        "ast": {},
        "symbol_table": {},
        "tac": [],
        "memory": {},
        "errors": [],
    }


@app.route("/compile", methods=["POST"])
def compile_code():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        response = empty_response()
        response["errors"] = ["Request body must be a JSON object"]
        return jsonify(response), 400

    code = data.get("code", "")
    execute = data.get("execute", app.config["PORTAC_EXECUTE"])
    if not isinstance(execute, bool):
        response = empty_response()
        response["errors"] = ["'execute' must be a JSON boolean"]
        return jsonify(response), 400
    try:
        result = compile_source(code, execute=execute,
                                max_steps=int(app.config["PORTAC_MAX_STEPS"]))

        # Process tokens to match terminal format
        processed_tokens = []
        for token in result['tokens']:
            if token.kind is not TokenKind.EOF:
                processed_tokens.append({
                    "kind": str(token.kind),
                    "text": token.text,
                    "line": token.line
                })

        symbols = result['symbol_table']
        response = {
            "tokens": processed_tokens,
            "ast": ast_to_dict(result['ast']) if result['ast'] else {},
            "symbol_table": symbols.as_dict() if symbols is not None else {},
            "tac": [repr(t) for t in result['tac']],
            "memory": result['memory'],
            "errors": result['errors'],
        }
        return jsonify(response)
    except Exception as e:
        app.logger.exception("compilation failed unexpectedly")
        response = empty_response()
        response["errors"] = [f"Unexpected error: {str(e)}"]
        return jsonify(response), 500


if __name__ == "__main__":
    app.run(debug=True)
