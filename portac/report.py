"""Plain-text renderings of each phase's output."""

from portac.lexer import TokenKind


def render_tokens(tokens):
    lines = []
    for tok in tokens:
        if tok.kind is TokenKind.EOF:
            continue
        lines.append(f"{str(tok.kind):<14} {tok.text!r:<12} line {tok.line}")
    return "\n".join(lines)


def render_tree(node, prefix="", last=True):
    lines = [f"{prefix}{'└── ' if last else '├── '}{node.label} (L{node.line})"]
    child_prefix = prefix + ("    " if last else "│   ")
    children = node.children
    for i, child in enumerate(children):
        lines.append(render_tree(child, child_prefix, i == len(children) - 1))
    return "\n".join(lines)


def render_symbol_table(symbols):
    lines = [f"ID: {name:<10} | category: {typ} variable" for name, typ in symbols.items()]
    return "\n".join(lines)


def render_tac(tac):
    return "\n".join(repr(instr) for instr in tac)
