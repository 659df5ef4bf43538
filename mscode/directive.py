"""
Stack declaration lines.

    s <x> <y> <n0> <n1> ...   # optional comment

Parsed with a small Lark grammar over the text after the leading 's'.
A '#' anywhere ends the token list; text before it in the same token
still counts.
"""

from __future__ import annotations

from lark import Lark, Transformer

GRAMMAR = r"""
    start: VALUE* COMMENT?

    VALUE: /[^\s#]+/
    COMMENT: /#.*/

    %ignore /\s+/
"""

parser = Lark(GRAMMAR, parser="lalr")


class TokenCollector(Transformer):
    def start(self, children):
        return [str(tok) for tok in children if tok.type == "VALUE"]


token_collector = TokenCollector()


def parse_directive(body: str) -> list[str]:
    """Split the body of a stack line (without its 's') into value tokens."""
    tree = parser.parse(body)
    return token_collector.transform(tree)
