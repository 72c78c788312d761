from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from filtervars.core.diagnostics import Diagnostic
from filtervars.core.span import Span

from .ast import RawAttribute, TokenSpan, VarFile

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_BOM = "\ufeff"

_TERMINAL_NAMES = {
    "IDENT": "identifier",
    "NUMBER": "number",
    "STRING": "quoted string",
    "HEREDOC": "heredoc",
    "OP": "operator",
    "EQUAL": '"="',
    "LPAR": '"("',
    "RPAR": '")"',
    "LSQB": '"["',
    "RSQB": '"]"',
    "LBRACE": '"{"',
    "RBRACE": '"}"',
    "_NL": "newline",
    "$END": "end of file",
}


class NestedNewlineFilter:
    """
    Postlexer that drops newlines nested inside (), [] or {}.

    Only a newline at bracket depth 0 terminates an attribute; everything
    between the brackets stays part of the expression.
    """

    always_accept = ("_NL",)

    OPEN = {"LPAR", "LSQB", "LBRACE"}
    CLOSE = {"RPAR", "RSQB", "RBRACE"}

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.depth = 0

    def process(self, stream):
        self._reset()
        for token in stream:
            ttype = token.type
            if ttype == "_NL":
                if self.depth == 0:
                    yield token
                continue
            if ttype in self.OPEN:
                self.depth += 1
            elif ttype in self.CLOSE and self.depth:
                self.depth -= 1
            yield token


class _CommentCollector:
    """Lexer callback gathering the ignored COMMENT tokens of a single parse."""

    def __init__(self) -> None:
        self.comments: List[Token] = []

    def __call__(self, token: Token) -> Token:
        self.comments.append(token)
        return token

    def reset(self) -> None:
        self.comments = []


_COMMENTS = _CommentCollector()

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    lexer="contextual",
    regex=True,
    start="start",
    propagate_positions=True,
    maybe_placeholders=False,
    postlex=NestedNewlineFilter(),
    lexer_callbacks={"COMMENT": _COMMENTS},
)


def parse_var_file(source: str, filename: str) -> Tuple[Optional[VarFile], List[Diagnostic]]:
    """
    Parse one variable definitions file.

    Returns the parsed body and any diagnostics. When an error diagnostic is
    present the body is None. Positions start at line 1, column 1.
    """
    text = source[len(_BOM):] if source.startswith(_BOM) else source
    # Every attribute must end in a newline; adding one keeps all positions.
    if not text.endswith("\n"):
        text += "\n"

    _COMMENTS.reset()
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as err:
        return None, [_diagnostic_from_error(err, filename)]
    comments = list(_COMMENTS.comments)
    _COMMENTS.reset()

    diagnostics: List[Diagnostic] = []
    attributes: Dict[str, RawAttribute] = {}
    for node in tree.children:
        if not isinstance(node, Tree):
            continue
        kind = _name(node)
        if kind == "attribute":
            attr = _build_attribute(node, text, comments, filename)
            # Later definitions in the same file replace earlier ones.
            attributes[attr.name] = attr
        elif kind == "block":
            block_name = node.children[0]
            diagnostics.append(
                Diagnostic.warning(
                    "Unexpected block",
                    f'Blocks are not expected in variable definitions files; ignoring "{block_name}" block.',
                    Span.from_loc(block_name, file=filename),
                )
            )
    return VarFile(filename=filename, attributes=attributes), diagnostics


def _build_attribute(tree: Tree, text: str, comments: List[Token], filename: str) -> RawAttribute:
    name_token = tree.children[0]
    expr = next(child for child in tree.children if isinstance(child, Tree) and _name(child) == "expression")
    expr_tokens = list(expr.scan_values(lambda v: isinstance(v, Token)))
    last = max(expr_tokens, key=lambda t: t.end_pos)

    start = _lead_comments_start(name_token, text, comments)

    end = last.end_pos
    for comment in comments:
        if comment.start_pos >= last.end_pos and comment.line == last.end_line:
            end = max(end, comment.end_pos)
    end = text.index("\n", end) + 1

    return RawAttribute(
        name=str(name_token),
        tokens=TokenSpan(text=text[start:end]),
        span=Span.from_loc(name_token, file=filename),
    )


def _lead_comments_start(name_token: Token, text: str, comments: List[Token]) -> int:
    """
    Return the offset where the attribute's span begins.

    The span starts at the beginning of the name's line, taking in comments
    written before the name on that line. Lines directly above that hold
    nothing but comments are lead comments and are included too; a blank
    line ends the run. Indentation is kept on every line.
    """
    comment_ends = {c.end_pos: c for c in comments if c.end_pos <= name_token.start_pos}
    start, _ = _skip_back(text, name_token.start_pos, comment_ends)
    if not _at_line_start(text, start):
        # The name's line begins inside a comment that opened after other code.
        return name_token.start_pos
    while start > 0:
        prev, crossed = _skip_back(text, start - 1, comment_ends)
        if not crossed or not _at_line_start(text, prev):
            break
        start = prev
    return start


def _skip_back(text: str, pos: int, comment_ends: Dict[int, Token]) -> Tuple[int, bool]:
    """Move back from `pos` over blanks and whole comments on the same line(s)."""
    crossed = False
    while True:
        comment = comment_ends.get(pos)
        if comment is not None:
            pos = comment.start_pos
            crossed = True
        elif pos > 0 and text[pos - 1] in " \t\f\r":
            pos -= 1
        else:
            return pos, crossed


def _at_line_start(text: str, pos: int) -> bool:
    return pos == 0 or text[pos - 1] == "\n"


def _diagnostic_from_error(err: UnexpectedInput, filename: str) -> Diagnostic:
    span = Span.from_loc(err, file=filename)
    if isinstance(err, UnexpectedCharacters):
        char = err.char
        if char == '"':
            detail = "Unterminated template string; the closing quote or the end of a ${ } or %{ } sequence is missing."
        else:
            detail = f"Character {char!r} is not valid here."
        return Diagnostic.error("Invalid character", detail, span)
    if isinstance(err, UnexpectedEOF) or (isinstance(err, UnexpectedToken) and err.token.type == "$END"):
        return Diagnostic.error(
            "Unexpected end of input",
            "The file ends before all brackets are closed.",
            span,
        )
    if isinstance(err, UnexpectedToken):
        detail = f"Unexpected {_describe(err.token)}."
        expected = sorted(_TERMINAL_NAMES.get(name, name) for name in err.expected)
        if expected and len(expected) <= 4:
            detail = f"{detail[:-1]}; expected {', '.join(expected)}."
        return Diagnostic.error("Invalid syntax", detail, span)
    return Diagnostic.error("Invalid syntax", str(err), span)


def _describe(token: Token) -> str:
    if token.type in ("$END", "_NL"):
        return _TERMINAL_NAMES[token.type]
    return f"{_TERMINAL_NAMES.get(token.type, token.type)} {str(token)!r}"


def _name(node: Tree | Token) -> str:
    if isinstance(node, Tree):
        data = node.data
        if isinstance(data, Token):
            return data.value
        return data
    if isinstance(node, Token):
        return node.type
    return str(node)
