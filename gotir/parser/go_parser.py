"""Go declaration parser: builds a ``goast.File`` from Go source text.

Only what type extraction needs is parsed structurally: the package clause,
imports, and type declarations. Function, ``var`` and ``const`` declarations
are consumed as balanced token groups and left unparsed. Newlines become
statement terminators following Go's semicolon insertion rule, and comment
groups directly above a declaration or struct field are attached as its doc.
"""

from __future__ import annotations

from pathlib import Path

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput

from gotir import goast

GO_GRAMMAR = r"""
start: _semis? package_clause (_semis _top_decl)* _semis?

package_clause: "package" NAME

_top_decl: import_decl
         | type_decl
         | func_decl
         | value_decl

import_decl: IMPORT (import_spec | "(" _semis? (import_spec (_semis import_spec)* _semis?)? ")")
import_spec: import_alias? import_path
import_alias: NAME | DOT
import_path: STRING | RAW_STRING

type_decl: TYPE (type_spec | "(" _semis? (type_spec (_semis type_spec)* _semis?)? ")")
type_spec: NAME ASSIGN? type_expr

func_decl: FUNC _item+
value_decl: (VAR | CONST) _item+

?type_expr: NAME                    -> ident
          | qualified
          | pointer
          | array_type
          | map_type
          | struct_type
          | interface_type
          | func_type
          | chan_type

qualified: NAME "." NAME
pointer: "*" type_expr
array_type: "[" array_len? "]" type_expr
array_len: NUMBER | NAME
map_type: "map" "[" type_expr "]" type_expr
struct_type: "struct" "{" _semis? (field_decl (_semis field_decl)* _semis?)? "}"
field_decl: field_names type_expr tag?
          | type_expr tag?          -> embedded_field
field_names: NAME ("," NAME)*
tag: STRING | RAW_STRING
interface_type: "interface" braces
func_type: "func" parens (type_expr | parens)?
chan_type: "chan" type_expr
         | "<-" "chan" type_expr    -> recv_chan_type

_semis: _SEMI+

// Balanced token groups for the parts that are skipped.
_item: _tok | parens | braces
parens: LPAR (_tok | _SEMI | parens | braces)* RPAR
braces: LBRACE (_tok | _SEMI | parens | braces)* RBRACE
_tok: NAME | NUMBER | STRING | RAW_STRING | RUNE | PUNCT | ARROW
    | STAR | DOT | COMMA | ASSIGN | LSQB | RSQB
    | PACKAGE | IMPORT | TYPE | FUNC | VAR | CONST
    | STRUCT | INTERFACE | MAP | CHAN

PACKAGE: "package"
IMPORT: "import"
TYPE: "type"
FUNC: "func"
VAR: "var"
CONST: "const"
STRUCT: "struct"
INTERFACE: "interface"
MAP: "map"
CHAN: "chan"

LPAR: "("
RPAR: ")"
LSQB: "["
RSQB: "]"
LBRACE: "{"
RBRACE: "}"
STAR: "*"
DOT: "."
COMMA: ","
ASSIGN: "="
ARROW: "<-"
_SEMI: ";"

NAME: /[^\W\d]\w*/
NUMBER: /\d[\w.]*/
STRING: /"(?:[^"\\\n]|\\.)*"/
RAW_STRING: /`[^`]*`/
RUNE: /'(?:[^'\\\n]|\\.)*'/
PUNCT: /[^\w\s{}"'`]/

LINE_COMMENT: /\/\/[^\n]*/
BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
NEWLINE: /\n+/

%ignore /[ \t\f\r]+/
%ignore LINE_COMMENT
%ignore BLOCK_COMMENT
"""


class GoSyntaxError(ValueError):
    """Raised when source text is not a parseable Go file."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column


class SemicolonInserter:
    """Post-lexer turning newlines into terminators the way Go does.

    A newline ends a statement when the token before it is an identifier,
    a literal, or a closing ``)``, ``]`` or ``}``.
    """

    always_accept = ("NEWLINE",)

    TERMINATES = {"NAME", "NUMBER", "STRING", "RAW_STRING", "RUNE", "RPAR", "RSQB", "RBRACE"}

    def __init__(self) -> None:
        self.code_lines: set[int] = set()

    def process(self, stream):
        last = None
        for token in stream:
            if token.type == "NEWLINE":
                if last is not None and last.type in self.TERMINATES:
                    yield Token.new_borrow_pos("_SEMI", ";", token)
                last = None
                continue
            self.code_lines.add(token.line)
            last = token
            yield token


class _DocIndex:
    """Comment groups keyed by the line they end on."""

    def __init__(self, comments: list[Token], code_lines: set[int]):
        self._by_end: dict[int, goast.CommentGroup] = {}
        group: list[goast.Comment] = []
        for tok in comments:
            if tok.line in code_lines:
                # Trailing comment after code; it also ends any open group.
                self._close(group)
                group = []
                continue
            # Ignored tokens reach callbacks without end positions.
            end_line = tok.line + str(tok).count("\n")
            comment = goast.Comment(text=str(tok), line=tok.line, end_line=end_line)
            if group and comment.line > group[-1].end_line + 1:
                self._close(group)
                group = []
            group.append(comment)
        self._close(group)

    def _close(self, group: list[goast.Comment]) -> None:
        if group:
            cg = goast.CommentGroup(comments=list(group))
            self._by_end[cg.end_line] = cg

    def before(self, line: int) -> goast.CommentGroup | None:
        return self._by_end.get(line - 1)


class _AstBuilder(Transformer):
    """Turns the parse tree into ``goast`` nodes."""

    def __init__(self, docs: _DocIndex):
        super().__init__()
        self._docs = docs

    def start(self, children):
        name, *decls = children
        return goast.File(name=name, decls=decls)

    def package_clause(self, children):
        return goast.Ident(str(children[0]))

    # --- Imports ---

    def import_decl(self, children):
        keyword, *specs = children
        return goast.GenDecl(tok="import", specs=specs, doc=self._docs.before(keyword.line))

    def import_spec(self, children):
        if len(children) == 2:
            return goast.ImportSpec(path=children[1], name=children[0])
        return goast.ImportSpec(path=children[0])

    def import_alias(self, children):
        return goast.Ident(str(children[0]))

    def import_path(self, children):
        tok = children[0]
        return goast.BasicLit(kind=tok.type, value=str(tok))

    # --- Declarations ---

    def type_decl(self, children):
        keyword, *specs = children
        return goast.GenDecl(tok="type", specs=specs, doc=self._docs.before(keyword.line))

    @v_args(meta=True)
    def type_spec(self, meta, children):
        name, *rest = children
        assign = False
        if isinstance(rest[0], Token) and rest[0].type == "ASSIGN":
            assign = True
            rest = rest[1:]
        return goast.TypeSpec(
            name=goast.Ident(str(name)),
            type=rest[0],
            doc=self._docs.before(meta.line),
            assign=assign,
        )

    def func_decl(self, children):
        keyword, *rest = children
        if rest and rest[0] is None:
            rest = rest[1:]  # method receiver
        name = str(rest[0]) if rest and isinstance(rest[0], Token) else ""
        return goast.FuncDecl(name=goast.Ident(name), doc=self._docs.before(keyword.line))

    def value_decl(self, children):
        keyword = children[0]
        return goast.GenDecl(tok=str(keyword), doc=self._docs.before(keyword.line))

    # --- Type expressions ---

    def ident(self, children):
        return goast.Ident(str(children[0]))

    def qualified(self, children):
        x, sel = children
        return goast.SelectorExpr(x=goast.Ident(str(x)), sel=goast.Ident(str(sel)))

    def pointer(self, children):
        return goast.StarExpr(x=children[0])

    def array_type(self, children):
        if len(children) == 2:
            return goast.ArrayType(elt=children[1], len=children[0])
        return goast.ArrayType(elt=children[0])

    def array_len(self, children):
        tok = children[0]
        if tok.type == "NAME":
            return goast.Ident(str(tok))
        return goast.BasicLit(kind=tok.type, value=str(tok))

    def map_type(self, children):
        key, value = children
        return goast.MapType(key=key, value=value)

    def struct_type(self, children):
        return goast.StructType(fields=list(children))

    @v_args(meta=True)
    def field_decl(self, meta, children):
        names, typ, *tag = children
        return goast.Field(
            names=names, type=typ, tag=tag[0] if tag else None, doc=self._docs.before(meta.line)
        )

    @v_args(meta=True)
    def embedded_field(self, meta, children):
        typ, *tag = children
        return goast.Field(
            names=[], type=typ, tag=tag[0] if tag else None, doc=self._docs.before(meta.line)
        )

    def field_names(self, children):
        return [goast.Ident(str(tok)) for tok in children]

    def tag(self, children):
        tok = children[0]
        return goast.BasicLit(kind=tok.type, value=str(tok))

    def interface_type(self, children):
        return goast.InterfaceType()

    def func_type(self, children):
        return goast.FuncType()

    def chan_type(self, children):
        return goast.ChanType(value=children[0])

    def recv_chan_type(self, children):
        return goast.ChanType(value=children[0], recv_only=True)

    def parens(self, children):
        return None

    def braces(self, children):
        return None


class GoParser:
    """Parses Go source into a ``goast.File``. Not safe to share across threads."""

    def __init__(self) -> None:
        self._comments: list[Token] = []
        self._postlex = SemicolonInserter()
        self._lark = Lark(
            GO_GRAMMAR,
            parser="lalr",
            lexer="basic",
            postlex=self._postlex,
            propagate_positions=True,
            lexer_callbacks={
                "LINE_COMMENT": self._comments.append,
                "BLOCK_COMMENT": self._comments.append,
            },
        )

    def parse(self, text: str) -> goast.File:
        self._comments.clear()
        self._postlex.code_lines = set()
        if not text.endswith("\n"):
            text += "\n"
        try:
            tree = self._lark.parse(text)
        except UnexpectedInput as e:
            line = getattr(e, "line", 0)
            column = getattr(e, "column", 0)
            raise GoSyntaxError(f"line {line}, column {column}: {e}", line, column) from e

        docs = _DocIndex(list(self._comments), self._postlex.code_lines)
        return _AstBuilder(docs).transform(tree)


def parse_source(text: str) -> goast.File:
    return GoParser().parse(text)


def parse_file(path: str | Path) -> goast.File:
    return parse_source(Path(path).read_text(encoding="utf-8"))
