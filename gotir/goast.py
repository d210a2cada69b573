"""Go AST shapes: the parsed-source input that the lifter reads.

These mirror the subset of Go's ``go/ast`` package that top-level type
extraction needs: the package clause, import and type specs grouped in
general declarations, function declarations (kept only so they can be
skipped), and the type expressions that can appear in a type spec.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# --- Comments ---


@dataclass
class Comment:
    """A single ``//`` or ``/* */`` comment, text including the markers."""

    text: str
    line: int = 0
    end_line: int = 0


@dataclass
class CommentGroup:
    """Consecutive comments with no blank line between them."""

    comments: list[Comment] = field(default_factory=list)

    @property
    def end_line(self) -> int:
        if not self.comments:
            return 0
        last = self.comments[-1]
        return last.end_line or last.line

    def text_lines(self) -> list[str]:
        return [c.text.strip() for c in self.comments]


# --- Expressions ---


@dataclass
class Ident:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class BasicLit:
    """A literal token, ``value`` kept exactly as written (quotes included)."""

    kind: str  # STRING, RAW_STRING, NUMBER
    value: str


@dataclass
class SelectorExpr:
    """A qualified identifier such as ``time.Time``."""

    x: Expr
    sel: Ident


@dataclass
class StarExpr:
    x: Expr


@dataclass
class ArrayType:
    """``[]E`` or ``[N]E``; ``len`` is None for slices."""

    elt: Expr
    len: BasicLit | Ident | None = None


@dataclass
class MapType:
    key: Expr
    value: Expr


@dataclass
class Field:
    """A struct field. Embedded fields have no names."""

    names: list[Ident]
    type: Expr
    tag: BasicLit | None = None
    doc: CommentGroup | None = None


@dataclass
class StructType:
    fields: list[Field] = field(default_factory=list)


@dataclass
class InterfaceType:
    """Interface body; method sets are not modelled."""


@dataclass
class FuncType:
    """Function signature; parameters and results are not modelled."""


@dataclass
class ChanType:
    value: Expr
    recv_only: bool = False


Expr = (
    Ident
    | SelectorExpr
    | StarExpr
    | ArrayType
    | MapType
    | StructType
    | InterfaceType
    | FuncType
    | ChanType
)


# --- Declarations ---


@dataclass
class ImportSpec:
    path: BasicLit
    name: Ident | None = None


@dataclass
class TypeSpec:
    name: Ident
    type: Expr
    doc: CommentGroup | None = None
    assign: bool = False  # type A = B


@dataclass
class GenDecl:
    """A general declaration: ``import``, ``type``, ``var`` or ``const``."""

    tok: str
    specs: list[ImportSpec | TypeSpec] = field(default_factory=list)
    doc: CommentGroup | None = None


@dataclass
class FuncDecl:
    name: Ident
    doc: CommentGroup | None = None


@dataclass
class File:
    name: Ident
    decls: list[GenDecl | FuncDecl] = field(default_factory=list)

    @property
    def imports(self) -> list[ImportSpec]:
        return [
            spec
            for decl in self.decls
            if isinstance(decl, GenDecl)
            for spec in decl.specs
            if isinstance(spec, ImportSpec)
        ]
