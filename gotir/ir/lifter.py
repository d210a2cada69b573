"""Go AST lifter: converts parsed type expressions into TIR nodes.

``lift_expr`` builds a Type node for a declaration or field; ``render_expr``
produces the printable type text used inside those nodes. Expression kinds
the lifter does not handle are reported on the module logger and dropped.
"""

from __future__ import annotations

import logging

from gotir import goast
from gotir.ir.models import (
    ArrayType,
    Field,
    Import,
    MapType,
    PlainType,
    StructType,
    Type,
)

logger = logging.getLogger(__name__)


def lift_expr(names: list[goast.Ident], docs: str, expr: goast.Expr) -> Type | None:
    """Lift a type expression into a TIR Type.

    Args:
        names: Identifiers the expression is declared under; only the first
            is used. Empty for embedded fields.
        docs: Documentation attached to the declaration.
        expr: The type expression.

    Returns:
        The lifted Type, or None when the expression kind is unhandled.
    """
    name = names[0].name if names else ""

    if isinstance(expr, goast.Ident):
        return PlainType(name=name, docs=docs, type=expr.name)
    elif isinstance(expr, goast.SelectorExpr):
        return PlainType(name=name, docs=docs, type=f"{render_expr(expr.x)}.{expr.sel}")
    elif isinstance(expr, goast.StarExpr):
        return PlainType(name=name, docs=docs, type="*" + render_expr(expr.x))
    elif isinstance(expr, goast.ArrayType):
        return ArrayType(name=name, docs=docs, type=render_expr(expr.elt))
    elif isinstance(expr, goast.MapType):
        return MapType(
            name=name,
            docs=docs,
            key_type=render_expr(expr.key),
            value_type=render_expr(expr.value),
        )
    elif isinstance(expr, goast.StructType):
        return lift_struct(name, docs, expr)
    elif isinstance(expr, goast.InterfaceType):
        return PlainType(name=name, docs=docs, type="interface{}")

    logger.warning(
        "lift_expr: unhandled type %s for %s",
        type(expr).__name__,
        [n.name for n in names],
    )
    return None


def lift_struct(name: str, docs: str, node: goast.StructType) -> StructType:
    """Lift a struct body, dropping fields whose type cannot be lifted."""
    st = StructType(name=name, docs=docs)
    for spec in node.fields:
        lifted = lift_field(spec)
        if lifted is None:
            continue
        st.fields.append(lifted)
    return st


def lift_field(spec: goast.Field) -> Field | None:
    typ = lift_expr(spec.names, docs_from_comments(spec.doc), spec.type)
    if typ is None:
        return None
    tags = parse_tags(spec.tag.value) if spec.tag is not None else {}
    return Field(type=typ, tags=tags)


def parse_tags(literal: str) -> dict[str, list[str]]:
    """Parse a struct tag literal like `json:"id,omitempty" db:"id"`.

    Pieces without a ``key:"value"`` shape are skipped.
    """
    tags: dict[str, list[str]] = {}
    for piece in literal.replace("`", "").split(" "):
        if not piece:
            continue
        key, sep, value = piece.partition(":")
        if not sep or not key or len(value) < 2 or value[0] != '"' or value[-1] != '"':
            logger.debug("parse_tags: skipping malformed tag piece %r", piece)
            continue
        tags[key] = value[1:-1].split(",")
    return tags


def render_expr(expr: goast.Expr) -> str:
    """Render a type expression as printable Go type text."""
    if isinstance(expr, goast.Ident):
        return expr.name
    elif isinstance(expr, goast.SelectorExpr):
        return f"{render_expr(expr.x)}.{expr.sel}"
    elif isinstance(expr, goast.StarExpr):
        return "*" + render_expr(expr.x)
    elif isinstance(expr, goast.ArrayType):
        return "[]" + render_expr(expr.elt)
    elif isinstance(expr, goast.MapType):
        return f"map[{render_expr(expr.key)}]{render_expr(expr.value)}"
    elif isinstance(expr, goast.InterfaceType):
        return "interface{}"
    elif isinstance(expr, goast.StructType):
        return "struct{}"
    elif isinstance(expr, goast.FuncType):
        return "func()"

    logger.warning("render_expr: unhandled type %s for %r", type(expr).__name__, expr)
    return ""


def docs_from_comments(group: goast.CommentGroup | None) -> str:
    """Join a comment group's trimmed lines, newline-terminated."""
    if group is None or not group.comments:
        return ""
    return "\n".join(group.text_lines()) + "\n"


def import_from_spec(spec: goast.ImportSpec) -> Import:
    path = spec.path.value.replace('"', "").replace("`", "")
    imp = Import(path=path)
    if spec.name is not None:
        imp.name = spec.name.name
    return imp
