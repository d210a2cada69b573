"""Import tracker: keeps only the imports surviving types still reference."""

from __future__ import annotations

from gotir.ir.models import File, Import, StructType


def add_import(f: File, imp: Import) -> None:
    """Record an import under its local name. A later import with the same
    local name replaces the earlier one."""
    f.imports[imp.key] = imp


def qualifier(type_name: str) -> str:
    """Return the package qualifier of a type name, or "" if unqualified.

    ``*time.Time`` gives ``time``. Only one leading ``*`` is removed.
    """
    dot = type_name.find(".")
    if dot < 0:
        return ""
    prefix = type_name[:dot]
    if prefix.startswith("*"):
        prefix = prefix[1:]
    return prefix


def mark_used_imports(f: File) -> None:
    for t in f.code:
        if isinstance(t, StructType):
            for fld in t.fields:
                _mark(f, fld.type_names())
        else:
            _mark(f, t.type_names())


def _mark(f: File, type_names: set[str]) -> None:
    for name in type_names:
        q = qualifier(name)
        if not q:
            continue
        imp = f.imports.get(q)
        if imp is not None:
            imp.used = True


def prune_imports(f: File) -> None:
    for key in [k for k, imp in f.imports.items() if not imp.used]:
        del f.imports[key]
