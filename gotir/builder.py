"""File assembler: builds a TIR File from a parsed Go file and a transform list.

Declarations are read in source order. Imports pass through the import
exclusions; each type spec is lifted, appended to ``code`` and run through
the general transforms, then offered to the supplied copies so source
structs are absorbed into their accumulators. Deferred struct inlining and
import pruning happen once every declaration has been read.
"""

from __future__ import annotations

from pathlib import Path

from gotir import goast
from gotir.ir.imports import add_import, mark_used_imports, prune_imports
from gotir.ir.lifter import docs_from_comments, import_from_spec, lift_expr
from gotir.ir.models import File
from gotir.parser.go_parser import parse_file, parse_source
from gotir.transforms.engine import apply_transform, splice_copies
from gotir.transforms.models import CopyIntoStruct, ExcludeImport, Transform


def partition_transforms(f: File, transforms: tuple[Transform, ...] | list[Transform]) -> None:
    """Sort transforms into the file's copies, eximports and general lists."""
    for t in transforms:
        if isinstance(t, CopyIntoStruct):
            f.copies.append(t)
        elif isinstance(t, ExcludeImport):
            f.eximports.append(t)
        else:
            f.transforms.append(t)


def file_from_ast(file: goast.File, package: str = "", *transforms: Transform) -> File:
    """Build the TIR for a parsed Go file.

    Args:
        file: The parsed file.
        package: Package name for the output; empty means the file's own.
        *transforms: Transforms to apply, in order.

    Transforms generated by ``AddField`` while a type is processed are
    appended to the general list and take effect from the next type spec.
    """
    f = File(package=package or file.name.name)
    partition_transforms(f, transforms)

    for decl in file.decls:
        if not isinstance(decl, goast.GenDecl):
            continue
        decl_docs = docs_from_comments(decl.doc)
        for spec in decl.specs:
            if isinstance(spec, goast.ImportSpec):
                _read_import(f, spec)
            elif isinstance(spec, goast.TypeSpec):
                docs = docs_from_comments(spec.doc) or decl_docs
                _read_type(f, spec, docs)

    splice_copies(f)
    mark_used_imports(f)
    prune_imports(f)
    return f


def _read_import(f: File, spec: goast.ImportSpec) -> None:
    imp = import_from_spec(spec)
    for ei in f.eximports:
        if ei.match(imp):
            return
    add_import(f, imp)


def _read_type(f: File, spec: goast.TypeSpec, docs: str) -> None:
    t = lift_expr([spec.name], docs, spec.type)
    if t is None:
        return
    f.code.append(t)
    for i in range(len(f.transforms)):
        if not apply_transform(f.transforms[i], t, f):
            return
    # Generated copies already ran above as part of the general list.
    for ci in f.copies:
        if any(ci is g for g in f.transforms):
            continue
        if not apply_transform(ci, t, f):
            return


def file_from_source(text: str, package: str = "", *transforms: Transform) -> File:
    return file_from_ast(parse_source(text), package, *transforms)


def file_from_path(path: str | Path, package: str = "", *transforms: Transform) -> File:
    return file_from_ast(parse_file(path), package, *transforms)
