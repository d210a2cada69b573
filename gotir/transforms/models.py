"""Transform descriptors: declarative rewrite rules applied while a file is built.

Each transform carries either a matcher (a predicate over a Type, Field or
Import) or a rewrite function. ``CopyIntoStruct`` is deferred: it collects
fields during the walk and splices them into its target afterwards.
``AddField`` is a generator: it may produce further transforms per field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from gotir.ir.models import Field, StructType, Type

Matcher = Callable[[Any], bool]


@dataclass
class ExcludeImport:
    """Drop imports the matcher accepts before they are recorded."""

    match: Matcher


@dataclass
class ExcludeType:
    """Drop a matching top-level type; otherwise drop matching struct fields."""

    match: Matcher


@dataclass
class ExcludeField:
    match: Matcher


@dataclass
class ModifyType:
    """Replace a top-level type, or each field's type inside a struct."""

    apply: Callable[[Type], Type]


@dataclass
class ModifyField:
    apply: Callable[[Field], Field]


@dataclass
class AddField:
    """Generator: called per struct field, may return a transform to add."""

    generate: Callable[[StructType, Field], Optional["Transform"]]


@dataclass
class CopyIntoStruct:
    """Inline the fields of the ``from_structs`` into ``struct_name``.

    Source structs are removed from the output as they are seen; their
    fields accumulate in ``with_fields`` and replace ``field_to_replace``
    in the target once every declaration has been read. The accumulator
    makes an instance single-use.
    """

    from_structs: set[str]
    struct_name: str
    field_to_replace: str
    with_fields: list[Field] = field(default_factory=list)


Transform = Union[
    ExcludeImport,
    ExcludeType,
    ExcludeField,
    ModifyType,
    ModifyField,
    AddField,
    CopyIntoStruct,
]
