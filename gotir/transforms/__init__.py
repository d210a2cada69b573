"""Transforms: declarative rewrites applied while a Go file is lifted.

This package provides:
- Transform descriptors: exclusion, modification, generation, inlining
- Matchers: reusable predicates over types, fields and imports
- The engine that applies transforms to each type as it is lifted
"""

from gotir.transforms.models import (
    AddField,
    CopyIntoStruct,
    ExcludeField,
    ExcludeImport,
    ExcludeType,
    ModifyField,
    ModifyType,
    Transform,
)

__all__ = [
    "AddField",
    "CopyIntoStruct",
    "ExcludeField",
    "ExcludeImport",
    "ExcludeType",
    "ModifyField",
    "ModifyType",
    "Transform",
]
