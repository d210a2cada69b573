"""Transform engine: applies transforms to types as they are lifted.

The builder appends each lifted type to ``File.code`` and immediately runs
the general transforms over it, so the type being transformed is always the
tail of ``code``. Exclusions and modifications act on that tail.
``CopyIntoStruct`` is resolved in a second pass by ``splice_copies``.
"""

from __future__ import annotations

import logging

from gotir.ir.models import File, StructType, Type
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

logger = logging.getLogger(__name__)


def apply_transform(transform: Transform, t: Type, f: File) -> bool:
    """Apply one transform to the type just appended to ``f.code``.

    Returns:
        False when the type was removed from ``f.code`` and no further
        transforms should run on it, True otherwise.
    """
    if isinstance(transform, AddField):
        if isinstance(t, StructType):
            for fld in list(t.fields):
                gen = transform.generate(t, fld)
                if gen is None:
                    continue
                ok = apply_transform(gen, t, f)
                if isinstance(gen, CopyIntoStruct):
                    f.copies.append(gen)
                f.transforms.append(gen)
                if not ok:
                    # t is no longer the tail of code.
                    return False

    elif isinstance(transform, ExcludeType):
        if transform.match(t):
            f.code.pop()
            return False
        if isinstance(t, StructType):
            t.fields = [fld for fld in t.fields if not transform.match(fld)]

    elif isinstance(transform, ExcludeField):
        if isinstance(t, StructType):
            t.fields = [fld for fld in t.fields if not transform.match(fld)]

    elif isinstance(transform, CopyIntoStruct):
        if isinstance(t, StructType) and t.name in transform.from_structs:
            transform.with_fields.extend(t.fields)
            f.code.pop()
            return False

    elif isinstance(transform, ModifyType):
        if isinstance(t, StructType):
            for fld in t.fields:
                fld.type = transform.apply(fld.type)
            f.code[-1] = t
        else:
            f.code[-1] = transform.apply(t)

    elif isinstance(transform, ModifyField):
        if isinstance(t, StructType):
            for i, fld in enumerate(t.fields):
                t.fields[i] = transform.apply(fld)
            f.code[-1] = t

    elif isinstance(transform, ExcludeImport):
        # Imports are filtered while they are read, not per type.
        pass

    else:
        raise TypeError(f"not a transform: {transform!r}")

    return True


def splice_copies(f: File) -> None:
    """Replace each copy target's placeholder field with the collected fields.

    When several top-level types share the target name, the last one wins.
    """
    for ci in f.copies:
        struct_idx = None
        for i, t in enumerate(f.code):
            if t.name == ci.struct_name:
                struct_idx = i
        if struct_idx is None:
            logger.debug("splice_copies: no type named %s", ci.struct_name)
            continue

        st = f.code[struct_idx]
        if not isinstance(st, StructType):
            continue

        field_idx = None
        for i, fld in enumerate(st.fields):
            if fld.name == ci.field_to_replace:
                field_idx = i
                break
        if field_idx is None:
            logger.debug(
                "splice_copies: %s has no field %s", ci.struct_name, ci.field_to_replace
            )
            continue

        st.fields = st.fields[:field_idx] + list(ci.with_fields) + st.fields[field_idx + 1 :]
