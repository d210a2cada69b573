"""Transform pipelines: declarative transform lists loaded from YAML.

A pipeline file names an optional package-name override and an ordered list
of transforms. Each entry has a ``kind`` plus kind-specific keys; matcher
keys (``name``, ``type``, ``tag``, ``path``) take a glob or a list of globs
and combine with AND::

    package: models
    transforms:
      - kind: exclude_type
        name: ["Internal*"]
      - kind: modify_field
        set_tags: {db: ["{name}"]}
      - kind: copy_into_struct
        from: [Src]
        into: Dst
        field: Slot
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from gotir.ir.models import ArrayType, Field, MapType, PlainType, StructType, Type
from gotir.transforms.matchers import (
    all_of,
    has_tag,
    name_matches,
    path_matches,
    type_matches,
)
from gotir.transforms.models import (
    AddField,
    CopyIntoStruct,
    ExcludeField,
    ExcludeImport,
    ExcludeType,
    Matcher,
    ModifyField,
    ModifyType,
    Transform,
)

MATCHER_KEYS = ("name", "type", "tag", "path")


@dataclass
class Pipeline:
    """A package-name hint and the transforms to apply, in order."""

    package: str = ""
    transforms: list[Transform] = field(default_factory=list)


def load_pipeline(path: str | Path) -> Pipeline:
    """Load a transform pipeline from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return pipeline_from_dict(data or {})


def pipeline_from_dict(data: dict) -> Pipeline:
    if not isinstance(data, dict):
        raise ValueError("pipeline must be a mapping")

    entries = data.get("transforms") or []
    if not isinstance(entries, list):
        raise ValueError("'transforms' must be a list")

    transforms = [build_transform(entry, f"transforms[{i}]") for i, entry in enumerate(entries)]
    return Pipeline(package=str(data.get("package") or ""), transforms=transforms)


def build_transform(entry: dict, where: str = "transform") -> Transform:
    """Build one transform from its mapping form.

    Raises:
        ValueError: If the entry is malformed; the message starts with ``where``.
    """
    if not isinstance(entry, dict) or "kind" not in entry:
        raise ValueError(f"{where}: expected a mapping with a 'kind'")

    kind = entry["kind"]
    builder = _BUILDERS.get(kind)
    if builder is None:
        raise ValueError(f"{where}: unknown kind '{kind}' (expected one of {sorted(_BUILDERS)})")
    return builder(entry, where)


# --- Matchers ---


def _globs(value: Any, where: str, key: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
        return value
    raise ValueError(f"{where}: '{key}' must be a string or a list of strings")


def _matcher(entry: dict, where: str, required: bool = True) -> Matcher | None:
    preds: list[Matcher] = []
    if "name" in entry:
        preds.append(name_matches(*_globs(entry["name"], where, "name")))
    if "type" in entry:
        preds.append(type_matches(*_globs(entry["type"], where, "type")))
    if "tag" in entry:
        key, _, value = str(entry["tag"]).partition("=")
        preds.append(has_tag(key, value or None))
    if "path" in entry:
        preds.append(path_matches(*_globs(entry["path"], where, "path")))

    if not preds:
        if required:
            raise ValueError(f"{where}: needs at least one of {', '.join(MATCHER_KEYS)}")
        return None
    if len(preds) == 1:
        return preds[0]
    return all_of(*preds)


# --- Builders ---


def _exclude_import(entry: dict, where: str) -> Transform:
    return ExcludeImport(match=_matcher(entry, where))


def _exclude_type(entry: dict, where: str) -> Transform:
    return ExcludeType(match=_matcher(entry, where))


def _exclude_field(entry: dict, where: str) -> Transform:
    return ExcludeField(match=_matcher(entry, where))


def _modify_type(entry: dict, where: str) -> Transform:
    rename = entry.get("rename")
    if not isinstance(rename, dict) or not rename:
        raise ValueError(f"{where}: modify_type needs a 'rename' mapping")
    mapping = {str(k): str(v) for k, v in rename.items()}

    def apply(t: Type) -> Type:
        if isinstance(t, (PlainType, ArrayType)):
            t.type = mapping.get(t.type, t.type)
        elif isinstance(t, MapType):
            t.key_type = mapping.get(t.key_type, t.key_type)
            t.value_type = mapping.get(t.value_type, t.value_type)
        return t

    return ModifyType(apply=apply)


def _modify_field(entry: dict, where: str) -> Transform:
    set_tags = entry.get("set_tags") or {}
    drop_tags = entry.get("drop_tags") or []
    if not isinstance(set_tags, dict) or not isinstance(drop_tags, list):
        raise ValueError(f"{where}: 'set_tags' must be a mapping and 'drop_tags' a list")
    if not set_tags and not drop_tags:
        raise ValueError(f"{where}: modify_field needs 'set_tags' or 'drop_tags'")

    tags = {str(k): _globs(v, where, f"set_tags.{k}") for k, v in set_tags.items()}
    only = _matcher(entry, where, required=False)

    def apply(fld: Field) -> Field:
        if only is not None and not only(fld):
            return fld
        for key in drop_tags:
            fld.tags.pop(key, None)
        for key, values in tags.items():
            fld.tags[key] = [v.replace("{name}", fld.name) for v in values]
        return fld

    return ModifyField(apply=apply)


def _copy_into_struct(entry: dict, where: str) -> Transform:
    missing = [k for k in ("from", "into", "field") if not entry.get(k)]
    if missing:
        raise ValueError(f"{where}: copy_into_struct missing {', '.join(missing)}")
    return CopyIntoStruct(
        from_structs=set(_globs(entry["from"], where, "from")),
        struct_name=str(entry["into"]),
        field_to_replace=str(entry["field"]),
    )


def _add_field(entry: dict, where: str) -> Transform:
    emit = entry.get("emit")
    if not isinstance(emit, dict):
        raise ValueError(f"{where}: add_field needs an 'emit' transform")
    when = entry.get("when") or {}
    if not isinstance(when, dict):
        raise ValueError(f"{where}: 'when' must be a mapping")
    only = _matcher(when, f"{where}.when", required=False)

    # Surface errors in the emitted transform at load time.
    build_transform(_substitute(emit, {"struct": "S", "field": "F", "type": "T"}), f"{where}.emit")

    def generate(st: StructType, fld: Field) -> Transform | None:
        if only is not None and not only(fld):
            return None
        values = {"struct": st.name, "field": fld.name, "type": _type_text(fld)}
        return build_transform(_substitute(emit, values), f"{where}.emit")

    return AddField(generate=generate)


def _type_text(fld: Field) -> str:
    t = fld.type
    if isinstance(t, PlainType):
        return t.type.lstrip("*")
    if isinstance(t, ArrayType):
        return t.type
    if isinstance(t, MapType):
        return t.value_type
    return ""


def _substitute(value: Any, values: dict[str, str]) -> Any:
    if isinstance(value, str):
        for key, replacement in values.items():
            value = value.replace("{" + key + "}", replacement)
        return value
    if isinstance(value, list):
        return [_substitute(v, values) for v in value]
    if isinstance(value, dict):
        return {k: _substitute(v, values) for k, v in value.items()}
    return value


_BUILDERS: dict[str, Callable[[dict, str], Transform]] = {
    "exclude_import": _exclude_import,
    "exclude_type": _exclude_type,
    "exclude_field": _exclude_field,
    "modify_type": _modify_type,
    "modify_field": _modify_field,
    "copy_into_struct": _copy_into_struct,
    "add_field": _add_field,
}
