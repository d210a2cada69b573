"""TIR data models: the typed intermediate representation of one Go file.

A ``File`` holds the package name, the imports still referenced after
transforms, and the surviving top-level types in source order. Types form a
closed sum of four variants; each reports the printable type identifiers it
mentions so the import tracker can decide which imports stay live.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class PlainType:
    """A named, qualified, pointer or interface type: ``int``, ``z.T``, ``*A``."""

    type: str
    name: str = ""
    docs: str = ""

    def type_names(self) -> set[str]:
        return {self.type}

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "plain", "name": self.name, "type": self.type, "docs": self.docs}


@dataclass
class ArrayType:
    """A slice; ``type`` is the element type text."""

    type: str
    name: str = ""
    docs: str = ""

    def type_names(self) -> set[str]:
        return {self.type}

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "array", "name": self.name, "type": self.type, "docs": self.docs}


@dataclass
class MapType:
    key_type: str
    value_type: str
    name: str = ""
    docs: str = ""

    def type_names(self) -> set[str]:
        return {self.key_type, self.value_type}

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "map",
            "name": self.name,
            "key_type": self.key_type,
            "value_type": self.value_type,
            "docs": self.docs,
        }


@dataclass
class StructType:
    name: str = ""
    fields: list[Field] = field(default_factory=list)
    docs: str = ""

    def type_names(self) -> set[str]:
        names: set[str] = set()
        for f in self.fields:
            names |= f.type_names()
        return names

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "struct",
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "docs": self.docs,
        }


Type = Union[PlainType, ArrayType, MapType, StructType]


@dataclass
class Field:
    """A struct field. Its name and docs live on the embedded type node."""

    type: Type
    tags: dict[str, list[str]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.type.name

    @property
    def docs(self) -> str:
        return self.type.docs

    def type_names(self) -> set[str]:
        return self.type.type_names()

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.to_dict(), "tags": {k: list(v) for k, v in self.tags.items()}}


@dataclass
class Import:
    path: str
    name: str = ""  # Explicit alias, if any
    used: bool = False

    @property
    def key(self) -> str:
        """The identifier this import is addressed by in source."""
        if self.name:
            return self.name
        return self.path.rsplit("/", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "name": self.name}


@dataclass
class File:
    """The TIR for one source file.

    ``transforms``, ``copies`` and ``eximports`` are working state used while
    the file is being built; they are not part of the output.
    """

    package: str
    imports: dict[str, Import] = field(default_factory=dict)
    code: list[Type] = field(default_factory=list)

    transforms: list = field(default_factory=list, repr=False, compare=False)
    copies: list = field(default_factory=list, repr=False, compare=False)
    eximports: list = field(default_factory=list, repr=False, compare=False)

    def get(self, name: str) -> Type | None:
        for t in self.code:
            if t.name == name:
                return t
        return None

    @property
    def type_names(self) -> list[str]:
        return [t.name for t in self.code]

    @property
    def structs(self) -> list[StructType]:
        return [t for t in self.code if isinstance(t, StructType)]

    def sorted_imports(self) -> list[Import]:
        return [self.imports[k] for k in sorted(self.imports)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package,
            "imports": {k: self.imports[k].to_dict() for k in sorted(self.imports)},
            "code": [t.to_dict() for t in self.code],
        }
