"""gotir: typed intermediate representation for Go type declarations.

Lifts the package, imports and type declarations of a Go file into a TIR,
applies a pipeline of structural transforms, and keeps only the imports the
surviving types still reference.
"""

__version__ = "0.1.0"

from gotir.builder import file_from_ast, file_from_path, file_from_source  # noqa: E402

__all__ = ["__version__", "file_from_ast", "file_from_path", "file_from_source"]
