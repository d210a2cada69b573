"""Typed intermediate representation (TIR) for Go type declarations.

The TIR is what the lifter builds from a parsed Go file and what the
transform engine rewrites:
- Types (plain, array, map, struct) and struct fields with parsed tags
- Imports, pruned to those referenced by the surviving types
- The File container that keeps source declaration order
"""
