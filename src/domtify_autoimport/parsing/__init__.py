"""
JavaScript Source Handling.

Bridges raw JavaScript text and the mapping trees the transform works on:

- ``parse_module``: Tree-sitter parse, lowered to the Babel/ESTree shape.
- ``language_for_path``: grammar choice (JavaScript, TypeScript, TSX) by suffix.
- ``splice_imports``: writes synthesized imports back into the original text.
"""

from domtify_autoimport.parsing.emitter import render_import, splice_imports
from domtify_autoimport.parsing.tree_sitter_adapter import language_for_path, parse_module

__all__ = ["language_for_path", "parse_module", "render_import", "splice_imports"]
