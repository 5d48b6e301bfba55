"""
Detection and Synthesis Core.

Modules, leaf first:

- ``estree``: typed view over Babel/ESTree mapping trees.
- ``registry``: unit names from the installed library's build output.
- ``ignore_ranges``: ``domtify-ignore-start`` / ``domtify-ignore-end`` regions.
- ``bindings``: root import / require detection (the fast-exit gate).
- ``usage``: whole-tree usage collection.
- ``synthesizer``: import planning and insertion.
- ``transformer``: the per-file pipeline.
- ``engine``: text-in / text-out runs for the CLI and helpers.
"""
