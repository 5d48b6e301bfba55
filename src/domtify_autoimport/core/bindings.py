"""
Root Binding Detection.

Finds the local names that alias the library's root entry point. Only
top-level statements are considered: imports and requires inside functions or
blocks are not recognized.

The result also gates the whole transform. A file that never imports or
requires the root library is returned untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Collection, FrozenSet, Mapping, Sequence, Set

from domtify_autoimport.core.estree import (
  declarators,
  import_local_names,
  import_source,
  is_identifier,
  require_call_source,
)


@dataclass(frozen=True)
class RootBinding:
  """
  Local aliases of the root entry point found in one file.
  """

  local_names: FrozenSet[str] = field(default_factory=frozenset)
  has_root_import: bool = False


def detect_root_bindings(body: Sequence[Mapping[str, Any]], root_sources: Collection[str]) -> RootBinding:
  """
  Scans top-level statements for root imports and requires.

  Recognized forms::

      import d from "domtify"            // default
      import * as d from "domtify"       // namespace
      import { d } from "domtify"        // named
      const d = require("domtify")       // simple-identifier require

  A require bound to a destructuring pattern still opens the gate but binds
  no name.

  Args:
      body: The Program's statement list.
      root_sources: Source strings naming the root entry point.

  Returns:
      RootBinding: Bound names and the gate flag.
  """
  names: Set[str] = set()
  found = False

  for stmt in body:
    src = import_source(stmt)
    if src is not None:
      if src in root_sources:
        found = True
        names.update(import_local_names(stmt))
      continue

    for decl in declarators(stmt):
      req_src = require_call_source(decl.get("init"))
      if req_src is None or req_src not in root_sources:
        continue
      found = True
      target = decl.get("id")
      if is_identifier(target):
        names.add(target["name"])

  return RootBinding(local_names=frozenset(names), has_root_import=found)
