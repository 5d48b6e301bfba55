"""
Import Synthesis and Merge.

Turns usage sets into side-effect imports and splices them into the Program
body right after its leading import block. Imports already present are
recognized by their source string, so running the transform again on its own
output adds nothing.
"""

from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Sequence, Set

from domtify_autoimport.core.estree import (
  Node,
  import_source,
  is_import_declaration,
  is_require_declaration,
  make_side_effect_import,
)


class ExistingImportIndex(NamedTuple):
  """Unit names already imported through the methods / utilities prefixes."""

  instance_names: Set[str]
  utility_names: Set[str]


class ImportPlan(NamedTuple):
  """Names that still need an import, in first-seen order."""

  instance_names: List[str]
  utility_names: List[str]

  @property
  def is_empty(self) -> bool:
    return not self.instance_names and not self.utility_names

  def sources(self, methods_path: str, utilities_path: str) -> List[str]:
    return [f"{methods_path}/{n}" for n in self.instance_names] + [f"{utilities_path}/{n}" for n in self.utility_names]


def index_existing_imports(body: Sequence[Mapping[str, Any]], methods_path: str, utilities_path: str) -> ExistingImportIndex:
  """
  Finds units already imported at top level.

  Only sources of the exact form ``<prefix>/<name>`` count.

  Args:
      body: The Program's statement list.
      methods_path: Instance method prefix (e.g. ``domtify/methods``).
      utilities_path: Utility prefix (e.g. ``domtify/utilities``).

  Returns:
      ExistingImportIndex: The satisfied name sets.
  """
  method_prefix = methods_path + "/"
  utility_prefix = utilities_path + "/"
  index = ExistingImportIndex(set(), set())

  for stmt in body:
    src = import_source(stmt)
    if src is None:
      continue
    if src.startswith(method_prefix):
      index.instance_names.add(src[len(method_prefix) :])
    elif src.startswith(utility_prefix):
      index.utility_names.add(src[len(utility_prefix) :])

  return index


def plan_imports(used_instance: Iterable[str], used_utility: Iterable[str], existing: ExistingImportIndex) -> ImportPlan:
  """
  Subtracts satisfied names, keeping the usage order.

  Args:
      used_instance: Detected instance method names, in discovery order.
      used_utility: Detected utility names, in discovery order.
      existing: Names already imported.

  Returns:
      ImportPlan: The names to add.
  """
  return ImportPlan(
    instance_names=[n for n in used_instance if n not in existing.instance_names],
    utility_names=[n for n in used_utility if n not in existing.utility_names],
  )


def find_insertion_index(body: Sequence[Mapping[str, Any]]) -> int:
  """
  Locates the end of the leading import block.

  The block is the longest prefix of import declarations and require-pattern
  variable declarations.

  Args:
      body: The Program's statement list.

  Returns:
      int: Index of the first statement outside the block, or ``len(body)``.
  """
  for i, stmt in enumerate(body):
    if not is_import_declaration(stmt) and not is_require_declaration(stmt):
      return i
  return len(body)


def merge_imports(
  file: Mapping[str, Any],
  used_instance: Iterable[str],
  used_utility: Iterable[str],
  methods_path: str,
  utilities_path: str,
) -> Mapping[str, Any]:
  """
  Produces the File with missing side-effect imports inserted.

  The input is never mutated. When nothing needs adding, the very same
  object is returned; otherwise the result is a shallow copy of the File and
  its Program with a new body list.

  Args:
      file: The ``File`` node (with a ``program`` slot).
      used_instance: Detected instance method names, in discovery order.
      used_utility: Detected utility names, in discovery order.
      methods_path: Instance method import prefix.
      utilities_path: Utility import prefix.

  Returns:
      Mapping[str, Any]: The input File or an updated copy.
  """
  used_instance = list(used_instance)
  used_utility = list(used_utility)
  if not used_instance and not used_utility:
    return file

  program = file["program"]
  body: List[Node] = list(program.get("body") or [])

  existing = index_existing_imports(body, methods_path, utilities_path)
  plan = plan_imports(used_instance, used_utility, existing)
  if plan.is_empty:
    return file

  new_nodes = [make_side_effect_import(src) for src in plan.sources(methods_path, utilities_path)]
  at = find_insertion_index(body)

  new_program: Dict[str, Any] = {**program, "body": body[:at] + new_nodes + body[at:]}
  return {**file, "program": new_program}
