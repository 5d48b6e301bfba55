"""
Source Emitter.

The transform only ever adds top-level side-effect imports, so the new source
can be produced by splicing text into the original instead of regenerating the
whole file. Comments and formatting are left exactly as written.

Synthesized statements are the body entries without offsets. Each run of them
is written directly after the original statement that precedes it. A run that
opens the body goes after the hashbang line and directive prologue when the
file has them, otherwise in front of the first original statement.
"""

from typing import Any, List, Mapping, Optional, Tuple

from domtify_autoimport.core.estree import import_source, node_span


def render_import(node: Mapping[str, Any]) -> str:
  """
  Renders a side-effect import declaration.

  Args:
      node: An ImportDeclaration without specifiers.

  Returns:
      str: ``import "<source>";``

  Raises:
      ValueError: If the node is not a side-effect import.
  """
  src = import_source(node)
  if src is None or node.get("specifiers"):
    raise ValueError(f"Cannot render synthesized node of type {node.get('type')!r}")
  escaped = src.replace("\\", "\\\\").replace('"', '\\"')
  return f'import "{escaped}";'


def _prologue_end(program: Mapping[str, Any]) -> Optional[int]:
  """End offset of the hashbang line and directive prologue, if any."""
  ends = []
  interpreter = program.get("interpreter")
  for node in [interpreter, *(program.get("directives") or [])]:
    span = node_span(node) if node else None
    if span is not None:
      ends.append(span[1])
  return max(ends) if ends else None


def _insertion_points(body: List[Mapping[str, Any]], prologue_end: Optional[int] = None) -> List[Tuple[int, bool, List[str]]]:
  """
  Groups synthesized statements into (offset, leading, lines) insertions.

  ``leading`` is True when the text goes in front of an original statement
  rather than after one. Nothing is ever placed before ``prologue_end``.
  """
  points: List[Tuple[int, bool, List[str]]] = []
  pending: List[str] = []
  prev_end: Optional[int] = prologue_end

  for stmt in body:
    span = node_span(stmt)
    if span is None:
      pending.append(render_import(stmt))
      continue
    if pending:
      if prev_end is not None:
        points.append((prev_end, False, pending))
      else:
        points.append((span[0], True, pending))
      pending = []
    prev_end = span[1]

  if pending:
    points.append((prev_end if prev_end is not None else 0, prev_end is None, pending))

  return points


def splice_imports(code: str, file: Mapping[str, Any]) -> str:
  """
  Writes the synthesized imports of a transformed tree into its source text.

  Args:
      code: The original source the tree was parsed from.
      file: The transformed ``File`` tree (offsets are UTF-8 byte offsets).

  Returns:
      str: The updated source. Identical to ``code`` when nothing was added.
  """
  program = file["program"]
  body = list(program.get("body") or [])
  points = _insertion_points(body, _prologue_end(program))
  if not points:
    return code

  data = code.encode("utf-8")
  # Apply back to front so earlier offsets stay valid
  for offset, leading, lines in sorted(points, key=lambda p: p[0], reverse=True):
    block = "\n".join(lines)
    text = f"{block}\n" if leading else f"\n{block}"
    data = data[:offset] + text.encode("utf-8") + data[offset:]

  return data.decode("utf-8")
