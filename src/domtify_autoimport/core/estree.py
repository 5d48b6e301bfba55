"""
Typed View over ESTree / Babel Mapping Trees.

The transform consumes syntax trees as plain mappings tagged by a ``"type"``
key, the JSON shape emitted by Babel (and, with minor differences, any ESTree
parser). This module is the single place that knows that shape: the handful
of node variants the algorithm consults get dedicated predicates and
accessors, everything else is treated as an opaque node whose child slots are
walked generically.

Both dialects are accepted where they differ:

- String literals: Babel ``StringLiteral`` or ESTree ``Literal`` with a ``str`` value.
- Offsets: Babel ``start``/``end`` or ESTree ``range``.
- Comments: ``CommentBlock``/``Block``/``BlockComment`` and their line equivalents.
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from domtify_autoimport.enums import CommentKind

Node = Dict[str, Any]

_BLOCK_COMMENT_TYPES = {"CommentBlock", "Block", "BlockComment"}
_LINE_COMMENT_TYPES = {"CommentLine", "Line", "LineComment"}
_MEMBER_TYPES = {"MemberExpression", "OptionalMemberExpression"}

# Mapping slots that hold metadata rather than child nodes
_NON_CHILD_KEYS = {"loc", "range", "extra", "leadingComments", "trailingComments", "innerComments", "comments", "tokens"}


def is_node(value: Any) -> bool:
  """
  Checks whether a value is a syntax node (a mapping carrying a type tag).

  Args:
      value: Any slot value found in the tree.

  Returns:
      bool: True for node mappings.
  """
  return isinstance(value, Mapping) and isinstance(value.get("type"), str)


def node_type(node: Mapping[str, Any]) -> str:
  return node.get("type", "")


def node_span(node: Mapping[str, Any]) -> Optional[Tuple[int, int]]:
  """
  Returns the half-open source span of a node.

  Args:
      node: The node mapping.

  Returns:
      Optional[Tuple[int, int]]: ``(start, end)``, or None for nodes without
      offsets (e.g. freshly synthesized nodes).
  """
  start = node.get("start")
  end = node.get("end")
  if isinstance(start, int) and isinstance(end, int):
    return start, end

  rng = node.get("range")
  if isinstance(rng, (list, tuple)) and len(rng) == 2:
    return int(rng[0]), int(rng[1])

  return None


def node_location(node: Mapping[str, Any]) -> Tuple[int, int]:
  """
  Returns the 1-based line and 1-based column where a node starts.

  Nodes without location metadata report ``(1, 1)``.

  Args:
      node: The node mapping.

  Returns:
      Tuple[int, int]: ``(line, column)``.
  """
  loc = node.get("loc") or {}
  start = loc.get("start") or {}
  line = start.get("line", 1)
  column = start.get("column", 0)
  return line, column + 1


def iter_child_nodes(node: Mapping[str, Any]) -> Iterator[Node]:
  """
  Yields the direct children of a node in field order.

  Node-valued slots are yielded as they appear; list slots are expanded
  element by element. Metadata slots (``loc``, attached comments, ...) are
  not part of the syntax and are skipped.

  Args:
      node: The parent node.

  Yields:
      Node: Each child node, left to right.
  """
  for key, value in node.items():
    if key in _NON_CHILD_KEYS:
      continue
    if is_node(value):
      yield value
    elif isinstance(value, list):
      for item in value:
        if is_node(item):
          yield item


# --- Variant predicates ---


def is_import_declaration(node: Mapping[str, Any]) -> bool:
  return node_type(node) == "ImportDeclaration"


def is_variable_declaration(node: Mapping[str, Any]) -> bool:
  return node_type(node) == "VariableDeclaration"


def is_member_expression(node: Mapping[str, Any]) -> bool:
  return node_type(node) in _MEMBER_TYPES


def is_identifier(node: Optional[Mapping[str, Any]]) -> bool:
  return node is not None and node_type(node) == "Identifier"


def string_literal_value(node: Optional[Mapping[str, Any]]) -> Optional[str]:
  """
  Extracts the value of a string literal node.

  Args:
      node: Any node (or None).

  Returns:
      Optional[str]: The literal's value, or None if the node is not a string literal.
  """
  if node is None:
    return None
  kind = node_type(node)
  value = node.get("value")
  if kind == "StringLiteral" and isinstance(value, str):
    return value
  if kind == "Literal" and isinstance(value, str):
    return value
  return None


def comment_kind(comment: Mapping[str, Any]) -> Optional[CommentKind]:
  """
  Classifies a comment node.

  Args:
      comment: A comment mapping from ``File.comments``.

  Returns:
      Optional[CommentKind]: BLOCK or LINE, or None for unrecognized entries.
  """
  kind = node_type(comment)
  if kind in _BLOCK_COMMENT_TYPES:
    return CommentKind.BLOCK
  if kind in _LINE_COMMENT_TYPES:
    return CommentKind.LINE
  return None


def import_source(node: Mapping[str, Any]) -> Optional[str]:
  """
  Returns the source string of an ImportDeclaration.

  Args:
      node: The declaration node.

  Returns:
      Optional[str]: The module specifier, or None when absent or not a string.
  """
  if not is_import_declaration(node):
    return None
  return string_literal_value(node.get("source"))


def import_local_names(node: Mapping[str, Any]) -> List[str]:
  """
  Collects the local names bound by an ImportDeclaration's specifiers.

  Default, namespace and named specifiers are treated alike.

  Args:
      node: The declaration node.

  Returns:
      List[str]: Local binding names in specifier order.
  """
  names = []
  for spec in node.get("specifiers") or []:
    local = spec.get("local") if is_node(spec) else None
    if is_identifier(local):
      names.append(local["name"])
  return names


def require_call_source(init: Optional[Mapping[str, Any]]) -> Optional[str]:
  """
  Matches the ``require("<source>")`` call pattern.

  The callee must be an identifier literally named ``require`` and the call
  must have exactly one argument, a string literal.

  Args:
      init: A declarator's initializer (or None).

  Returns:
      Optional[str]: The required source string, or None if the pattern does not match.
  """
  if init is None or node_type(init) != "CallExpression":
    return None
  callee = init.get("callee")
  if not is_identifier(callee) or callee.get("name") != "require":
    return None
  args = init.get("arguments") or []
  if len(args) != 1:
    return None
  return string_literal_value(args[0])


def declarators(node: Mapping[str, Any]) -> List[Node]:
  if not is_variable_declaration(node):
    return []
  return [d for d in node.get("declarations") or [] if is_node(d)]


def is_require_declaration(node: Mapping[str, Any]) -> bool:
  """
  Checks whether a statement is a require-pattern variable declaration.

  Args:
      node: A top-level statement.

  Returns:
      bool: True if any declarator is initialised by ``require("<string>")``.
  """
  return any(require_call_source(d.get("init")) is not None for d in declarators(node))


def member_property_name(node: Mapping[str, Any]) -> Optional[str]:
  """
  Extracts the statically known property name of a property access.

  Dot access (``a.name``) yields the identifier; computed access yields the
  value only when the index is a string literal (``a["name"]``). Any other
  computed index yields None.

  Args:
      node: A MemberExpression node.

  Returns:
      Optional[str]: The property name, if statically known.
  """
  prop = node.get("property")
  if prop is None:
    return None
  if node.get("computed"):
    return string_literal_value(prop)
  if is_identifier(prop):
    return prop.get("name")
  return None


def make_side_effect_import(source: str) -> Node:
  """
  Builds an ``import "<source>"`` declaration node.

  The node carries no offsets, which is how emitters tell synthesized
  statements apart from original ones.

  Args:
      source: The module specifier.

  Returns:
      Node: A Babel-shaped ImportDeclaration with no specifiers.
  """
  return {
    "type": "ImportDeclaration",
    "specifiers": [],
    "source": {"type": "StringLiteral", "value": source},
  }
