"""
Usage Detection.

Walks a whole tree and records every registry name that appears either as a
property access (``el.addClass``, ``el["addClass"]``) or as any string literal
value. Matching is purely by name: it does not matter which variable, object
slot or collection holds the library instance.

The string literal rule also catches indirect access such as
``const m = "addClass"; el[m]()``, at the price of false positives on
coincidental strings. The root-binding gate limits that cost to files that
actually use the library.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from domtify_autoimport.core.estree import (
  is_member_expression,
  iter_child_nodes,
  member_property_name,
  node_location,
  node_span,
  string_literal_value,
)
from domtify_autoimport.core.ignore_ranges import IgnoreRange, is_ignored
from domtify_autoimport.core.registry import MethodRegistry
from domtify_autoimport.enums import UsageKind


@dataclass(frozen=True)
class UsageRecord:
  """
  One detection of a registry name.

  Attributes:
      name: The matched unit name.
      kind: Which registry matched.
      line: 1-based line of the detecting node.
      column: 1-based column of the detecting node.
  """

  name: str
  kind: UsageKind
  line: int
  column: int


UsageCallback = Callable[[UsageRecord], None]


class UsageCollector:
  """
  Accumulates instance and utility usages for one tree.

  ``used_instance_names`` and ``used_utility_names`` map each name to its
  first detection, in discovery order (pre-order, left to right).
  ``occurrences`` keeps every detection, repeats included.
  """

  def __init__(
    self,
    registry: MethodRegistry,
    ignore_ranges: Sequence[IgnoreRange] = (),
    on_usage: Optional[UsageCallback] = None,
  ):
    """
    Args:
        registry: Names to match against.
        ignore_ranges: Offset ranges whose nodes are skipped entirely.
        on_usage: Called for every detection as it happens.
    """
    self.registry = registry
    self.ignore_ranges = list(ignore_ranges)
    self.on_usage = on_usage

    self.used_instance_names: Dict[str, UsageRecord] = {}
    self.used_utility_names: Dict[str, UsageRecord] = {}
    self.occurrences: List[UsageRecord] = []

  @property
  def is_empty(self) -> bool:
    return not self.used_instance_names and not self.used_utility_names

  def collect(self, root: Mapping[str, Any]) -> "UsageCollector":
    """
    Walks ``root`` and every descendant once.

    Args:
        root: Usually the Program node.

    Returns:
        UsageCollector: ``self``, for chaining.
    """
    stack = [root]
    while stack:
      node = stack.pop()
      if is_ignored(node_span(node), self.ignore_ranges):
        continue

      self._inspect(node)

      # Reversed so the leftmost child is popped first
      stack.extend(reversed(list(iter_child_nodes(node))))

    return self

  def _inspect(self, node: Mapping[str, Any]) -> None:
    if is_member_expression(node):
      name = member_property_name(node)
      if name:
        self._match(name, node)
      return

    value = string_literal_value(node)
    if value:
      self._match(value, node)

  def _match(self, name: str, node: Mapping[str, Any]) -> None:
    # Both checks always run: a name may live in both registries
    if name in self.registry.instance_names:
      self._record(name, UsageKind.INSTANCE, node, self.used_instance_names)
    if name in self.registry.utility_names:
      self._record(name, UsageKind.UTILITY, node, self.used_utility_names)

  def _record(self, name: str, kind: UsageKind, node: Mapping[str, Any], bucket: Dict[str, UsageRecord]) -> None:
    line, column = node_location(node)
    record = UsageRecord(name=name, kind=kind, line=line, column=column)
    bucket.setdefault(name, record)
    self.occurrences.append(record)
    if self.on_usage:
      self.on_usage(record)
