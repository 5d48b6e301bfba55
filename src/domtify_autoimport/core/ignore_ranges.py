"""
Ignore Directive Scanning.

Regions bracketed by ``/* domtify-ignore-start */`` and
``/* domtify-ignore-end */`` are excluded from usage detection. The scan works
on the comment list and raw offsets alone, so it is independent of how the
tree is shaped or walked.

Misplaced directives never abort the transform. Each one produces an advisory
message and is otherwise treated as if it were not there.
"""

from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from domtify_autoimport.core.estree import comment_kind, node_span
from domtify_autoimport.enums import CommentKind

IGNORE_START = "domtify-ignore-start"
IGNORE_END = "domtify-ignore-end"


class IgnoreRange(NamedTuple):
  """Half-open ``[start, end)`` source offset range."""

  start: int
  end: int

  def contains(self, span: Tuple[int, int]) -> bool:
    return span[0] >= self.start and span[1] <= self.end


class IgnoreScan(NamedTuple):
  """Result of scanning a file's comments."""

  ranges: List[IgnoreRange]
  warnings: List[str]


def collect_ignore_ranges(comments: Iterable[Mapping[str, Any]]) -> IgnoreScan:
  """
  Pairs ignore directives into ranges.

  Args:
      comments: The file's comments, in source order.

  Returns:
      IgnoreScan: Closed ranges in order of closing, plus advisory messages for
      line-style markers, nested starts, unmatched ends and unclosed regions.
  """
  ranges: List[IgnoreRange] = []
  warnings: List[str] = []

  inside = False
  pending_start = 0

  for comment in comments:
    kind = comment_kind(comment)
    text = str(comment.get("value", "")).strip()
    if text not in (IGNORE_START, IGNORE_END):
      continue

    if kind is CommentKind.LINE:
      warnings.append(f"{text} should be used with block comments")
      continue
    if kind is not CommentKind.BLOCK:
      continue

    span = node_span(comment) or (0, 0)

    if text == IGNORE_START:
      if inside:
        warnings.append(f"Nested {IGNORE_START} found")
        continue
      inside = True
      pending_start = span[0]
    else:
      if not inside:
        warnings.append(f"{IGNORE_END} without start")
        continue
      ranges.append(IgnoreRange(pending_start, span[1]))
      inside = False

  if inside:
    warnings.append(f"Unclosed {IGNORE_START} found")

  return IgnoreScan(ranges=ranges, warnings=warnings)


def is_ignored(span: Optional[Tuple[int, int]], ranges: Sequence[IgnoreRange]) -> bool:
  """
  Checks whether a span lies fully inside any ignore range.

  Args:
      span: ``(start, end)`` of a node, or None for nodes without offsets.
      ranges: The ranges from :func:`collect_ignore_ranges`.

  Returns:
      bool: True if the span is covered. Spans of None are never ignored.
  """
  if span is None:
    return False
  return any(r.contains(span) for r in ranges)
