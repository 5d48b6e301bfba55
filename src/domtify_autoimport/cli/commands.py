"""
CLI Command Handlers Facade.

Re-exports the handlers from `domtify_autoimport.cli.handlers` so the
dispatcher (and tests patching it) have a single import location.
"""

from domtify_autoimport.cli.handlers.registry import handle_registry
from domtify_autoimport.cli.handlers.transform import (
  handle_transform,
  _print_batch_summary,
  _transform_single_file,
)

__all__ = [
  "_print_batch_summary",
  "_transform_single_file",
  "handle_registry",
  "handle_transform",
]
