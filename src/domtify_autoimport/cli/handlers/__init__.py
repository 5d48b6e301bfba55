from .registry import handle_registry
from .transform import handle_transform, _print_batch_summary, _transform_single_file

__all__ = [
  "_print_batch_summary",
  "_transform_single_file",
  "handle_registry",
  "handle_transform",
]
