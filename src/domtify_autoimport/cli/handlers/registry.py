"""
Registry Command Handler.

Shows which method and utility units the installed library exposes, i.e. the
names the transform can detect.
"""

from itertools import zip_longest
from pathlib import Path
from typing import Any, Dict, Optional

from rich.table import Table

from domtify_autoimport.config import AutoImportConfig
from domtify_autoimport.core.registry import load_registry
from domtify_autoimport.errors import RegistryUnavailableError
from domtify_autoimport.utils.console import console, log_error, log_warning


def handle_registry(search_root: Optional[Path], overrides: Dict[str, Any]) -> int:
  """
  Prints the resolved registry as a two-column table.

  Args:
      search_root: Where to resolve the package from (defaults to cwd).
      overrides: Option overrides from ``--config``.

  Returns:
      int: Exit code (0 on success, 1 if the registry is unavailable).
  """
  root = search_root or Path.cwd()
  try:
    config = AutoImportConfig.load(overrides=overrides, search_path=root)
    registry = load_registry(package=config.package, search_root=root, dist_dir=config.dist_dir)
  except (ValueError, RegistryUnavailableError) as e:
    log_error(str(e))
    return 1

  if registry.is_empty:
    log_warning(f"Package '{config.package}' exposes no method or utility units.")
    return 0

  methods = sorted(registry.instance_names)
  utilities = sorted(registry.utility_names)

  table = Table(title=f"{config.package} units")
  table.add_column(f"methods ({len(methods)})", style="yellow")
  table.add_column(f"utilities ({len(utilities)})", style="blue")
  for method, utility in zip_longest(methods, utilities, fillvalue=""):
    table.add_row(method, utility)

  console.print(table)
  return 0
