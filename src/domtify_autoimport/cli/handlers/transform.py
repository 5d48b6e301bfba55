"""
Transform Command Handler.

This module implements the `domtify-autoimport transform` command:
1. Configuration loading (pyproject.toml + CLI overrides).
2. Registry resolution, once for the whole run.
3. Per-file transformation via the Engine.
4. Output writing (stdout, --out, --in-place) or --check reporting.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from domtify_autoimport.config import AutoImportConfig
from domtify_autoimport.core.engine import AutoImportEngine, TransformResult
from domtify_autoimport.errors import RegistryUnavailableError
from domtify_autoimport.utils.console import console, log_error, log_info, log_success, log_warning

SOURCE_SUFFIXES = (".js", ".mjs", ".cjs", ".jsx", ".ts", ".mts", ".cts", ".tsx")
# Type declarations carry no runtime imports
SKIPPED_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")
SKIPPED_DIRS = {"node_modules", ".git"}


def handle_transform(
  input_path: Path,
  output_path: Optional[Path],
  in_place: bool,
  check: bool,
  verbose: Optional[bool],
  search_root: Optional[Path],
  overrides: Dict[str, Any],
) -> int:
  """
  Handles the 'transform' command execution.

  Args:
      input_path: Source file or directory.
      output_path: Destination file or directory (None prints to stdout for a single file).
      in_place: If True, rewrite inputs.
      check: If True, only report files that would change.
      verbose: Override for verbose logging.
      search_root: Where to resolve the domtify package from.
      overrides: Option overrides from ``--config``.

  Returns:
      int: Exit code (0 for success, 1 for failure or pending changes in check mode).
  """
  if not input_path.exists():
    log_error(f"Input not found: {escape(str(input_path))}")
    return 1

  base_dir = input_path if input_path.is_dir() else input_path.parent
  try:
    config = AutoImportConfig.load(verbose=verbose, overrides=overrides, search_path=base_dir)
  except ValueError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  try:
    engine = AutoImportEngine(config=config, search_root=search_root or base_dir)
  except RegistryUnavailableError as e:
    log_error(str(e))
    return 1

  if input_path.is_file():
    dest = input_path if in_place else output_path
    result = _transform_single_file(engine, input_path, dest, check)
    if check:
      return 1 if result.changed or not result.success else 0
    return 0 if result.success else 1

  if not output_path and not in_place and not check:
    log_error("Directory transformation requires --out, --in-place or --check.")
    return 1

  sources = _find_sources(input_path)
  if not sources:
    log_warning(f"No JavaScript or TypeScript files found in {escape(str(input_path))}")
    return 0

  log_info(f"Processing {len(sources)} files from {escape(str(input_path))}...")

  batch_results: Dict[str, TransformResult] = {}
  for src_file in sources:
    rel_path = src_file.relative_to(input_path)
    if in_place:
      dest_file: Optional[Path] = src_file
    else:
      dest_file = output_path / rel_path if output_path else None
    batch_results[str(rel_path)] = _transform_single_file(engine, src_file, dest_file, check)

  _print_batch_summary(batch_results, check)

  if any(not r.success for r in batch_results.values()):
    return 1
  if check and any(r.changed for r in batch_results.values()):
    return 1
  return 0


def _find_sources(root: Path) -> List[Path]:
  found = []
  for path in sorted(root.rglob("*")):
    if not path.is_file() or path.suffix not in SOURCE_SUFFIXES:
      continue
    if path.name.endswith(SKIPPED_SUFFIXES):
      continue
    if SKIPPED_DIRS.intersection(path.relative_to(root).parts):
      continue
    found.append(path)
  return found


def _transform_single_file(
  engine: AutoImportEngine,
  input_path: Path,
  output_path: Optional[Path],
  check: bool = False,
) -> TransformResult:
  """
  Helper to run the transform on a single file.

  Args:
      engine: The engine holding config and registry.
      input_path: Source file path.
      output_path: Destination file path (None prints to stdout).
      check: If True, report instead of writing.

  Returns:
      TransformResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {escape(str(input_path))}: {e}")
    return TransformResult(success=False, errors=[str(e)])

  result = engine.run(code, filename=str(input_path))

  if not result.success:
    for err in result.errors:
      log_error(escape(err))
    return result

  if check:
    if result.changed:
      log_warning(f"Would add {len(result.added_imports)} import(s) to [path]{escape(str(input_path))}[/path]")
    return result

  if output_path is None:
    print(result.code, end="")
    return result

  if output_path == input_path and not result.changed:
    return result

  try:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.code, encoding="utf-8")
  except OSError as e:
    log_error(f"Failed to write {escape(str(output_path))}: {e}")
    return result.model_copy(update={"success": False, "errors": [*result.errors, str(e)]})

  if result.changed:
    log_success(
      f"Added {len(result.added_imports)} import(s): [path]{escape(str(input_path))}[/path] -> [path]{escape(str(output_path))}[/path]"
    )
  return result


def _print_batch_summary(results: Dict[str, TransformResult], check: bool = False) -> None:
  """
  Renders a summary table of batch results to the console.

  Args:
      results: Dictionary mapping relative filenames to results.
      check: Whether the run was a dry check.
  """
  total = len(results)
  changed = sum(1 for r in results.values() if r.success and r.changed)
  failures = sum(1 for r in results.values() if not r.success)

  if failures == 0:
    verb = "need" if check else "received"
    log_success(f"Batch Complete: {total} files processed, {changed} {verb} new imports.")
    return

  table = Table(title="Auto-Import Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success:
      continue
    issues = "; ".join(res.errors) if res.errors else "Unknown Error"
    table.add_row(filename, "❌ Failed", issues)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total - failures} Processed, {failures} Failed.")
