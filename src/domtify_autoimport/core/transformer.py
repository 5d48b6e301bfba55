"""
Auto-Import Transformer.

Runs the detection-and-synthesis pipeline on one parsed file:

1.  **Exclusions**: pair ignore directives into offset ranges. This runs for
    every file so malformed directives are always reported.
2.  **Gate**: detect root bindings; without a root import/require the tree is
    returned untouched.
3.  **Detection**: walk the tree collecting instance and utility usages.
4.  **Synthesis**: insert side-effect imports for every name not yet imported.

The registry is resolved once, when the transformer is built. Everything else
is per call and private to the instance, so hosts that process files in
parallel simply build one transformer per file.
"""

from pathlib import Path
from typing import Any, List, Mapping, Optional

from rich.markup import escape

from domtify_autoimport.__version__ import __version__
from domtify_autoimport.config import AutoImportConfig
from domtify_autoimport.core.bindings import RootBinding, detect_root_bindings
from domtify_autoimport.core.ignore_ranges import IgnoreRange, collect_ignore_ranges
from domtify_autoimport.core.registry import MethodRegistry, load_registry
from domtify_autoimport.core.synthesizer import merge_imports
from domtify_autoimport.core.usage import UsageCollector, UsageRecord
from domtify_autoimport.enums import UsageKind
from domtify_autoimport.utils.console import log_info, log_success, log_warning

TOOL_NAME = "domtify-autoimport"


class AutoImportTransformer:
  """
  Synthesizes the side-effect imports one file needs.

  Attributes:
      file: The ``File`` node being transformed.
      filename: Identifier used in log output.
      config: Resolved options.
      registry: Instance/utility names the file is matched against.
      binding: Root binding of the last ``transform`` call.
      ignore_ranges: Exclusion ranges of the last ``transform`` call.
      warnings: Advisory messages of the last ``transform`` call.
      usages: Collector state of the last ``transform`` call.
  """

  def __init__(
    self,
    file: Mapping[str, Any],
    filename: str = "<unknown>",
    config: Optional[AutoImportConfig] = None,
    registry: Optional[MethodRegistry] = None,
    search_root: Optional[Path] = None,
  ):
    """
    Initializes the transformer and resolves its registry.

    Args:
        file: The parsed ``File`` tree (``program`` and ``comments`` slots).
        filename: Identifier for logging.
        config: Options; defaults are used when omitted.
        registry: A prebuilt registry. When omitted, it is loaded from the
            installed package resolved from ``search_root``.
        search_root: Where package resolution starts (defaults to cwd).

    Raises:
        RegistryUnavailableError: If no registry was given and none can be loaded.
    """
    self.file = file
    self.filename = filename
    self.config = config or AutoImportConfig()
    if registry is None:
      registry = load_registry(
        package=self.config.package,
        search_root=search_root,
        dist_dir=self.config.dist_dir,
      )
    self.registry = registry

    self.binding = RootBinding()
    self.ignore_ranges: List[IgnoreRange] = []
    self.warnings: List[str] = []
    self.usages = UsageCollector(self.registry)

  @property
  def verbose(self) -> bool:
    return self.config.verbose

  def transform(self) -> Mapping[str, Any]:
    """
    Executes the full pipeline.

    Returns:
        Mapping[str, Any]: The input File itself when nothing changes,
        otherwise an updated shallow copy.
    """
    program = self.file["program"]
    body = program.get("body") or []

    # Directives are checked for every file, whether or not it uses the library
    scan = collect_ignore_ranges(self.file.get("comments") or [])
    self.ignore_ranges = scan.ranges
    self.warnings = scan.warnings
    if self.verbose:
      for msg in self.warnings:
        log_warning(msg)

    self.binding = detect_root_bindings(body, self.config.root_sources)
    if not self.binding.has_root_import:
      return self.file

    if self.verbose:
      log_info(f"{TOOL_NAME} v{__version__}")
      log_info(f"entry: [path]{escape(self.filename)}[/path]")

    self.usages = UsageCollector(
      self.registry,
      self.ignore_ranges,
      on_usage=self._log_usage if self.verbose else None,
    ).collect(program)

    result = merge_imports(
      self.file,
      self.usages.used_instance_names,
      self.usages.used_utility_names,
      self.config.methods_path,
      self.config.utilities_path,
    )

    if self.verbose:
      self._log_summary()

    return result

  def _log_usage(self, record: UsageRecord) -> None:
    if record.kind is UsageKind.INSTANCE:
      style, label = "yellow", "method"
    else:
      style, label = "blue", "utility"
    log_info(
      f"[{style}]\\[{label}][/{style}] [italic]{record.name}[/italic] │ position: {record.line}:{record.column}"
    )

  def _log_summary(self) -> None:
    methods = list(self.usages.used_instance_names)
    utilities = list(self.usages.used_utility_names)

    if not methods and not utilities:
      log_warning("No methods detected for auto-import.")
      return

    log_info("Auto-import summary:")
    if methods:
      log_info(f"  methods({len(methods)})")
      for name in methods:
        log_info(f"    - [italic]{name}[/italic]")
    if utilities:
      log_info(f"  utilities({len(utilities)})")
      for name in utilities:
        log_info(f"    - [italic]{name}[/italic]")

    log_success(f"Finished auto-importing {len(methods) + len(utilities)} methods.")
