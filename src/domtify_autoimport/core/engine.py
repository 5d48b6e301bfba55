"""
Orchestration Engine for Text-to-Text Runs.

The :class:`AutoImportTransformer` works on trees handed over by a host build
pipeline. The engine serves callers that only have source text (the CLI, the
``transform_source`` helper):

1.  **Parse**: Tree-sitter source to a Babel-shaped tree.
2.  **Transform**: one transformer per file, all sharing the engine's registry.
3.  **Emit**: splice synthesized imports back into the original text.

The registry is loaded once when the engine is built, so a missing library
fails fast before any file is read.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from domtify_autoimport.config import AutoImportConfig
from domtify_autoimport.core.estree import import_source, node_span
from domtify_autoimport.core.registry import MethodRegistry, load_registry
from domtify_autoimport.core.transformer import AutoImportTransformer
from domtify_autoimport.errors import SourceParseError
from domtify_autoimport.parsing import language_for_path, parse_module, splice_imports


class TransformResult(BaseModel):
  """
  Outcome of transforming one source file.
  """

  code: str = Field(default="", description="The transformed source code.")
  changed: bool = Field(default=False, description="True if any import was added.")
  success: bool = Field(default=True, description="False if the file could not be processed.")
  errors: List[str] = Field(default_factory=list, description="Fatal problems for this file.")
  warnings: List[str] = Field(default_factory=list, description="Advisory messages (malformed ignore directives).")
  added_imports: List[str] = Field(default_factory=list, description="Sources of the inserted imports, in order.")
  used_methods: List[str] = Field(default_factory=list, description="Detected instance method names.")
  used_utilities: List[str] = Field(default_factory=list, description="Detected utility names.")


class AutoImportEngine:
  """
  Runs the transform over source text with a shared, preloaded registry.
  """

  def __init__(
    self,
    config: Optional[AutoImportConfig] = None,
    registry: Optional[MethodRegistry] = None,
    search_root: Optional[Path] = None,
  ):
    """
    Initializes the Engine.

    Args:
        config: Options; defaults are used when omitted.
        registry: Prebuilt registry; loaded from ``search_root`` when omitted.
        search_root: Where package resolution starts (defaults to cwd).

    Raises:
        RegistryUnavailableError: If the registry has to be loaded and cannot be.
    """
    self.config = config or AutoImportConfig()
    if registry is None:
      registry = load_registry(
        package=self.config.package,
        search_root=search_root,
        dist_dir=self.config.dist_dir,
      )
    self.registry = registry

  def run(self, code: str, filename: str = "<string>") -> TransformResult:
    """
    Transforms one file's source text.

    Args:
        code: The JavaScript source.
        filename: Identifier used in log output. Its suffix selects the
            grammar (``.ts``/``.mts``/``.cts`` TypeScript, ``.tsx`` TSX,
            anything else JavaScript).

    Returns:
        TransformResult: The new code and what was detected. Parse failures
        yield ``success=False`` with the original code.
    """
    try:
      tree = parse_module(code, language=language_for_path(filename))
    except SourceParseError as e:
      return TransformResult(code=code, success=False, errors=[f"{filename}: {e}"])

    transformer = AutoImportTransformer(tree, filename=filename, config=self.config, registry=self.registry)
    new_tree = transformer.transform()

    if new_tree is tree:
      new_code = code
      added: List[str] = []
    else:
      new_code = splice_imports(code, new_tree)
      added = [import_source(n) or "" for n in new_tree["program"]["body"] if node_span(n) is None]

    return TransformResult(
      code=new_code,
      changed=bool(added),
      warnings=list(transformer.warnings),
      added_imports=added,
      used_methods=list(transformer.usages.used_instance_names),
      used_utilities=list(transformer.usages.used_utility_names),
    )
