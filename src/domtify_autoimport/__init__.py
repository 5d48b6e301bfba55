"""
domtify-autoimport Package.

Adds the side-effect imports a JavaScript module needs for the ``domtify``
methods and utilities it uses, and nothing else.

``domtify`` ships every instance method (``domtify/methods/<name>``) and
utility (``domtify/utilities/<name>``) as a separately loadable unit. This
package scans a module that imports the library, finds the referenced units
by name, and inserts the missing imports after the leading import block.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import domtify_autoimport as dai
    code = 'import d from "domtify"\\nd(".foo").addClass("bar")'
    print(dai.transform_source(code))
    # import d from "domtify"
    # import "domtify/methods/addClass";
    # d(".foo").addClass("bar")

Host Pipelines (Tree Level)
^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from domtify_autoimport import AutoImportTransformer

    new_file = AutoImportTransformer(babel_file_tree, filename="src/app.js").transform()
"""

from pathlib import Path
from typing import Optional

from domtify_autoimport.__version__ import __version__
from domtify_autoimport.config import AutoImportConfig
from domtify_autoimport.core.engine import AutoImportEngine, TransformResult
from domtify_autoimport.core.registry import MethodRegistry, load_registry
from domtify_autoimport.core.transformer import AutoImportTransformer
from domtify_autoimport.errors import AutoImportError, RegistryUnavailableError, SourceParseError


def transform_source(
  code: str,
  filename: str = "<string>",
  verbose: bool = False,
  registry: Optional[MethodRegistry] = None,
  config: Optional[AutoImportConfig] = None,
  search_root: Optional[Path] = None,
) -> str:
  """
  Adds missing domtify side-effect imports to a string of JavaScript.

  Args:
      code (str): The source code to transform.
      filename (str): Identifier used in verbose logs. A ``.ts``/``.tsx``
          suffix parses the code as TypeScript / TSX.
      verbose (bool): If True, logs every detected usage and a summary.
      registry (MethodRegistry, optional): Unit names to match. If None, they
          are read from the installed ``domtify`` package.
      config (AutoImportConfig, optional): Full options; ``verbose`` overrides
          its flag when True.
      search_root (Path, optional): Where package resolution starts.

  Returns:
      str: The transformed source code.

  Raises:
      RegistryUnavailableError: If no registry was given and none can be loaded.
      ValueError: If the source cannot be parsed.
  """
  cfg = config or AutoImportConfig()
  if verbose and not cfg.verbose:
    cfg = cfg.model_copy(update={"verbose": True})

  engine = AutoImportEngine(config=cfg, registry=registry, search_root=search_root)
  result = engine.run(code, filename=filename)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Auto-import failed:\n{error_msg}")

  return result.code


__all__ = [
  "AutoImportConfig",
  "AutoImportEngine",
  "AutoImportError",
  "AutoImportTransformer",
  "MethodRegistry",
  "RegistryUnavailableError",
  "SourceParseError",
  "TransformResult",
  "__version__",
  "load_registry",
  "transform_source",
]
