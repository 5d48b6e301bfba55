"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A fixed in-memory registry for transform tests.
- A fake installed ``domtify`` package (node_modules layout) for registry
  resolution and CLI tests.
- Console capture for verbose log assertions.
"""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'domtify_autoimport' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from domtify_autoimport.core.registry import MethodRegistry
from domtify_autoimport.utils.console import reset_console, set_console

INSTANCE_NAMES = ["addClass", "removeClass", "toggleClass", "css", "on", "each", "first"]
UTILITY_NAMES = ["isArray", "extend", "noop", "each"]


@pytest.fixture
def registry() -> MethodRegistry:
  """Registry with a handful of units; ``each`` is in both sets."""
  return MethodRegistry.from_names(INSTANCE_NAMES, UTILITY_NAMES)


def make_installed_package(root: Path, package: str = "domtify", dist_dir: str = "dist/esm") -> Path:
  """
  Writes ``node_modules/<package>`` with unit files below ``root``.

  Returns:
      Path: The package directory.
  """
  pkg = root / "node_modules" / package
  methods = pkg / dist_dir / "methods"
  utilities = pkg / dist_dir / "utilities"
  methods.mkdir(parents=True)
  utilities.mkdir(parents=True)
  (pkg / "package.json").write_text(f'{{"name": "{package}", "version": "1.0.0"}}', encoding="utf-8")

  for name in INSTANCE_NAMES:
    (methods / f"{name}.js").write_text("export default null;\n", encoding="utf-8")
  for name in UTILITY_NAMES:
    (utilities / f"{name}.js").write_text("export default null;\n", encoding="utf-8")
  return pkg


@pytest.fixture
def package_factory():
  """Exposes :func:`make_installed_package` to tests needing custom layouts."""
  return make_installed_package


@pytest.fixture
def installed_package(tmp_path) -> Path:
  """Project root (``tmp_path``) with a fake ``domtify`` install."""
  make_installed_package(tmp_path)
  return tmp_path


@pytest.fixture
def log_buffer():
  """
  Redirects the package console to a buffer.

  The package logger does not propagate, so ``caplog`` cannot see it.
  """
  buf = io.StringIO()
  set_console(Console(file=buf, width=200, color_system=None))
  yield buf
  reset_console()
