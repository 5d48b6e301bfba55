"""
Method Registry Loading.

The target library ships every instance method and utility as its own module
file in the build output. The file base names found there are the
authoritative unit names: anything not listed is not importable and is never
synthesized.

Package resolution mirrors Node's lookup: starting at a root directory, each
ancestor is checked for ``node_modules/<package>/package.json``.
"""

from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from domtify_autoimport.errors import RegistryUnavailableError

METHODS_DIR = "methods"
UTILITIES_DIR = "utilities"


class MethodRegistry(BaseModel):
  """
  The two name sets a transform matches against. Immutable once built.
  """

  model_config = ConfigDict(frozen=True)

  instance_names: FrozenSet[str] = frozenset()
  utility_names: FrozenSet[str] = frozenset()

  @classmethod
  def from_names(cls, instance_names: Iterable[str] = (), utility_names: Iterable[str] = ()) -> "MethodRegistry":
    """
    Builds a registry from explicit name lists (tests, embedding hosts).

    Args:
        instance_names: Instance method unit names.
        utility_names: Utility unit names.

    Returns:
        MethodRegistry: The frozen registry.
    """
    return cls(instance_names=frozenset(instance_names), utility_names=frozenset(utility_names))

  @property
  def is_empty(self) -> bool:
    return not self.instance_names and not self.utility_names


def resolve_package_dir(package: str, search_root: Optional[Path] = None) -> Path:
  """
  Locates an installed npm package the way Node's module resolution does.

  Args:
      package: The package name (e.g. ``domtify``).
      search_root: Directory to start from (defaults to the current directory).

  Returns:
      Path: The package directory (the one holding ``package.json``).

  Raises:
      RegistryUnavailableError: If no ancestor has the package installed.
  """
  start = (search_root or Path.cwd()).resolve()
  for parent in [start, *start.parents]:
    manifest = parent / "node_modules" / package / "package.json"
    if manifest.is_file():
      return manifest.parent

  raise RegistryUnavailableError(f"Cannot resolve package '{package}' from {start}")


def list_unit_names(directory: Path) -> FrozenSet[str]:
  """
  Lists the base names (last extension stripped) of a directory's entries.

  Args:
      directory: The unit folder to list.

  Returns:
      FrozenSet[str]: Unit names.

  Raises:
      RegistryUnavailableError: If the directory is missing or unreadable.
  """
  try:
    entries = list(directory.iterdir())
  except OSError as e:
    raise RegistryUnavailableError(f"Cannot list unit directory {directory}: {e}") from e

  return frozenset(entry.stem for entry in entries)


def load_registry(package: str = "domtify", search_root: Optional[Path] = None, dist_dir: str = "dist/esm") -> MethodRegistry:
  """
  Builds the registry from the installed library's build output.

  Args:
      package: The npm package providing the units.
      search_root: Directory from which the package is resolved.
      dist_dir: Build output directory, relative to the package, holding the
          ``methods`` and ``utilities`` folders.

  Returns:
      MethodRegistry: Both name sets.

  Raises:
      RegistryUnavailableError: If the package or either folder is unavailable.
  """
  pkg_dir = resolve_package_dir(package, search_root)
  build_dir = pkg_dir / dist_dir

  return MethodRegistry(
    instance_names=list_unit_names(build_dir / METHODS_DIR),
    utility_names=list_unit_names(build_dir / UTILITIES_DIR),
  )
