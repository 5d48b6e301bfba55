"""
Runtime Configuration Store.

Options can come from the ``[tool.domtify_autoimport]`` table of the nearest
``pyproject.toml`` and from explicit overrides (CLI flags or keyword arguments),
the latter taking precedence.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

TOOL_SECTION = "domtify_autoimport"


class AutoImportConfig(BaseModel):
  """
  Configuration container for the auto-import transform.
  """

  verbose: bool = Field(False, description="Log every detected usage and a final summary.")
  package: str = Field("domtify", description="Package name resolved under node_modules to build the registry.")
  root_sources: List[str] = Field(
    default_factory=lambda: ["domtify"],
    description="Import/require sources treated as the library's root entry point.",
  )
  methods_path: str = Field("domtify/methods", description="Import prefix of instance method units.")
  utilities_path: str = Field("domtify/utilities", description="Import prefix of utility units.")
  dist_dir: str = Field("dist/esm", description="Build output directory inside the package holding the unit folders.")

  @field_validator("package", "methods_path", "utilities_path", "dist_dir")
  @classmethod
  def validate_path(cls, v: str) -> str:
    """
    Normalizes a path-like option.

    Args:
        v (str): Raw option value.

    Returns:
        str: The value without surrounding whitespace or trailing slashes.

    Raises:
        ValueError: If nothing remains after normalization.
    """
    v_clean = v.strip().rstrip("/")
    if not v_clean:
      raise ValueError("Path options must not be empty.")
    return v_clean

  @field_validator("root_sources", mode="before")
  @classmethod
  def validate_sources(cls, v: Any) -> List[str]:
    if isinstance(v, str):
      v = v.split(",")
    cleaned = [str(s).strip() for s in v if s and str(s).strip()]
    if not cleaned:
      raise ValueError("At least one root source is required.")
    return cleaned

  @classmethod
  def load(
    cls,
    verbose: Optional[bool] = None,
    overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "AutoImportConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Args:
        verbose (Optional[bool]): Override for verbose logging.
        overrides (Optional[Dict]): Additional option values (e.g. from ``--config``).
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        AutoImportConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    merged: Dict[str, Any] = dict(toml_config)
    if overrides:
      merged.update(overrides)
    if verbose is not None:
      merged["verbose"] = verbose

    known = set(cls.model_fields)
    return cls(**{k: v for k, v in merged.items() if k in known})


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Booleans are inferred; comma separated values become lists; everything else
  stays a string.

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config: Dict[str, Any] = {}
  for item in items:
    if "=" not in item:
      print(f"⚠️  Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str
    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    elif "," in val_str:
      final_val = [part.strip() for part in val_str.split(",") if part.strip()]

    config[key] = final_val

  return config
