"""
Main Entry Point for the domtify-autoimport CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `domtify_autoimport.cli.commands`.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from domtify_autoimport.__version__ import __version__
from domtify_autoimport.cli import commands
from domtify_autoimport.config import parse_cli_key_values


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="domtify-autoimport: add the domtify unit imports a module uses")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: TRANSFORM ---
  cmd_tr = subparsers.add_parser("transform", help="Insert missing domtify imports into a file or directory")
  cmd_tr.add_argument("path", type=Path, help="Input source file or directory")
  cmd_tr.add_argument("--out", type=Path, default=None, help="Output destination (file or dir)")
  cmd_tr.add_argument("--in-place", action="store_true", help="Rewrite input files instead of writing elsewhere")
  cmd_tr.add_argument(
    "--check",
    action="store_true",
    help="Exit with status 1 if any file would change; write nothing",
  )
  cmd_tr.add_argument("--verbose", action="store_true", default=None, help="Log detected usages and a summary")
  cmd_tr.add_argument(
    "--root",
    type=Path,
    default=None,
    help="Directory from which the domtify package is resolved (default: the input's directory)",
  )
  cmd_tr.add_argument(
    "--config",
    nargs="*",
    help="Option overrides in key=value format (e.g. methods_path=domtify/methods root_sources=domtify,dom)",
  )

  # --- Command: REGISTRY ---
  cmd_reg = subparsers.add_parser("registry", help="List the method and utility units of the installed library")
  cmd_reg.add_argument("--root", type=Path, default=None, help="Directory from which the package is resolved")
  cmd_reg.add_argument("--config", nargs="*", help="Option overrides in key=value format")

  args = parser.parse_args(argv)

  if args.command == "transform":
    overrides = parse_cli_key_values(args.config)
    return commands.handle_transform(
      args.path, args.out, args.in_place, args.check, args.verbose, args.root, overrides
    )

  elif args.command == "registry":
    overrides = parse_cli_key_values(args.config)
    return commands.handle_registry(args.root, overrides)

  return 1


if __name__ == "__main__":
  raise SystemExit(main())
