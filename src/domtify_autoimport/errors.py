"""
Exception hierarchy for domtify-autoimport.

Only conditions that abort a whole-file transform are exceptions. Malformed
ignore directives are advisory and travel as plain messages instead.
"""


class AutoImportError(Exception):
  """Base class for fatal transform failures."""


class RegistryUnavailableError(AutoImportError):
  """
  The installed library's build output could not be resolved or listed.

  Raised before any tree is touched; no partial registry is ever produced.
  """


class SourceParseError(AutoImportError, ValueError):
  """The JavaScript source could not be parsed without syntax errors."""
