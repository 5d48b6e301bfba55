"""
Enumerations for domtify-autoimport.
"""

from enum import Enum


class UsageKind(str, Enum):
  """
  Which registry a detected name was matched against.
  """

  INSTANCE = "instance"
  UTILITY = "utility"


class CommentKind(str, Enum):
  """
  Comment flavours relevant to ignore directives.
  """

  BLOCK = "block"  # /* ... */
  LINE = "line"  # // ...
