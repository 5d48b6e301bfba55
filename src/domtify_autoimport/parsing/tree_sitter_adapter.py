"""
Tree-sitter Source Adapter.

Parses JavaScript (JSX included), TypeScript and TSX with Tree-sitter and
lowers the concrete syntax tree to the Babel-shaped mapping tree the
transform consumes.

Only the node variants the transform inspects get a faithful ESTree shape:

- ``ImportDeclaration`` with default / namespace / named specifiers
- ``VariableDeclaration`` / ``VariableDeclarator``
- ``CallExpression``
- ``MemberExpression`` (dot, optional chaining and subscript forms)
- ``StringLiteral`` (escape sequences decoded)
- ``Identifier`` and ``ExpressionStatement``

Every other construct becomes a generic node tagged with its Tree-sitter type
and a ``children`` list, which keeps the whole tree walkable. Comments are
kept out of the tree and listed in ``File.comments`` in source order.

As in Babel, a leading ``#!`` line goes to ``Program.interpreter`` and the
directive prologue (``"use strict";``) to ``Program.directives``; neither is
part of ``Program.body``.

Offsets are byte offsets into the UTF-8 encoded source; lines and columns are
taken from Tree-sitter's points (1-based line, 0-based column).
"""

from pathlib import PurePath
from typing import Any, List, Optional, Tuple

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from domtify_autoimport.core.estree import Node
from domtify_autoimport.errors import SourceParseError

JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
TSX = "tsx"

_LANGUAGES = {
  JAVASCRIPT: tree_sitter.Language(tree_sitter_javascript.language()),
  TYPESCRIPT: tree_sitter.Language(tree_sitter_typescript.language_typescript()),
  TSX: tree_sitter.Language(tree_sitter_typescript.language_tsx()),
}

_SUFFIX_LANGUAGES = {
  ".ts": TYPESCRIPT,
  ".mts": TYPESCRIPT,
  ".cts": TYPESCRIPT,
  ".tsx": TSX,
}

# Tree-sitter types whose text is an identifier name
_IDENTIFIER_TYPES = {
  "identifier",
  "property_identifier",
  "shorthand_property_identifier",
  "shorthand_property_identifier_pattern",
  "statement_identifier",
}

_SIMPLE_ESCAPES = {
  "n": "\n",
  "t": "\t",
  "r": "\r",
  "b": "\b",
  "f": "\f",
  "v": "\v",
  "0": "\0",
}


def language_for_path(filename: str) -> str:
  """
  Picks the grammar for a file name by suffix.

  Args:
      filename: Path or identifier of the source.

  Returns:
      str: ``typescript`` for ``.ts``/``.mts``/``.cts``, ``tsx`` for ``.tsx``,
      ``javascript`` otherwise.
  """
  return _SUFFIX_LANGUAGES.get(PurePath(filename).suffix.lower(), JAVASCRIPT)


def parse_module(code: str, language: str = JAVASCRIPT) -> Node:
  """
  Parses source text into a ``File`` mapping tree.

  Args:
      code: The module's source text.
      language: ``javascript``, ``typescript`` or ``tsx``.

  Returns:
      Node: ``{"type": "File", "program": {...}, "comments": [...]}``.

  Raises:
      SourceParseError: If the source contains syntax errors.
      ValueError: If the language is unknown.
  """
  if language not in _LANGUAGES:
    raise ValueError(f"Unknown language '{language}'. Expected one of {sorted(_LANGUAGES)}")

  parser = tree_sitter.Parser(_LANGUAGES[language])
  tree = parser.parse(code.encode("utf-8"))
  root = tree.root_node

  if root.has_error:
    line, column = _first_error_point(root)
    raise SourceParseError(f"Syntax error near line {line}, column {column}")

  program = _lower_program(root)
  comments = [_lower_comment(c) for c in _iter_comments(root)]

  return {
    "type": "File",
    "program": program,
    "comments": comments,
    "start": root.start_byte,
    "end": root.end_byte,
  }


def _first_error_point(node: tree_sitter.Node) -> Tuple[int, int]:
  stack = [node]
  while stack:
    current = stack.pop()
    if current.type == "ERROR" or current.is_missing:
      return current.start_point[0] + 1, current.start_point[1] + 1
    stack.extend(reversed(current.children))
  return node.start_point[0] + 1, node.start_point[1] + 1


def _iter_comments(root: tree_sitter.Node) -> List[tree_sitter.Node]:
  found = []
  stack = [root]
  while stack:
    current = stack.pop()
    if current.type == "comment":
      found.append(current)
      continue
    stack.extend(reversed(current.children))
  return sorted(found, key=lambda c: c.start_byte)


def _text(node: tree_sitter.Node) -> str:
  return node.text.decode("utf-8") if node.text else ""


def _decode_escape(seq: str) -> str:
  """Decodes one JavaScript escape sequence (including the backslash)."""
  body = seq[1:]
  if not body:
    return ""
  head = body[0]
  if head in _SIMPLE_ESCAPES and len(body) == 1:
    return _SIMPLE_ESCAPES[head]
  if head == "x" and len(body) == 3:
    return chr(int(body[1:], 16))
  if head == "u":
    digits = body[2:-1] if body.startswith("u{") else body[1:]
    try:
      return chr(int(digits, 16))
    except ValueError:
      return body
  if head in "\r\n\u2028\u2029":
    # Line continuation
    return ""
  return body


def _make(node: tree_sitter.Node, node_kind: str, **fields: Any) -> Node:
  result: Node = {"type": node_kind}
  result.update(fields)
  result["start"] = node.start_byte
  result["end"] = node.end_byte
  result["loc"] = {
    "start": {"line": node.start_point[0] + 1, "column": node.start_point[1]},
    "end": {"line": node.end_point[0] + 1, "column": node.end_point[1]},
  }
  return result


def _named_children(node: tree_sitter.Node) -> List[tree_sitter.Node]:
  return [c for c in node.named_children if c.type != "comment"]


def _first_named(node: tree_sitter.Node, kind: str) -> Optional[tree_sitter.Node]:
  return next((c for c in _named_children(node) if c.type == kind), None)


def _lower_optional(node: Optional[tree_sitter.Node]) -> Optional[Node]:
  return _lower(node) if node is not None else None


def _lower(node: tree_sitter.Node) -> Node:
  handler = _HANDLERS.get(node.type)
  if handler is not None:
    return handler(node)
  if node.type in _IDENTIFIER_TYPES:
    return _make(node, "Identifier", name=_text(node))
  return _make(node, node.type, children=[_lower(c) for c in _named_children(node)])


def _lower_comment(node: tree_sitter.Node) -> Node:
  raw = _text(node)
  if raw.startswith("/*"):
    value = raw[2:-2] if raw.endswith("*/") else raw[2:]
    return _make(node, "CommentBlock", value=value)
  return _make(node, "CommentLine", value=raw[2:])


# --- Statements ---


def _lower_program(root: tree_sitter.Node) -> Node:
  interpreter: Optional[Node] = None
  directives: List[Node] = []
  body: List[Node] = []

  for child in _named_children(root):
    if child.type == "hash_bang_line":
      interpreter = _make(child, "InterpreterDirective", value=_text(child)[2:].rstrip("\r"))
    elif not body and _is_directive(child):
      directives.append(_lower_directive(child))
    else:
      body.append(_lower(child))

  return _make(root, "Program", interpreter=interpreter, directives=directives, body=body)


def _is_directive(node: tree_sitter.Node) -> bool:
  if node.type != "expression_statement":
    return False
  children = _named_children(node)
  return len(children) == 1 and children[0].type == "string"


def _lower_directive(node: tree_sitter.Node) -> Node:
  literal = _named_children(node)[0]
  # Babel keeps the raw text between the quotes
  value = _make(literal, "DirectiveLiteral", value=_text(literal)[1:-1])
  return _make(node, "Directive", value=value)


def _lower_import_statement(node: tree_sitter.Node) -> Node:
  clause = _first_named(node, "import_clause")
  source = node.child_by_field_name("source") or _first_named(node, "string")
  specifiers = _import_specifiers(clause) if clause is not None else []
  return _make(node, "ImportDeclaration", specifiers=specifiers, source=_lower_optional(source))


def _import_specifiers(clause: tree_sitter.Node) -> List[Node]:
  specs: List[Node] = []
  for child in _named_children(clause):
    if child.type == "identifier":
      specs.append(_make(child, "ImportDefaultSpecifier", local=_lower(child)))
    elif child.type == "namespace_import":
      ident = _first_named(child, "identifier")
      if ident is not None:
        specs.append(_make(child, "ImportNamespaceSpecifier", local=_lower(ident)))
    elif child.type == "named_imports":
      for spec in _named_children(child):
        if spec.type != "import_specifier":
          continue
        imported = spec.child_by_field_name("name")
        local = spec.child_by_field_name("alias") or imported
        specs.append(
          _make(spec, "ImportSpecifier", imported=_lower_optional(imported), local=_lower_optional(local))
        )
  return specs


def _lower_lexical_declaration(node: tree_sitter.Node) -> Node:
  kind_node = node.child_by_field_name("kind") or node.child(0)
  return _declaration(node, _text(kind_node) if kind_node is not None else "let")


def _lower_variable_declaration(node: tree_sitter.Node) -> Node:
  return _declaration(node, "var")


def _declaration(node: tree_sitter.Node, kind: str) -> Node:
  decls = [_lower(c) for c in _named_children(node) if c.type == "variable_declarator"]
  return _make(node, "VariableDeclaration", kind=kind, declarations=decls)


def _lower_variable_declarator(node: tree_sitter.Node) -> Node:
  return _make(
    node,
    "VariableDeclarator",
    id=_lower_optional(node.child_by_field_name("name")),
    init=_lower_optional(node.child_by_field_name("value")),
  )


def _lower_expression_statement(node: tree_sitter.Node) -> Node:
  children = _named_children(node)
  expression = _lower(children[0]) if children else None
  return _make(node, "ExpressionStatement", expression=expression)


# --- Expressions ---


def _lower_parenthesized_expression(node: tree_sitter.Node) -> Node:
  children = _named_children(node)
  if len(children) == 1:
    return _lower(children[0])
  return _make(node, node.type, children=[_lower(c) for c in children])


def _lower_call_expression(node: tree_sitter.Node) -> Node:
  callee = _lower_optional(node.child_by_field_name("function"))
  args_node = node.child_by_field_name("arguments")

  if args_node is not None and args_node.type == "arguments":
    arguments = [_lower(c) for c in _named_children(args_node)]
    return _make(node, "CallExpression", callee=callee, arguments=arguments)

  # tag`...`
  return _make(node, "TaggedTemplateExpression", tag=callee, quasi=_lower_optional(args_node))


def _lower_member_expression(node: tree_sitter.Node) -> Node:
  obj = _lower_optional(node.child_by_field_name("object"))
  prop = _lower_optional(node.child_by_field_name("property"))
  return _make(node, "MemberExpression", object=obj, property=prop, computed=False)


def _lower_subscript_expression(node: tree_sitter.Node) -> Node:
  obj = _lower_optional(node.child_by_field_name("object"))
  index = _lower_optional(node.child_by_field_name("index"))
  return _make(node, "MemberExpression", object=obj, property=index, computed=True)


def _lower_private_property_identifier(node: tree_sitter.Node) -> Node:
  return _make(node, "PrivateName", id=_make(node, "Identifier", name=_text(node).lstrip("#")))


def _lower_string(node: tree_sitter.Node) -> Node:
  parts = []
  for child in node.named_children:
    if child.type == "string_fragment":
      parts.append(_text(child))
    elif child.type == "escape_sequence":
      parts.append(_decode_escape(_text(child)))
  return _make(node, "StringLiteral", value="".join(parts))


_HANDLERS = {
  "import_statement": _lower_import_statement,
  "lexical_declaration": _lower_lexical_declaration,
  "variable_declaration": _lower_variable_declaration,
  "variable_declarator": _lower_variable_declarator,
  "expression_statement": _lower_expression_statement,
  "parenthesized_expression": _lower_parenthesized_expression,
  "call_expression": _lower_call_expression,
  "member_expression": _lower_member_expression,
  "subscript_expression": _lower_subscript_expression,
  "private_property_identifier": _lower_private_property_identifier,
  "string": _lower_string,
}
