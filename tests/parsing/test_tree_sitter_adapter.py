"""
Tests for the Tree-sitter Source Adapter.

Verifies the Babel-shaped output for the node variants the transform relies on.
"""

import pytest

from domtify_autoimport.core.estree import iter_child_nodes, node_span
from domtify_autoimport.errors import SourceParseError
from domtify_autoimport.parsing import language_for_path, parse_module


def first_stmt(code):
  return parse_module(code)["program"]["body"][0]


def test_file_shape():
  tree = parse_module("a;\nb;")
  assert tree["type"] == "File"
  assert tree["program"]["type"] == "Program"
  assert [s["type"] for s in tree["program"]["body"]] == ["ExpressionStatement", "ExpressionStatement"]
  assert tree["comments"] == []


def test_import_specifiers():
  stmt = first_stmt('import a, { b, c as e } from "lib";')
  assert stmt["type"] == "ImportDeclaration"
  assert stmt["source"] == {**stmt["source"], "type": "StringLiteral", "value": "lib"}
  assert [s["type"] for s in stmt["specifiers"]] == ["ImportDefaultSpecifier", "ImportSpecifier", "ImportSpecifier"]
  assert [s["local"]["name"] for s in stmt["specifiers"]] == ["a", "b", "e"]
  assert stmt["specifiers"][2]["imported"]["name"] == "c"


def test_namespace_and_side_effect_imports():
  ns = first_stmt('import * as d from "domtify";')
  assert ns["specifiers"][0]["type"] == "ImportNamespaceSpecifier"
  assert ns["specifiers"][0]["local"]["name"] == "d"

  bare = first_stmt("import 'domtify/methods/css';")
  assert bare["specifiers"] == []
  assert bare["source"]["value"] == "domtify/methods/css"


@pytest.mark.parametrize("keyword", ["const", "let", "var"])
def test_variable_declarations(keyword):
  stmt = first_stmt(f'{keyword} d = require("domtify");')
  assert stmt["type"] == "VariableDeclaration"
  assert stmt["kind"] == keyword

  decl = stmt["declarations"][0]
  assert decl["id"] == {**decl["id"], "type": "Identifier", "name": "d"}
  init = decl["init"]
  assert init["type"] == "CallExpression"
  assert init["callee"]["name"] == "require"
  assert [a["value"] for a in init["arguments"]] == ["domtify"]


def test_member_expression_forms():
  dot = first_stmt("a.b;")["expression"]
  assert dot["type"] == "MemberExpression"
  assert dot["computed"] is False
  assert dot["property"]["name"] == "b"

  sub = first_stmt('a["b"];')["expression"]
  assert sub["computed"] is True
  assert sub["property"]["value"] == "b"

  opt = first_stmt("a?.b;")["expression"]
  assert opt["type"] == "MemberExpression"
  assert opt["property"]["name"] == "b"


def test_parentheses_are_unwrapped():
  expr = first_stmt("(a.b);")["expression"]
  assert expr["type"] == "MemberExpression"


def test_string_escapes_are_decoded():
  value = first_stmt(r'f("a\x41B\u{43}\n\"q");')["expression"]["arguments"][0]["value"]
  assert value == 'aABC\n"q'


def test_tagged_template():
  expr = first_stmt("css`color: red`;")["expression"]
  assert expr["type"] == "TaggedTemplateExpression"
  assert expr["tag"]["name"] == "css"


def test_comments_are_collected_in_order():
  tree = parse_module("/* one */\nfunction f() {\n  // two\n  return 1; /* three */\n}")
  comments = tree["comments"]
  assert [c["type"] for c in comments] == ["CommentBlock", "CommentLine", "CommentBlock"]
  assert [c["value"] for c in comments] == [" one ", " two", " three "]
  assert len(tree["program"]["body"]) == 1


def test_offsets_are_utf8_bytes():
  code = 'const s = "é";\nx.css();'
  second = parse_module(code)["program"]["body"][1]
  start, end = node_span(second)
  assert code.encode("utf-8")[start:end] == b"x.css();"
  assert second["loc"]["start"] == {"line": 2, "column": 0}


def test_unknown_constructs_stay_walkable():
  stmt = first_stmt("if (ok) { el.css(); }")
  assert stmt["type"] == "if_statement"

  stack, types = [stmt], set()
  while stack:
    node = stack.pop()
    types.add(node["type"])
    stack.extend(iter_child_nodes(node))
  assert "MemberExpression" in types


def test_syntax_error_raises():
  with pytest.raises(SourceParseError, match="line 2"):
    parse_module("ok();\nconst = ;")


def test_syntax_error_is_value_error():
  with pytest.raises(ValueError):
    parse_module("import {")


def test_hashbang_becomes_interpreter():
  program = parse_module('#!/usr/bin/env node\nconst d = require("domtify");')["program"]
  assert program["interpreter"]["type"] == "InterpreterDirective"
  assert program["interpreter"]["value"] == "/usr/bin/env node"
  assert [s["type"] for s in program["body"]] == ["VariableDeclaration"]


def test_leading_strings_become_directives():
  program = parse_module('"use strict";\n\'use client\';\nrun();\n"not a directive";')["program"]
  assert [d["type"] for d in program["directives"]] == ["Directive", "Directive"]
  assert [d["value"]["value"] for d in program["directives"]] == ["use strict", "use client"]
  assert [s["type"] for s in program["body"]] == ["ExpressionStatement", "ExpressionStatement"]


def test_plain_program_has_no_prologue():
  program = parse_module("run();")["program"]
  assert program["interpreter"] is None
  assert program["directives"] == []


@pytest.mark.parametrize(
  "filename, expected",
  [
    ("src/app.js", "javascript"),
    ("src/app.jsx", "javascript"),
    ("src/app.mjs", "javascript"),
    ("src/app.ts", "typescript"),
    ("src/app.MTS", "typescript"),
    ("src/view.tsx", "tsx"),
    ("<input>", "javascript"),
  ],
)
def test_language_for_path(filename, expected):
  assert language_for_path(filename) == expected


def test_typescript_annotations_are_walkable():
  tree = parse_module('import d from "domtify";\nlet x: number = d(el).css("top") as number;', language="typescript")
  stmt = tree["program"]["body"][1]
  assert stmt["type"] == "VariableDeclaration"
  assert stmt["kind"] == "let"
  assert stmt["declarations"][0]["id"]["name"] == "x"

  stack, names = [stmt], set()
  while stack:
    node = stack.pop()
    if node["type"] == "MemberExpression":
      names.add(node["property"]["name"])
    stack.extend(iter_child_nodes(node))
  assert names == {"css"}


def test_tsx_parses_jsx_with_type_syntax():
  code = 'const el: Element = <div className="a" />;\nd(el).css();'
  body = parse_module(code, language="tsx")["program"]["body"]
  assert [s["type"] for s in body] == ["VariableDeclaration", "ExpressionStatement"]


def test_typescript_syntax_rejected_by_javascript_grammar():
  with pytest.raises(SourceParseError):
    parse_module("let x: number = 1;")


def test_unknown_language_raises():
  with pytest.raises(ValueError, match="cobol"):
    parse_module("a;", language="cobol")
