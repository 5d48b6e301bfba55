"""
Tests for the Source Emitter.

The emitter writes spanless body entries into the original text, leaving every
other byte unchanged.
"""

import pytest

from domtify_autoimport.core.estree import make_side_effect_import
from domtify_autoimport.parsing import parse_module, render_import, splice_imports


def with_body(tree, body):
  return {**tree, "program": {**tree["program"], "body": body}}


def test_render_import():
  assert render_import(make_side_effect_import("domtify/methods/css")) == 'import "domtify/methods/css";'
  assert render_import(make_side_effect_import('we"ird')) == 'import "we\\"ird";'


def test_render_rejects_other_nodes():
  with pytest.raises(ValueError):
    render_import({"type": "ExpressionStatement"})


def test_unchanged_tree_returns_same_text():
  code = "/* keep */ a();\n\n  b();  // trailing\n"
  assert splice_imports(code, parse_module(code)) == code


def test_insert_after_statement_keeps_formatting():
  code = "import d from 'domtify';\n\n\nd(x)   .css();\n"
  tree = parse_module(code)
  body = tree["program"]["body"]
  new = with_body(tree, [body[0], make_side_effect_import("domtify/methods/css"), body[1]])

  assert splice_imports(code, new) == (
    "import d from 'domtify';\nimport \"domtify/methods/css\";\n\n\nd(x)   .css();\n"
  )


def test_insert_into_leading_position():
  code = "// header\nrun();\n"
  tree = parse_module(code)
  new = with_body(tree, [make_side_effect_import("a"), make_side_effect_import("b"), *tree["program"]["body"]])

  assert splice_imports(code, new) == '// header\nimport "a";\nimport "b";\nrun();\n'


def test_insert_into_empty_program():
  code = ""
  tree = parse_module(code)
  new = with_body(tree, [make_side_effect_import("a")])
  assert splice_imports(code, new) == 'import "a";\n'


def test_multibyte_text_before_insertion_point():
  code = 'import d from "domtify"; // ünïcödé\nconst s = "€";\nd(s).css();\n'
  tree = parse_module(code)
  body = tree["program"]["body"]
  new = with_body(tree, [body[0], body[1], make_side_effect_import("x"), body[2]])

  assert splice_imports(code, new) == (
    'import d from "domtify"; // ünïcödé\nconst s = "€";\nimport "x";\nd(s).css();\n'
  )


def test_leading_insert_stays_below_hashbang():
  code = '#!/usr/bin/env node\nrun();\n'
  tree = parse_module(code)
  new = with_body(tree, [make_side_effect_import("a"), *tree["program"]["body"]])

  assert splice_imports(code, new) == '#!/usr/bin/env node\nimport "a";\nrun();\n'


def test_hashbang_only_file():
  code = "#!/usr/bin/env node\n"
  tree = parse_module(code)
  new = with_body(tree, [make_side_effect_import("a")])

  assert splice_imports(code, new) == '#!/usr/bin/env node\nimport "a";\n'


def test_leading_insert_stays_below_directives():
  code = "#!/usr/bin/env node\n'use strict';\n\"use client\";\n\nrun();\n"
  tree = parse_module(code)
  new = with_body(tree, [make_side_effect_import("a"), *tree["program"]["body"]])

  assert splice_imports(code, new) == (
    "#!/usr/bin/env node\n'use strict';\n\"use client\";\nimport \"a\";\n\nrun();\n"
  )
