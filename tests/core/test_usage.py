"""
Tests for Usage Detection.

Verifies:
1. Member access (dot, optional and string-keyed computed) is matched by name.
2. Every string literal is matched, wherever it appears.
3. First-seen order and dual membership.
4. Ignore ranges exclude whole subtrees.
"""

from domtify_autoimport.core.ignore_ranges import collect_ignore_ranges
from domtify_autoimport.core.usage import UsageCollector
from domtify_autoimport.enums import UsageKind
from domtify_autoimport.parsing import parse_module


def collect(code, registry, ignore=True):
  tree = parse_module(code)
  ranges = collect_ignore_ranges(tree["comments"]).ranges if ignore else []
  return UsageCollector(registry, ranges).collect(tree["program"])


def test_dot_access_matches_instance_names(registry):
  usages = collect('d(".x").addClass("active").css("color", "red");', registry)
  # Outermost member access is visited first
  assert list(usages.used_instance_names) == ["css", "addClass"]


def test_chain_discovery_is_pre_order(registry):
  # Outer call first: .first is the outermost member access
  usages = collect("d(el).css(a).first();", registry)
  assert list(usages.used_instance_names) == ["first", "css"]


def test_optional_and_computed_access(registry):
  code = 'el?.toggleClass(); el["removeClass"](); el[key]();'
  usages = collect(code, registry)
  assert set(usages.used_instance_names) == {"toggleClass", "removeClass"}


def test_any_string_literal_counts(registry):
  code = 'const m = "addClass";\nconst cfg = { util: "noop" };\nel[m]();'
  usages = collect(code, registry)
  assert list(usages.used_instance_names) == ["addClass"]
  assert list(usages.used_utility_names) == ["noop"]


def test_utility_access_through_any_object(registry):
  usages = collect("d.isArray(x); lib.extend(a, b);", registry)
  assert list(usages.used_utility_names) == ["isArray", "extend"]
  assert not usages.used_instance_names


def test_name_in_both_registries_is_recorded_twice(registry):
  usages = collect("d(items).each(fn);", registry)
  assert "each" in usages.used_instance_names
  assert "each" in usages.used_utility_names
  kinds = {r.kind for r in usages.occurrences if r.name == "each"}
  assert kinds == {UsageKind.INSTANCE, UsageKind.UTILITY}


def test_first_detection_position_is_kept(registry):
  code = "a.css();\n\n  b.css();"
  usages = collect(code, registry)
  record = usages.used_instance_names["css"]
  assert (record.line, record.column) == (1, 1)
  assert len([r for r in usages.occurrences if r.name == "css"]) == 2


def test_unknown_names_are_ignored(registry):
  usages = collect('d(x).notAMethod(); const s = "hello";', registry)
  assert usages.is_empty


def test_ignore_region_excludes_contents(registry):
  code = "d(x).css();\n/* domtify-ignore-start */\nd(x).addClass();\n/* domtify-ignore-end */\nd(x).on();"
  usages = collect(code, registry)
  assert set(usages.used_instance_names) == {"css", "on"}


def test_partially_covered_node_is_still_walked(registry):
  code = "function f() {\n  /* domtify-ignore-start */\n  d(x).addClass();\n  /* domtify-ignore-end */\n  d(x).css();\n}"
  usages = collect(code, registry)
  assert set(usages.used_instance_names) == {"css"}


def test_callback_receives_every_detection(registry):
  seen = []
  tree = parse_module("a.css(); b.css();")
  UsageCollector(registry, on_usage=seen.append).collect(tree["program"])
  assert [r.name for r in seen] == ["css", "css"]
