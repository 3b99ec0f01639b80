# tests/unit/test_content_tree.py
"""
Unit tests for document sanitizing and text replacement.

Covers:
- sanitize_document copies values and shares revisited nodes
- apply_replacers runs replacers in order and marks cycles
- term replacers are literal and case-insensitive
- build_replacers applies approved terms before the query
"""

from brandswap.services.content_tree import (
    CIRCULAR_REFERENCE_MARKER,
    MISSING,
    apply_replacers,
    build_replacers,
    make_term_replacer,
    sanitize_document,
)
from brandswap.services.policy import PolicyRuleset


class _ClientObject:
    """Stand-in for an SDK object wrapping entry data."""

    def __init__(self):
        self.uid = "blt001"
        self.title = "Hello"
        self._connection = object()

    def save(self):
        return None


class TestSanitizeDocument:
    def test_scalars_unchanged(self):
        for value in ("text", 3, 2.5, True, None):
            assert sanitize_document(value) == value

    def test_copy_is_independent(self):
        original = {"a": [1, {"b": "c"}]}
        copy = sanitize_document(original)
        assert copy == original
        copy["a"][1]["b"] = "changed"
        assert original["a"][1]["b"] == "c"

    def test_drops_callables(self):
        doc = {"title": "x", "render": lambda: "x", "items": [1, print, 2]}
        assert sanitize_document(doc) == {"title": "x", "items": [1, 2]}

    def test_tuples_become_lists(self):
        assert sanitize_document({"tags": ("a", "b")}) == {"tags": ["a", "b"]}

    def test_object_public_attributes(self):
        assert sanitize_document(_ClientObject()) == {"uid": "blt001", "title": "Hello"}

    def test_cycle_becomes_shared_copy(self):
        doc = {"title": "loop"}
        doc["self"] = doc

        copy = sanitize_document(doc)
        assert copy["title"] == "loop"
        assert copy["self"] is copy
        assert copy is not doc

    def test_shared_subtree_stays_shared(self):
        shared = {"name": "x"}
        copy = sanitize_document({"a": shared, "b": shared})
        assert copy["a"] is copy["b"]


class TestApplyReplacers:
    def test_replacers_run_in_order(self):
        replacers = [lambda s: s + "1", lambda s: s + "2"]
        assert apply_replacers({"a": "x"}, replacers) == {"a": "x12"}

    def test_non_strings_pass_through(self):
        tree = {"n": 5, "f": 1.5, "b": False, "z": None, "s": "Everest"}
        result = apply_replacers(tree, [make_term_replacer("everest", "K2")])
        assert result == {"n": 5, "f": 1.5, "b": False, "z": None, "s": "K2"}

    def test_preserves_order_and_does_not_mutate(self):
        tree = {"b": ["Everest", "x"], "a": "Everest"}
        result = apply_replacers(tree, [make_term_replacer("Everest", "K2")])
        assert list(result.keys()) == ["b", "a"]
        assert result == {"b": ["K2", "x"], "a": "K2"}
        assert tree["a"] == "Everest"

    def test_cycle_replaced_with_marker(self):
        doc = {"title": "loop"}
        doc["self"] = doc

        result = apply_replacers(doc, [])
        assert result == {"title": "loop", "self": CIRCULAR_REFERENCE_MARKER}

    def test_list_cycle_replaced_with_marker(self):
        items = ["a"]
        items.append(items)
        assert apply_replacers(items, []) == ["a", CIRCULAR_REFERENCE_MARKER]


class TestTermReplacer:
    def test_case_insensitive_global(self):
        replacer = make_term_replacer("everest", "K2")
        assert replacer("Everest and EVEREST") == "K2 and K2"

    def test_special_characters_are_literal(self):
        replacer = make_term_replacer("a.b (c)", "x")
        assert replacer("a.b (c) and axb (c)") == "x and axb (c)"

    def test_replacement_inserted_verbatim(self):
        replacer = make_term_replacer("price", r"$1 \g<0>")
        assert replacer("price") == r"$1 \g<0>"

    def test_whole_word(self):
        replacer = make_term_replacer("cms", "CMS", whole_word=True)
        assert replacer("cms and cmsx") == "CMS and cmsx"

    def test_empty_term_is_identity(self):
        assert make_term_replacer("", "x")("unchanged") == "unchanged"


class TestBuildReplacers:
    def test_brand_terms_applied_before_query(self):
        ruleset = PolicyRuleset.from_dict({"approvedTerms": [{"term": "acme", "replaceWith": "ACME"}]})
        brand, query = build_replacers(ruleset, "ACME", "Globex")

        # The query replacer sees the brand-corrected text
        assert query(brand("acme rocks")) == "Globex rocks"

    def test_approved_terms_match_whole_words(self):
        ruleset = PolicyRuleset.from_dict({"approvedTerms": [{"term": "acme", "replaceWith": "ACME"}]})
        brand, _ = build_replacers(ruleset, "x", "y")
        assert brand("acme acmes") == "ACME acmes"


def test_missing_is_falsy_singleton():
    assert not MISSING
    assert MISSING is type(MISSING)()
    assert repr(MISSING) == "MISSING"
