"""
Tests for element ordering: visibility rank, ordinal text, stability.
"""

import pytest

pytestmark = pytest.mark.fast

from phpsorter.exceptions import ConfigError
from phpsorter.sorting import Element, ElementCategory, element_precedes, sort_elements, validate_visibility
from phpsorter.sorting.comparator import normalize_visibility


def prop(line, text, visibility=None):
    return Element(
        category=ElementCategory.PROPERTY,
        start_line=line,
        end_line=line,
        lines=(f"    {text}",),
        text=text,
        visibility_modifier=visibility,
    )


class TestElementPrecedes:
    """Tests for the pairwise comparator."""

    def test_visibility_rank_beats_text(self):
        """protected sorts before public although "protected" > "public"."""
        protected = prop(1, "protected $z;", "protected")
        public = prop(2, "public $a;", "public")
        assert element_precedes(protected, public, use_visibility=True)
        assert not element_precedes(public, protected, use_visibility=True)

    def test_text_only_without_visibility(self):
        protected = prop(1, "protected $z;", "protected")
        public = prop(2, "public $a;", "public")
        assert element_precedes(protected, public, use_visibility=False)

    def test_private_first(self):
        private = prop(1, "private $z;", "private")
        protected = prop(2, "protected $a;", "protected")
        assert element_precedes(private, protected, use_visibility=True)

    def test_default_visibility_applies_to_bare_members(self):
        bare = prop(1, "var $a;")
        private = prop(2, "private $b;", "private")
        protected = prop(3, "protected $c;", "protected")
        assert element_precedes(private, bare, True, default_visibility="public")
        assert element_precedes(bare, protected, True, default_visibility="private")

    def test_ordinal_comparison(self):
        """Uppercase letters sort before lowercase ones."""
        upper = prop(1, "public $Z;", "public")
        lower = prop(2, "public $a;", "public")
        assert element_precedes(upper, lower, use_visibility=True)

    def test_equal_elements_do_not_precede(self):
        a = prop(1, "public $a;", "public")
        b = prop(2, "public $a;", "public")
        assert not element_precedes(a, b, True)
        assert not element_precedes(b, a, True)


class TestSortElements:
    """Tests for the stable group sort."""

    def test_ties_keep_source_order(self):
        first = prop(1, "public $a;", "public")
        second = prop(2, "public $a;", "public")
        ordered = sort_elements([first, second], use_visibility=True)
        assert [e.start_line for e in ordered] == [1, 2]

    def test_visibility_then_text(self):
        elements = [
            prop(1, "public $b;", "public"),
            prop(2, "private $z;", "private"),
            prop(3, "public $a;", "public"),
            prop(4, "protected $m;", "protected"),
        ]
        ordered = sort_elements(elements, use_visibility=True)
        assert [e.text for e in ordered] == [
            "private $z;",
            "protected $m;",
            "public $a;",
            "public $b;",
        ]

    def test_input_not_mutated(self):
        elements = [prop(1, "public $b;", "public"), prop(2, "public $a;", "public")]
        sort_elements(elements, use_visibility=True)
        assert [e.text for e in elements] == ["public $b;", "public $a;"]


class TestVisibilityTokens:

    @pytest.mark.parametrize("token,expected", [
        ("public", "public"),
        ("PRIVATE", "private"),
        ("private(set)", "private"),
        ("var", "public"),
        ("readonly", None),
    ])
    def test_normalize_visibility(self, token, expected):
        assert normalize_visibility(token) == expected

    def test_validate_visibility_rejects_unknown(self):
        with pytest.raises(ConfigError):
            validate_visibility("internal")

    def test_validate_visibility_accepts_known(self):
        assert validate_visibility("protected") == "protected"
