"""
Tests for ambiguous term detection.
"""

from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fixguard.core.ambiguity import detect_ambiguity
from fixguard.core.base import AmbiguityType


class TestDetectAmbiguity:
    """Lookup of prose/technical terms."""

    def test_programming_language(self):
        """Language names are detected with their proper form."""
        info = detect_ambiguity("Rust programming")
        assert info is not None
        assert info.term == "rust"
        assert info.proper_form == "Rust"
        assert info.category == AmbiguityType.PROGRAMMING_LANGUAGE

    def test_product_name(self):
        """Software names are product names."""
        info = detect_ambiguity("open it in Microsoft Word")
        assert info.term == "word"
        assert info.category == AmbiguityType.PRODUCT_NAME

    def test_semver_term(self):
        """SemVer components are their own kind."""
        info = detect_ambiguity("bump the minor version")
        assert info.term == "minor"
        assert info.proper_form == "MINOR"
        assert info.category == AmbiguityType.SEMVER_TERM

    def test_punctuation_is_stripped(self):
        """Non-letter characters around a word do not hide it."""
        assert detect_ambiguity("(go)").term == "go"
        assert detect_ambiguity("Rust,").term == "rust"

    def test_first_match_wins(self):
        """The earliest ambiguous word in the text is reported."""
        assert detect_ambiguity("python and rust").term == "python"

    def test_no_match(self):
        """Ordinary text has no ambiguity."""
        assert detect_ambiguity("hello world") is None
        assert detect_ambiguity("") is None

    def test_substring_does_not_match(self):
        """Only whole words are looked up."""
        assert detect_ambiguity("rusty gopher") is None

    def test_to_dict(self):
        """Serializes the category as its string value."""
        data = detect_ambiguity("patch").to_dict()
        assert data == {
            'term': 'patch',
            'proper_form': 'PATCH',
            'reason': 'Could be verb/noun "patch" OR SemVer PATCH version',
            'category': 'semver-term',
        }
