"""
Tests for the per-category confidence calculators and tier classification.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fixguard.core.base import CorrectionCandidate, SafetyConfig, SignalWeights, Tier
from fixguard.core.confidence import (
    calculate_case_confidence,
    calculate_confidence,
    calculate_fixed_rule_confidence,
    calculate_wrap_confidence,
    clamp,
    classify_tier,
)


class TestCaseConfidence:
    """Case-normalization scoring."""

    def test_first_word_capitalization(self):
        """Capitalizing the first word of a heading is a safe change."""
        confidence, breakdown = calculate_case_confidence("hello world", "Hello world")
        assert confidence == 1.0
        assert breakdown['first_word_capitalization'] == pytest.approx(0.3)
        assert breakdown['case_changes_only'] == pytest.approx(0.2)
        assert breakdown['structural_changes'] == 0.0

    def test_identical_texts(self):
        """No change means nothing to score."""
        confidence, _ = calculate_case_confidence("Hello world", "Hello world")
        assert confidence == 0.0

    def test_empty_texts(self):
        """Empty input scores zero."""
        assert calculate_case_confidence("", "Hello")[0] == 0.0
        assert calculate_case_confidence("hello", "")[0] == 0.0

    def test_structural_change(self):
        """Adding words is penalized."""
        confidence, breakdown = calculate_case_confidence("hello world", "Hello World Again")
        assert breakdown['structural_changes'] == pytest.approx(-0.2)
        assert breakdown['case_changes_only'] == 0.0
        assert confidence == pytest.approx(0.6)

    def test_many_words_changed(self):
        """Rewriting most words is not a case change."""
        confidence, breakdown = calculate_case_confidence("foo bar baz", "Qux quux corge")
        assert breakdown['many_words_changed'] == pytest.approx(-0.3)
        assert breakdown['first_word_capitalization'] == 0.0
        assert confidence == pytest.approx(0.2)

    def test_technical_terms_boost(self):
        """Technical terms in the original support the change."""
        confidence, breakdown = calculate_case_confidence(
            "using the api and json", "Using the API and JSON"
        )
        assert breakdown['technical_terms'] == pytest.approx(0.2)
        assert confidence == 1.0

    def test_technical_terms_capped(self):
        """The technical-term boost stops at 0.3."""
        _, breakdown = calculate_case_confidence("api url html css", "Api url html css")
        assert breakdown['technical_terms'] == pytest.approx(0.3)

    def test_breakdown_keys(self):
        """Every signal is present in the breakdown."""
        _, breakdown = calculate_case_confidence("a b", "A b")
        assert set(breakdown) == {
            'base_confidence', 'first_word_capitalization', 'case_changes_only',
            'structural_changes', 'many_words_changed', 'technical_terms',
        }


class TestWrapConfidence:
    """Token-wrap scoring."""

    def test_file_path(self):
        """Paths with known extensions are clamped to full confidence."""
        confidence, breakdown = calculate_wrap_confidence("src/utils/helper.js")
        assert confidence == 1.0
        assert breakdown['file_path_pattern'] == pytest.approx(0.4)
        assert breakdown['command_pattern'] == pytest.approx(0.2)

    def test_common_word(self):
        """Common words collapse to zero."""
        confidence, breakdown = calculate_wrap_confidence("the")
        assert confidence == 0.0
        assert breakdown['natural_language_penalty'] == pytest.approx(-0.7)

    def test_empty(self):
        """Empty fragments score zero."""
        assert calculate_wrap_confidence("")[0] == 0.0

    def test_command_keyword(self):
        """A known CLI tool still pays the short-word penalty."""
        confidence, breakdown = calculate_wrap_confidence("npm")
        assert breakdown['command_pattern'] == pytest.approx(0.3)
        assert breakdown['natural_language_penalty'] == pytest.approx(-0.5)
        assert confidence == pytest.approx(0.3)

    def test_word_lists_do_not_score(self):
        """Default safe words such as https keep the plain formula."""
        confidence, breakdown = calculate_wrap_confidence("https")
        assert confidence == pytest.approx(0.5)
        assert sum(breakdown.values()) == pytest.approx(0.5)

    def test_context_is_used(self):
        """The surrounding line feeds the context adjustment."""
        _, breakdown = calculate_wrap_confidence("foo", "For example, use foo here")
        assert breakdown['context_adjustment'] == pytest.approx(-0.3)

    def test_breakdown_keys(self):
        """Every signal is present in the breakdown."""
        _, breakdown = calculate_wrap_confidence("rust")
        assert set(breakdown) == {
            'base_confidence', 'file_path_pattern', 'command_pattern',
            'natural_language_penalty', 'context_adjustment',
        }


class TestFixedRuleConfidence:
    """Constant-confidence categories."""

    def test_link_autolink(self):
        assert calculate_fixed_rule_confidence('link-autolink') == (0.9, {'base_confidence': 0.9})

    def test_symbol_replace(self):
        assert calculate_fixed_rule_confidence('symbol-replace') == (0.85, {'base_confidence': 0.85})

    def test_other_category_rejected(self):
        """Scored categories are not fixed rules."""
        with pytest.raises(ValueError):
            calculate_fixed_rule_confidence('token-wrap')

    def test_weights_override(self):
        """Fixed values come from the weights."""
        weights = SignalWeights(symbol_replace=0.6)
        assert calculate_fixed_rule_confidence('symbol-replace', weights)[0] == pytest.approx(0.6)


class TestCalculateConfidence:
    """Category dispatch."""

    def test_case_reason(self):
        result = calculate_confidence(CorrectionCandidate('case-normalize', 'hello world', 'Hello world'))
        assert result.confidence == 1.0
        assert result.reason == "Case normalization confidence: 1.00"

    def test_wrap_reason(self):
        result = calculate_confidence(CorrectionCandidate('token-wrap', 'rust'))
        assert result.confidence == pytest.approx(0.3)
        assert result.reason == "Token wrap confidence: 0.30"

    def test_link_reason(self):
        result = calculate_confidence(CorrectionCandidate('link-autolink', 'https://example.com'))
        assert result.reason == "Link autolink confidence: 0.90 (bare URL wrapping is safe)"

    def test_symbol_reason(self):
        result = calculate_confidence(CorrectionCandidate('symbol-replace', '&', 'and'))
        assert result.reason == "Symbol replacement confidence: 0.85 (simple substitution)"

    def test_unknown_category(self):
        """Unknown categories get a neutral score."""
        result = calculate_confidence(CorrectionCandidate('mystery', 'x'))
        assert result.confidence == 0.5
        assert result.reason == "Unknown correction category"

    def test_config_word_lists_ignored(self):
        """Safe and unsafe words are configuration only; the score is unchanged."""
        config = SafetyConfig(safe_words=('rust',), unsafe_words=('npm',))
        assert calculate_confidence(CorrectionCandidate('token-wrap', 'rust'), config).confidence == pytest.approx(0.3)
        assert calculate_confidence(CorrectionCandidate('token-wrap', 'npm'), config).confidence == pytest.approx(0.3)


class TestClassifyTier:
    """Threshold boundaries."""

    def test_boundaries(self):
        """Thresholds are inclusive lower bounds."""
        assert classify_tier(0.7) == Tier.APPLY
        assert classify_tier(0.69) == Tier.REVIEW
        assert classify_tier(0.3) == Tier.REVIEW
        assert classify_tier(0.29) == Tier.SKIP

    def test_extremes(self):
        assert classify_tier(1.0) == Tier.APPLY
        assert classify_tier(0.0) == Tier.SKIP

    def test_custom_thresholds(self):
        assert classify_tier(0.8, auto_fix_threshold=0.9, review_threshold=0.5) == Tier.REVIEW
        assert classify_tier(0.4, auto_fix_threshold=0.9, review_threshold=0.5) == Tier.SKIP


class TestClamp:
    """Score clamping."""

    def test_bounds(self):
        assert clamp(1.3) == 1.0
        assert clamp(-0.4) == 0.0

    def test_rounding(self):
        """Floating point noise is rounded away."""
        assert clamp(0.1 + 0.2) == 0.3
