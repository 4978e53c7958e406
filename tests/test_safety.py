"""
Tests for autofix safety decisions and fix materialization.

Covers:
- Reference decisions for typical corrections
- Override lists (never_flag, always_review)
- Ambiguity penalty
- Malformed candidates
- Sink reporting and sink failures
"""

import logging
import pytest
from pathlib import Path
from unittest.mock import MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fixguard.core.base import CorrectionCandidate, SafetyConfig, Tier
from fixguard.core.confidence import calculate_wrap_confidence
from fixguard.core.safety import build_safe_fix, evaluate_correction
from fixguard.sinks import AutofixTelemetry, NeedsReviewQueue


class TestReferenceDecisions:
    """Decisions for representative corrections under the default config."""

    def test_sentence_case_heading_applied(self):
        """Capitalizing a heading's first word is applied."""
        decision = evaluate_correction(
            CorrectionCandidate('case-normalize', 'hello world', 'Hello world')
        )
        assert decision.confidence == 1.0
        assert decision.tier == Tier.APPLY
        assert decision.applied
        assert decision.suggested_fix is None
        assert not decision.requires_review

    def test_common_word_wrap_skipped(self):
        """Wrapping a common English word is skipped."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'the'))
        assert decision.confidence == 0.0
        assert decision.tier == Tier.SKIP

    def test_file_path_wrap_applied(self):
        """Wrapping a file path is applied."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'src/utils/helper.js'))
        assert decision.confidence == 1.0
        assert decision.tier == Tier.APPLY

    def test_default_safe_word_reviewed(self):
        """Being on the default safe_words list does not lift a wrap to apply."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'https'))
        assert decision.confidence == pytest.approx(0.5)
        assert decision.tier == Tier.REVIEW
        assert 'safe_word_boost' not in decision.breakdown

    def test_short_safe_word_skipped(self):
        """'api' is scored as a short generic word: 0.5 - 0.5."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'api'))
        assert decision.confidence == 0.0
        assert decision.tier == Tier.SKIP

    def test_ambiguous_language_name_skipped(self):
        """A bare language name loses the ambiguity penalty and is skipped."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'rust'))
        wrap_score, _ = calculate_wrap_confidence('rust')
        assert decision.confidence == pytest.approx(wrap_score - 0.25)
        assert decision.confidence == pytest.approx(0.05)
        assert decision.tier == Tier.SKIP
        assert decision.ambiguity.term == 'rust'
        assert decision.reason.endswith("(ambiguous term: rust)")

    def test_never_flag_skipped(self):
        """never_flag terms are skipped outright."""
        config = SafetyConfig(never_flag=('localhost',))
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'localhost:3000'), config)
        assert decision.confidence == 0.0
        assert decision.tier == Tier.SKIP
        assert decision.reason == 'Term "localhost" is in never_flag list'
        assert dict(decision.breakdown) == {}

    def test_fixed_rules(self):
        """Fixed-rule categories apply at their constant confidence."""
        link = evaluate_correction(CorrectionCandidate('link-autolink', 'https://example.com'))
        symbol = evaluate_correction(CorrectionCandidate('symbol-replace', '&', 'and'))
        assert (link.confidence, link.tier) == (0.9, Tier.APPLY)
        assert (symbol.confidence, symbol.tier) == (0.85, Tier.APPLY)


class TestDecisionInvariants:
    """Properties every decision must hold."""

    CANDIDATES = [
        CorrectionCandidate('case-normalize', 'hello world', 'Hello world'),
        CorrectionCandidate('case-normalize', 'foo bar baz', 'Qux quux corge'),
        CorrectionCandidate('case-normalize', 'hello world', 'Hello World Again'),
        CorrectionCandidate('token-wrap', 'the'),
        CorrectionCandidate('token-wrap', 'npm install', context={'source_line': 'Run npm install first'}),
        CorrectionCandidate('token-wrap', 'getUserName'),
        CorrectionCandidate('token-wrap', 'rust'),
        CorrectionCandidate('link-autolink', 'https://example.com'),
        CorrectionCandidate('symbol-replace', '&', 'and'),
        CorrectionCandidate('mystery', 'x'),
    ]

    def test_confidence_bounded(self):
        """Confidence stays within [0, 1]."""
        for candidate in self.CANDIDATES:
            decision = evaluate_correction(candidate)
            assert 0.0 <= decision.confidence <= 1.0

    def test_deterministic(self):
        """Identical inputs give identical decisions."""
        for candidate in self.CANDIDATES:
            assert evaluate_correction(candidate) == evaluate_correction(candidate)

    def test_tier_follows_thresholds(self):
        """Without overrides the tier is a function of confidence."""
        config = SafetyConfig()
        for candidate in self.CANDIDATES:
            decision = evaluate_correction(candidate, config)
            if decision.confidence >= config.auto_fix_threshold:
                assert decision.tier == Tier.APPLY
            elif decision.confidence >= config.review_threshold:
                assert decision.tier == Tier.REVIEW
            else:
                assert decision.tier == Tier.SKIP

    def test_breakdown_is_read_only(self):
        """Breakdowns cannot be modified after the fact."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'rust'))
        with pytest.raises(TypeError):
            decision.breakdown['base_confidence'] = 1.0

    def test_no_op_candidate(self):
        """An unchanged case correction is skipped."""
        decision = evaluate_correction(
            CorrectionCandidate('case-normalize', 'Hello world', 'Hello world')
        )
        assert decision.confidence == 0.0
        assert decision.tier == Tier.SKIP


class TestOverrides:
    """Configuration switches and override lists."""

    def test_disabled(self):
        """Disabled safety applies everything."""
        decision = evaluate_correction(
            CorrectionCandidate('token-wrap', 'the'), SafetyConfig(enabled=False)
        )
        assert decision.confidence == 1.0
        assert decision.tier == Tier.APPLY
        assert decision.reason == "Safety checks disabled"

    def test_always_review_forces_review(self):
        """always_review holds confidence below the apply threshold."""
        config = SafetyConfig(always_review=('helper',))
        decision = evaluate_correction(
            CorrectionCandidate('token-wrap', 'src/utils/helper.js', '`src/utils/helper.js`'), config
        )
        assert decision.tier == Tier.REVIEW
        assert decision.confidence == pytest.approx(0.69)
        assert decision.requires_review
        assert decision.suggested_fix == '`src/utils/helper.js`'
        assert decision.reason == 'Term "helper" is in always_review list'

    def test_always_review_keeps_lower_confidence(self):
        """A score already below the apply threshold is not raised."""
        config = SafetyConfig(always_review=('foo',))
        decision = evaluate_correction(
            CorrectionCandidate('case-normalize', 'foo bar baz', 'Qux quux corge'), config
        )
        assert decision.tier == Tier.REVIEW
        assert decision.confidence == pytest.approx(0.2)

    def test_never_flag_wins_over_always_review(self):
        """never_flag is checked first."""
        config = SafetyConfig(always_review=('localhost',), never_flag=('localhost',))
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'localhost'), config)
        assert decision.tier == Tier.SKIP

    def test_override_match_is_case_insensitive(self):
        config = SafetyConfig(never_flag=('LocalHost',))
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'http://LOCALHOST'), config)
        assert decision.tier == Tier.SKIP

    def test_require_manual_review(self):
        """Manual review flags skipped decisions too."""
        candidate = CorrectionCandidate('case-normalize', 'foo bar baz', 'Qux quux corge')
        assert not evaluate_correction(candidate).requires_review

        decision = evaluate_correction(candidate, SafetyConfig(require_manual_review=True))
        assert decision.tier == Tier.SKIP
        assert decision.requires_review
        assert decision.suggested_fix is None

    def test_review_tier_suggests_fix(self):
        """Review decisions carry the proposed text."""
        decision = evaluate_correction(
            CorrectionCandidate('case-normalize', 'hello world', 'Hello World Again')
        )
        assert decision.tier == Tier.REVIEW
        assert decision.suggested_fix == 'Hello World Again'
        assert decision.requires_review


class TestAmbiguityPenalty:
    """Ambiguous terms lower confidence by a fixed amount."""

    def test_penalty_amount(self):
        """The penalty is exactly 0.25 when no clamping occurs."""
        plain = evaluate_correction(
            CorrectionCandidate('case-normalize', 'learn cats today', 'Learn cats today')
        )
        ambiguous = evaluate_correction(
            CorrectionCandidate('case-normalize', 'learn rust today', 'Learn rust today')
        )
        assert plain.confidence - ambiguous.confidence == pytest.approx(0.25)
        assert ambiguous.breakdown['ambiguity_penalty'] == pytest.approx(-0.25)
        assert ambiguous.tier == Tier.APPLY

    def test_penalty_clamps_at_zero(self):
        """The penalty never pushes confidence negative."""
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'go'))
        assert decision.confidence == 0.0

    def test_no_penalty_without_ambiguity(self):
        decision = evaluate_correction(CorrectionCandidate('token-wrap', 'getUserName'))
        assert decision.ambiguity is None
        assert 'ambiguity_penalty' not in decision.breakdown


class TestMalformedCandidates:
    """Malformed input is coerced, never raised."""

    def test_missing_text(self):
        decision = evaluate_correction(CorrectionCandidate('token-wrap', None, None))
        assert decision.confidence == 0.0
        assert decision.tier == Tier.SKIP

    def test_malformed_context_dropped(self):
        candidate = CorrectionCandidate('token-wrap', 'npm', context='not a context')
        assert candidate.context is None
        evaluate_correction(candidate)

    def test_wrongly_typed_context_fields(self):
        candidate = CorrectionCandidate(
            'token-wrap', 'npm', context={'source_line': 42, 'line_number': 'abc', 'file_path': 'a.md'}
        )
        assert candidate.source_line == ''
        assert candidate.line_number is None
        assert candidate.file_path == 'a.md'

    def test_mapping_candidate(self):
        """Plain dicts are accepted, including a 'fixed' key."""
        decision = evaluate_correction(
            {'category': 'case-normalize', 'original': 'hello world', 'fixed': 'Hello world'}
        )
        assert decision.tier == Tier.APPLY

    def test_not_a_candidate(self):
        """Anything else is scored as an unknown category."""
        decision = evaluate_correction(None)
        assert decision.confidence == 0.5
        assert decision.reason == "Unknown correction category"


class TestBuildSafeFix:
    """Fix materialization and sink reporting."""

    FIX = {'line_number': 3, 'edit_column': 1, 'delete_count': 11, 'insert_text': 'Hello world'}

    def test_applied_fix_gets_safety_block(self):
        telemetry = AutofixTelemetry()
        candidate = CorrectionCandidate('case-normalize', 'hello world', 'Hello world')

        fix = build_safe_fix(candidate, fix=self.FIX, telemetry=telemetry)

        assert fix['insert_text'] == 'Hello world'
        assert fix['_safety']['tier'] == 'apply'
        assert fix['_safety']['confidence'] == 1.0
        assert fix['_safety']['category'] == 'case-normalize'
        assert '_safety' not in self.FIX

        assert len(telemetry) == 1
        entry = telemetry.decisions[0]
        assert entry['applied'] is True
        assert 'reason' not in entry

    def test_token_wrap_includes_analysis(self):
        fix = build_safe_fix(
            CorrectionCandidate('token-wrap', 'package.json'), fix={'insert_text': '`package.json`'}
        )
        assert fix['_safety']['analysis']['is_likely_code'] is True

    def test_no_fix_payload(self):
        """Without a payload nothing is evaluated or reported."""
        telemetry = MagicMock()
        assert build_safe_fix(CorrectionCandidate('token-wrap', 'npm'), telemetry=telemetry) is None
        telemetry.record.assert_not_called()

    def test_non_mapping_fix_wrapped(self):
        """Opaque payloads are kept as-is under a 'fix' key."""
        candidate = CorrectionCandidate('case-normalize', 'hello world', 'Hello world')
        payload = ['not', 'a', 'mapping']
        fix = build_safe_fix(candidate, fix=payload)
        assert fix['fix'] is payload
        assert fix['_safety']['tier'] == 'apply'

    def test_non_mapping_fix_not_applied(self):
        telemetry = AutofixTelemetry()
        assert build_safe_fix(CorrectionCandidate('token-wrap', 'the'), fix="`the`", telemetry=telemetry) is None
        assert len(telemetry) == 1

    def test_review_decision_queued(self):
        telemetry = AutofixTelemetry()
        queue = NeedsReviewQueue()
        candidate = CorrectionCandidate('case-normalize', 'hello world', 'Hello World Again')

        fix = build_safe_fix(candidate, fix=self.FIX, telemetry=telemetry, review_sink=queue)

        assert fix is None
        assert len(queue) == 1
        item = queue.items[0]
        assert item['file_path'] == 'unknown'
        assert item['line_number'] == 0
        assert item['suggested'] == 'Hello World Again'
        assert telemetry.decisions[0]['reason'].startswith("Case normalization confidence")

    def test_review_item_carries_location_and_ambiguity(self):
        queue = NeedsReviewQueue()
        candidate = CorrectionCandidate(
            'case-normalize', 'hello rust', 'Hello Rust',
            context={'source_line': '## hello rust', 'file_path': 'docs/intro.md', 'line_number': 7},
        )

        build_safe_fix(candidate, SafetyConfig(auto_fix_threshold=0.8), fix=self.FIX, review_sink=queue)

        item = queue.items[0]
        assert item['file_path'] == 'docs/intro.md'
        assert item['line_number'] == 7
        assert item['context'] == '## hello rust'
        assert item['ambiguity']['term'] == 'rust'
        assert item['confidence'] == pytest.approx(0.75)

    def test_skipped_decision_not_queued(self):
        queue = MagicMock()
        telemetry = AutofixTelemetry()
        fix = build_safe_fix(
            CorrectionCandidate('token-wrap', 'the'), fix=self.FIX, telemetry=telemetry, review_sink=queue
        )
        assert fix is None
        queue.add_item.assert_not_called()
        assert telemetry.decisions[0]['tier'] == 'skip'

    def test_telemetry_failure_is_logged(self, caplog):
        """A failing telemetry sink does not change the result."""
        telemetry = MagicMock()
        telemetry.record.side_effect = RuntimeError("disk full")
        candidate = CorrectionCandidate('case-normalize', 'hello world', 'Hello world')

        with caplog.at_level(logging.WARNING, logger="fixguard"):
            fix = build_safe_fix(candidate, fix=self.FIX, telemetry=telemetry)

        assert fix is not None
        records = [r for r in caplog.records if getattr(r, 'error_code', None) == 'SNK-01']
        assert len(records) == 1
        assert "disk full" in records[0].getMessage()

    def test_review_sink_failure_is_logged(self, caplog):
        queue = MagicMock()
        queue.add_item.side_effect = ValueError("queue closed")
        candidate = CorrectionCandidate('case-normalize', 'hello world', 'Hello World Again')

        with caplog.at_level(logging.WARNING, logger="fixguard"):
            fix = build_safe_fix(candidate, fix=self.FIX, review_sink=queue)

        assert fix is None
        assert any(getattr(r, 'error_code', None) == 'SNK-02' for r in caplog.records)
