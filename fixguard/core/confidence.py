"""
Confidence scoring model for autofix corrections.

One calculator per correction category composes a base confidence with the
signal extractors into a clamped score plus a breakdown of every
contribution. The tier classifier maps a score onto an action:
- apply: High confidence (>=70%) - correction applied automatically
- review: Medium confidence (30-70%) - correction queued for a reviewer
- skip: Low confidence (<30%) - correction discarded
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .base import (
    Category,
    CorrectionCandidate,
    DEFAULT_AUTO_FIX_THRESHOLD,
    DEFAULT_REVIEW_THRESHOLD,
    DEFAULT_SAFETY_CONFIG,
    DEFAULT_WEIGHTS,
    SafetyConfig,
    SignalWeights,
    Tier,
)
from .constants import TECHNICAL_TERM_PATTERN
from .signals import (
    ContextLike,
    command_signal,
    context_adjustment,
    file_path_signal,
    natural_language_penalty,
)

logger = logging.getLogger(__name__)

Breakdown = Dict[str, float]


@dataclass
class ConfidenceResult:
    """
    Score produced by one calculator.

    Attributes:
        confidence: Clamped score (0.0-1.0)
        breakdown: Signal name -> signed contribution
        reason: Human-readable summary naming the calculator
    """
    confidence: float
    breakdown: Breakdown = field(default_factory=dict)
    reason: str = ''


def clamp(value: float) -> float:
    """Clamp to [0, 1], rounding away floating point noise."""
    return round(max(0.0, min(1.0, value)), 6)


def calculate_case_confidence(
    original: str,
    proposed: str,
    weights: SignalWeights = DEFAULT_WEIGHTS
) -> Tuple[float, Breakdown]:
    """
    Score a case-normalization correction (e.g. a heading to sentence case).

    Scoring rules (from a 0.5 base):
    - first word capitalized as expected: +0.3
    - texts equal ignoring case: +0.2
    - word count differs: -0.2
    - more than half of the aligned words changed: -0.3
    - technical terms in the original: +0.1 each, at most +0.3

    Args:
        original: Text before correction
        proposed: Text after correction
        weights: SignalWeights to read contributions from

    Returns:
        (confidence, breakdown). Confidence is 0 when either text is empty
        or the texts are identical.

    Example:
        >>> calculate_case_confidence('hello world', 'Hello world')[0]
        1.0
    """
    breakdown = {
        'base_confidence': weights.base_confidence,
        'first_word_capitalization': 0.0,
        'case_changes_only': 0.0,
        'structural_changes': 0.0,
        'many_words_changed': 0.0,
        'technical_terms': 0.0,
    }

    if not original or not proposed or original == proposed:
        return 0.0, breakdown

    original_words = original.split()
    proposed_words = proposed.split()

    if original_words:
        first = original_words[0]
        expected_first = first[:1].upper() + first[1:].lower()
        if proposed.startswith(expected_first):
            breakdown['first_word_capitalization'] = weights.first_word_capitalization

    if original.lower() == proposed.lower():
        breakdown['case_changes_only'] = weights.case_changes_only

    if len(original_words) != len(proposed_words):
        breakdown['structural_changes'] = weights.structural_change

    changed = sum(
        1 for before, after in zip(original_words, proposed_words)
        if before.lower() != after.lower()
    )
    if changed > len(original_words) * 0.5:
        breakdown['many_words_changed'] = weights.many_words_changed

    technical_matches = len(TECHNICAL_TERM_PATTERN.findall(original))
    if technical_matches:
        breakdown['technical_terms'] = min(
            weights.technical_term * technical_matches,
            weights.technical_term_cap
        )

    return clamp(sum(breakdown.values())), breakdown


def calculate_wrap_confidence(
    original: str,
    context: ContextLike = None,
    weights: SignalWeights = DEFAULT_WEIGHTS
) -> Tuple[float, Breakdown]:
    """
    Score a token-wrap correction (wrapping a fragment in code markers).

    confidence = 0.5 + file path + command - prose penalty + line context

    Args:
        original: Fragment that would be wrapped
        context: CorrectionContext or the surrounding source line
        weights: SignalWeights to read contributions from

    Returns:
        (confidence, breakdown). Confidence is 0 for empty input.
    """
    breakdown = {
        'base_confidence': weights.base_confidence,
        'file_path_pattern': 0.0,
        'command_pattern': 0.0,
        'natural_language_penalty': 0.0,
        'context_adjustment': 0.0,
    }

    if not original:
        return 0.0, breakdown

    breakdown['file_path_pattern'] = file_path_signal(original, weights)
    breakdown['command_pattern'] = command_signal(original, weights)
    breakdown['natural_language_penalty'] = natural_language_penalty(original, weights)
    breakdown['context_adjustment'] = context_adjustment(original, context, weights)

    return clamp(sum(breakdown.values())), breakdown


def calculate_fixed_rule_confidence(
    category: str,
    weights: SignalWeights = DEFAULT_WEIGHTS
) -> Tuple[float, Breakdown]:
    """
    Return the constant confidence of a structurally safe correction kind.

    link-autolink scores 0.9 and symbol-replace 0.85; detection rules for
    these only fire on unambiguous syntax, so no text analysis is done.

    Raises:
        ValueError: If category is not a fixed-rule category
    """
    if category == Category.LINK_AUTOLINK.value:
        confidence = weights.link_autolink
    elif category == Category.SYMBOL_REPLACE.value:
        confidence = weights.symbol_replace
    else:
        raise ValueError(f"Not a fixed-rule category: {category!r}")

    confidence = clamp(confidence)
    return confidence, {'base_confidence': confidence}


def calculate_confidence(
    candidate: CorrectionCandidate,
    config: SafetyConfig = DEFAULT_SAFETY_CONFIG
) -> ConfidenceResult:
    """
    Dispatch a candidate to the calculator for its category.

    Unknown categories score a neutral 0.5 so that callers see them in the
    review tier rather than losing them silently.

    Args:
        candidate: CorrectionCandidate to score
        config: SafetyConfig supplying weights and word lists

    Returns:
        ConfidenceResult with confidence, breakdown and reason
    """
    weights = config.weights
    category = candidate.category

    if category == Category.CASE_NORMALIZE.value:
        confidence, breakdown = calculate_case_confidence(
            candidate.original, candidate.proposed, weights
        )
        reason = f"Case normalization confidence: {confidence:.2f}"

    elif category == Category.TOKEN_WRAP.value:
        confidence, breakdown = calculate_wrap_confidence(
            candidate.original, candidate.context, weights
        )
        reason = f"Token wrap confidence: {confidence:.2f}"

    elif category == Category.LINK_AUTOLINK.value:
        confidence, breakdown = calculate_fixed_rule_confidence(category, weights)
        reason = f"Link autolink confidence: {confidence:.2f} (bare URL wrapping is safe)"

    elif category == Category.SYMBOL_REPLACE.value:
        confidence, breakdown = calculate_fixed_rule_confidence(category, weights)
        reason = f"Symbol replacement confidence: {confidence:.2f} (simple substitution)"

    else:
        logger.debug("Unknown correction category %r, using neutral confidence", category)
        confidence = clamp(weights.unknown_category)
        breakdown = {'base_confidence': confidence}
        reason = "Unknown correction category"

    return ConfidenceResult(confidence=confidence, breakdown=breakdown, reason=reason)


def classify_tier(
    confidence: float,
    auto_fix_threshold: float = DEFAULT_AUTO_FIX_THRESHOLD,
    review_threshold: float = DEFAULT_REVIEW_THRESHOLD
) -> Tier:
    """
    Determine the tier for a confidence score.

    Args:
        confidence: Confidence score (0.0-1.0)
        auto_fix_threshold: Minimum score for the apply tier (default: 0.7)
        review_threshold: Minimum score for the review tier (default: 0.3)

    Returns:
        Tier.APPLY - correction applied automatically (high confidence)
        Tier.REVIEW - correction queued for review (medium confidence)
        Tier.SKIP - correction discarded (low confidence)

    Example:
        >>> classify_tier(0.85)
        <Tier.APPLY: 'apply'>
        >>> classify_tier(0.5)
        <Tier.REVIEW: 'review'>
        >>> classify_tier(0.1)
        <Tier.SKIP: 'skip'>
    """
    if confidence >= auto_fix_threshold:
        return Tier.APPLY
    elif confidence >= review_threshold:
        return Tier.REVIEW
    else:
        return Tier.SKIP
