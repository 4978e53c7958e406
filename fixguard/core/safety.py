"""
Autofix safety decisions.

evaluate_correction() turns a CorrectionCandidate into a Decision by running
the override lists, the confidence calculator for its category, the
ambiguity lookup and the tier classifier. build_safe_fix() wraps it for
calling rules: it reports the decision to the telemetry and review sinks and
returns the rule's fix only when the correction is applied.

Neither function raises for malformed candidates. Missing text becomes an
empty string, malformed context is dropped, and unknown categories get a
neutral score.
"""

from typing import Any, Dict, Mapping, Optional, Union

from .ambiguity import detect_ambiguity
from .base import (
    Category,
    CorrectionCandidate,
    DEFAULT_SAFETY_CONFIG,
    Decision,
    SafetyConfig,
    Tier,
)
from .confidence import calculate_confidence, clamp, classify_tier
from .logger import RuleLogger
from .signals import analyze_code_vs_prose

CandidateLike = Union[CorrectionCandidate, Mapping[str, Any]]


def _as_candidate(candidate: CandidateLike) -> CorrectionCandidate:
    if isinstance(candidate, CorrectionCandidate):
        return candidate
    if isinstance(candidate, Mapping):
        proposed = candidate.get('proposed', candidate.get('fixed'))
        return CorrectionCandidate(
            category=candidate.get('category'),
            original=candidate.get('original'),
            proposed=proposed,
            context=candidate.get('context'),
        )
    return CorrectionCandidate(category=None)


def _find_term(text: str, terms) -> Optional[str]:
    if not text:
        return None
    lowered = text.lower()
    for term in terms:
        if term.lower() in lowered:
            return term
    return None


def evaluate_correction(
    candidate: CandidateLike,
    config: SafetyConfig = DEFAULT_SAFETY_CONFIG
) -> Decision:
    """
    Decide whether a proposed correction should be applied.

    Order of evaluation:
    1. disabled config: confidence 1.0, apply
    2. never_flag term in the original: confidence 0, skip
    3. calculator for the category, then a 0.25 penalty for ambiguous terms
    4. always_review term in the original: review, confidence held just
       below auto_fix_threshold
    5. otherwise the tier follows the thresholds

    Args:
        candidate: CorrectionCandidate (or an equivalent mapping)
        config: SafetyConfig from resolve_safety_config()

    Returns:
        A new Decision; nothing is cached between calls

    Example:
        >>> decision = evaluate_correction(
        ...     CorrectionCandidate('case-normalize', 'hello world', 'Hello world'))
        >>> decision.tier
        <Tier.APPLY: 'apply'>
    """
    candidate = _as_candidate(candidate)
    log = RuleLogger(candidate.category or 'unknown')

    if not config.enabled:
        return Decision(
            confidence=1.0,
            tier=Tier.APPLY,
            breakdown={},
            reason="Safety checks disabled",
        )

    original = candidate.original

    never_term = _find_term(original, config.never_flag)
    if never_term is not None:
        log.debug(
            f"skip: {original!r} matched never_flag term {never_term!r}",
            file_path=candidate.file_path,
            line_number=candidate.line_number,
        )
        return Decision(
            confidence=0.0,
            tier=Tier.SKIP,
            breakdown={},
            reason=f'Term "{never_term}" is in never_flag list',
        )

    review_term = _find_term(original, config.always_review)

    scored = calculate_confidence(candidate, config)
    confidence = scored.confidence
    breakdown = dict(scored.breakdown)
    reason = scored.reason

    ambiguity = detect_ambiguity(original)
    if ambiguity is not None:
        penalty = config.weights.ambiguity_penalty
        confidence = clamp(confidence + penalty)
        breakdown['ambiguity_penalty'] = penalty
        reason += f" (ambiguous term: {ambiguity.term})"

    if review_term is not None:
        tier = Tier.REVIEW
        confidence = clamp(min(confidence, config.auto_fix_threshold - 0.01))
        reason = f'Term "{review_term}" is in always_review list'
        requires_review = True
    else:
        tier = classify_tier(confidence, config.auto_fix_threshold, config.review_threshold)
        requires_review = tier == Tier.REVIEW or (
            config.require_manual_review and tier != Tier.APPLY
        )

    suggested_fix = candidate.proposed if tier == Tier.REVIEW and candidate.proposed else None

    log.debug(
        f"{tier.value}: {original!r} confidence={confidence:.2f} ({reason})",
        file_path=candidate.file_path,
        line_number=candidate.line_number,
    )

    return Decision(
        confidence=confidence,
        tier=tier,
        breakdown=breakdown,
        reason=reason,
        ambiguity=ambiguity,
        suggested_fix=suggested_fix,
        requires_review=requires_review,
    )


def _telemetry_entry(candidate: CorrectionCandidate, decision: Decision) -> Dict[str, Any]:
    entry = {
        'category': candidate.category,
        'original': candidate.original,
        'proposed': candidate.proposed,
        'confidence': decision.confidence,
        'applied': decision.applied,
        'tier': decision.tier.value,
        'breakdown': dict(decision.breakdown),
    }
    if not decision.applied:
        entry['reason'] = decision.reason
    if decision.ambiguity is not None:
        entry['ambiguity'] = decision.ambiguity.to_dict()
    if candidate.file_path is not None:
        entry['file_path'] = candidate.file_path
    if candidate.line_number is not None:
        entry['line_number'] = candidate.line_number
    return entry


def _review_item(candidate: CorrectionCandidate, decision: Decision) -> Dict[str, Any]:
    item = {
        'file_path': candidate.file_path or 'unknown',
        'line_number': candidate.line_number or 0,
        'category': candidate.category,
        'original': candidate.original,
        'suggested': candidate.proposed,
        'confidence': decision.confidence,
        'breakdown': dict(decision.breakdown),
    }
    if decision.ambiguity is not None:
        item['ambiguity'] = decision.ambiguity.to_dict()
    if candidate.source_line:
        item['context'] = candidate.source_line
    return item


def build_safe_fix(
    candidate: CandidateLike,
    config: SafetyConfig = DEFAULT_SAFETY_CONFIG,
    fix: Any = None,
    telemetry=None,
    review_sink=None
) -> Optional[Dict[str, Any]]:
    """
    Return the rule's fix with safety metadata, or None if not applied.

    Every decision is recorded on the telemetry sink. Review-tier decisions
    are also queued on the review sink. A sink that raises is logged at
    WARNING and does not change the result.

    Args:
        candidate: CorrectionCandidate (or an equivalent mapping)
        config: SafetyConfig from resolve_safety_config()
        fix: Opaque fix payload from the calling rule (None: nothing to do)
        telemetry: Object with record(entry), e.g. AutofixTelemetry
        review_sink: Object with add_item(item), e.g. NeedsReviewQueue

    Returns:
        A copy of fix with a `_safety` block, or None. A payload that is not
        a mapping is returned as {"fix": payload, "_safety": ...}.
    """
    if fix is None:
        return None

    candidate = _as_candidate(candidate)
    decision = evaluate_correction(candidate, config)
    log = RuleLogger(candidate.category or 'unknown')

    if telemetry is not None:
        try:
            telemetry.record(_telemetry_entry(candidate, decision))
        except Exception as e:
            log.sink_failure(
                'telemetry', e, 'SNK-01',
                file_path=candidate.file_path,
                line_number=candidate.line_number,
            )

    if decision.tier == Tier.REVIEW and review_sink is not None:
        try:
            review_sink.add_item(_review_item(candidate, decision))
        except Exception as e:
            log.sink_failure(
                'review', e, 'SNK-02',
                file_path=candidate.file_path,
                line_number=candidate.line_number,
            )

    if not decision.applied:
        return None

    safety = {
        'confidence': decision.confidence,
        'reason': decision.reason,
        'tier': decision.tier.value,
        'category': candidate.category,
    }
    if decision.ambiguity is not None:
        safety['ambiguity'] = decision.ambiguity.to_dict()
    if candidate.category == Category.TOKEN_WRAP.value:
        safety['analysis'] = analyze_code_vs_prose(candidate.original, candidate.context).to_dict()

    if not isinstance(fix, Mapping):
        return {'fix': fix, '_safety': safety}
    return {**fix, '_safety': safety}
