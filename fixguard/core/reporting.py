"""
Report generation for autofix decisions.

Provides:
- Console output for a single decision and for telemetry summaries
- Text and JSON reports of the review queue, with explicit APPLY/REJECT
  instructions for whoever (human or agent) works through it
- save_report() to write any of these atomically
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from .atomic_write import atomic_write
from .base import CorrectionCandidate, Decision
from .colors import bold, tier_label
from ..sinks.review import NeedsReviewQueue
from ..sinks.telemetry import AutofixTelemetry

MAX_VERBOSE_DECISIONS = 20


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def generate_decision_console(candidate: CorrectionCandidate, decision: Decision) -> str:
    """
    Format one decision for the terminal.

    Args:
        candidate: Evaluated candidate
        decision: Its Decision

    Returns:
        Multi-line string with tier, confidence, reason and breakdown
    """
    lines = [
        f"{bold('Decision:')} {tier_label(decision.tier.value)} "
        f"(confidence {decision.confidence:.2f})",
        f"Category: {candidate.category}",
        f"Original: \"{candidate.original}\"",
    ]
    if candidate.proposed:
        lines.append(f"Proposed: \"{candidate.proposed}\"")
    lines.append(f"Reason: {decision.reason}")

    if decision.ambiguity is not None:
        lines.append(f"Ambiguous term: {decision.ambiguity.term} ({decision.ambiguity.reason})")
    if decision.suggested_fix is not None:
        lines.append(f"Suggested fix: \"{decision.suggested_fix}\"")
    if decision.requires_review:
        lines.append("Requires review: yes")

    if decision.breakdown:
        lines.append("Breakdown:")
        for name, value in decision.breakdown.items():
            lines.append(f"  {name}: {value:+.2f}")

    return '\n'.join(lines)


def generate_telemetry_console(telemetry: AutofixTelemetry) -> str:
    """
    Summarize telemetry for the terminal.

    Includes totals, confidence distribution, per-category statistics and
    tuning insights. When telemetry.verbose is set, the first 20 decisions
    are listed individually.
    """
    stats = telemetry.statistics()
    insights = telemetry.insights()
    distribution = stats['confidence_distribution']

    lines = [
        "",
        "=== Autofix Telemetry Summary ===",
        "",
        f"Total decisions: {stats['total_decisions']}",
        f"Applied: {stats['applied']} ({stats['application_rate'] * 100:.1f}%)",
        f"Skipped: {stats['skipped']}",
        f"Average confidence: {stats['average_confidence']:.3f}",
        "",
        "Confidence distribution:",
        f"  0.0-0.3 (low):    {distribution['0.0-0.3']}",
        f"  0.3-0.5 (medium): {distribution['0.3-0.5']}",
        f"  0.5-0.7 (good):   {distribution['0.5-0.7']}",
        f"  0.7-1.0 (high):   {distribution['0.7-1.0']}",
        "",
        "Per-category statistics:",
    ]

    for category, category_stats in stats['by_category'].items():
        lines.append(f"  {category}:")
        lines.append(
            f"    Decisions: {category_stats['total_decisions']}, "
            f"Applied: {category_stats['applied']}, "
            f"Avg confidence: {category_stats['average_confidence']:.3f}"
        )

    if insights['potentially_aggressive_signals']:
        lines.append("")
        lines.append("Potentially aggressive signals (may be blocking valid fixes):")
        lines.extend(f"  - {signal}" for signal in insights['potentially_aggressive_signals'])

    if insights['potentially_permissive_signals']:
        lines.append("")
        lines.append("Potentially permissive signals (may be allowing questionable fixes):")
        lines.extend(f"  - {signal}" for signal in insights['potentially_permissive_signals'])

    suggestion = insights['threshold_recommendations']['suggestion']
    if suggestion:
        lines.append("")
        lines.append("Threshold recommendation:")
        lines.append(f"  {suggestion}")

    decisions = telemetry.decisions
    if telemetry.verbose and decisions:
        lines.append("")
        lines.append("=== Individual Decisions ===")
        for decision in decisions[:MAX_VERBOSE_DECISIONS]:
            location = "unknown"
            if decision.get('file_path'):
                location = f"{decision['file_path']}:{decision.get('line_number', 0)}"
            lines.append("")
            lines.append(f"[{decision.get('category')}] {location}")
            lines.append(f"  Original: \"{decision.get('original', '')}\"")
            if decision.get('proposed'):
                lines.append(f"  Proposed: \"{decision['proposed']}\"")
            lines.append(f"  Confidence: {decision.get('confidence', 0.0):.3f}")
            lines.append(f"  Applied: {decision.get('applied', False)}")
            if decision.get('reason'):
                lines.append(f"  Reason: {decision['reason']}")
            if decision.get('breakdown'):
                lines.append("  Breakdown:")
                for name, value in decision['breakdown'].items():
                    lines.append(f"    {name}: {value:.3f}")
        if len(decisions) > MAX_VERBOSE_DECISIONS:
            lines.append("")
            lines.append(f"... and {len(decisions) - MAX_VERBOSE_DECISIONS} more decisions")

    lines.append("")
    return '\n'.join(lines)


def generate_review_text(queue: NeedsReviewQueue) -> str:
    """
    Render the review queue for a human or agent reviewer.

    Format:
    === NEEDS REVIEW (N items) ===

    ACTION REQUIRED: ...

    {category} (N items):
      {file}:{line} - "{original}"
        -> Suggested: "{suggested}"
        -> Reason: {ambiguity reason}
        -> Context: {source line}
        -> Confidence: NN%
        -> Action: Read {file} around line {line}, then APPLY or REJECT
    """
    summary = queue.summary()
    total = summary['total_items']

    lines = ["", f"=== NEEDS REVIEW ({_plural(total, 'item')}) ==="]

    if total == 0:
        lines.append("")
        lines.append("No items require review.")
        lines.append("")
        return '\n'.join(lines)

    lines.extend([
        "",
        "ACTION REQUIRED: Review each item below and decide whether to:",
        "  1. APPLY the suggested fix (if the suggestion is correct)",
        "  2. REJECT the fix (if the original is correct, e.g., proper noun)",
        "",
        "For each item, read the surrounding context in the file to determine",
        "whether the term is a proper noun (keep as-is) or common noun (apply fix).",
        "",
    ])

    for category, items in queue.items_by_category().items():
        lines.append(f"{category} ({_plural(len(items), 'item')}):")
        for item in items:
            file_path = item.get('file_path', 'unknown')
            line_number = item.get('line_number', 0)
            lines.append(f"  {file_path}:{line_number} - \"{item.get('original', '')}\"")
            lines.append(f"    -> Suggested: \"{item.get('suggested', '')}\"")
            ambiguity = item.get('ambiguity') or {}
            if ambiguity.get('reason'):
                lines.append(f"    -> Reason: {ambiguity['reason']}")
            if item.get('context'):
                lines.append(f"    -> Context: {item['context']}")
            lines.append(f"    -> Confidence: {item.get('confidence', 0.0) * 100:.0f}%")
            lines.append(f"    -> Action: Read {file_path} around line {line_number}, then APPLY or REJECT")
            lines.append("")

    return '\n'.join(lines)


REVIEW_INSTRUCTIONS = {
    'description': (
        'Items below require manual review. The autofix system was not '
        'confident enough to apply these changes automatically.'
    ),
    'actions': [
        'For each item, read the surrounding context in the source file',
        'Determine if the suggested fix is appropriate based on context',
        'If APPLY: Edit the file to replace "original" with "suggested"',
        'If REJECT: The original text is correct (e.g., proper noun), no change needed',
    ],
    'decision_criteria': {
        'apply_fix': [
            'Term is used as a common noun (e.g., "a word about...")',
            'Term is used as a verb (e.g., "go to settings")',
            'Context clearly indicates generic/lowercase usage',
        ],
        'reject_fix': [
            'Term refers to a product/brand (e.g., Microsoft Word)',
            'Term refers to a programming language (e.g., Go, Swift, Rust)',
            'Term is part of a proper noun phrase',
            'Context indicates the capitalization is intentional',
        ],
    },
}


def generate_review_json(queue: NeedsReviewQueue) -> Dict[str, Any]:
    """
    Build the machine-readable review report.

    Structure:
    {
        "instructions": {...},
        "needs_review": [
            {
                "file_path": str, "line_number": int, "category": str,
                "original": str, "suggested": str, "confidence": float,
                "ambiguity_type": str|None, "term": str|None, "reason": str|None,
                "context": str|None, "breakdown": {str: float},
                "action": {"required": "REVIEW_AND_DECIDE",
                           "options": ["APPLY", "REJECT"],
                           "how_to_apply": str, "how_to_reject": str}
            }
        ],
        "summary": {...}
    }

    Returns:
        Dict suitable for JSON serialization
    """
    needs_review = []
    for item in queue.items:
        ambiguity = item.get('ambiguity') or {}
        file_path = item.get('file_path', 'unknown')
        line_number = item.get('line_number', 0)
        needs_review.append({
            'file_path': file_path,
            'line_number': line_number,
            'category': item.get('category'),
            'original': item.get('original', ''),
            'suggested': item.get('suggested', ''),
            'confidence': item.get('confidence', 0.0),
            'ambiguity_type': ambiguity.get('category'),
            'term': ambiguity.get('term'),
            'reason': ambiguity.get('reason'),
            'context': item.get('context'),
            'breakdown': item.get('breakdown', {}),
            'action': {
                'required': 'REVIEW_AND_DECIDE',
                'options': ['APPLY', 'REJECT'],
                'how_to_apply': (
                    f"In {file_path}, line {line_number}: replace "
                    f"\"{item.get('original', '')}\" with \"{item.get('suggested', '')}\""
                ),
                'how_to_reject': 'No file changes needed; original text is correct',
            },
        })

    return {
        'instructions': REVIEW_INSTRUCTIONS,
        'needs_review': needs_review,
        'summary': queue.summary(),
    }


def save_report(output_path: Path, content: Union[str, Dict[str, Any]]) -> Path:
    """
    Save a report to disk atomically.

    Args:
        output_path: Destination file
        content: Text report, or a dict written as indented JSON

    Returns:
        The path written

    Example:
        >>> save_report(Path("reports/review.json"), generate_review_json(queue))
    """
    if not isinstance(content, str):
        content = json.dumps(content, indent=2)
    return atomic_write(Path(output_path), content)
