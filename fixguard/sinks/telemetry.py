"""
Telemetry sink for autofix decisions.

build_safe_fix() records every decision, applied or not, so that the
heuristic weights can be tuned offline. AutofixTelemetry keeps decisions in
memory and derives statistics and tuning hints from them.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Mapping

# Confidence buckets used by statistics(); upper bounds are exclusive
DISTRIBUTION_BUCKETS = (
    ('0.0-0.3', 0.3),
    ('0.3-0.5', 0.5),
    ('0.5-0.7', 0.7),
    ('0.7-1.0', float('inf')),
)


class TelemetrySink(ABC):
    """Append-only receiver of decision entries."""

    @abstractmethod
    def record(self, entry: Mapping[str, Any]) -> None:
        """Record one decision entry. Must not raise for well-formed entries."""


def _empty_distribution() -> Dict[str, int]:
    return {label: 0 for label, _ in DISTRIBUTION_BUCKETS}


def _bucket(confidence: float) -> str:
    for label, upper in DISTRIBUTION_BUCKETS:
        if confidence < upper:
            return label
    return DISTRIBUTION_BUCKETS[-1][0]


class AutofixTelemetry(TelemetrySink):
    """
    In-memory telemetry collector.

    Args:
        enabled: When False, record() is a no-op
        verbose: Include individual decisions in the console summary
    """

    def __init__(self, enabled: bool = True, verbose: bool = False):
        self.enabled = enabled
        self.verbose = verbose
        self._decisions: List[Dict[str, Any]] = []
        self.started_at = datetime.now()

    def record(self, entry: Mapping[str, Any]) -> None:
        if not self.enabled:
            return
        self._decisions.append({**entry, 'timestamp': datetime.now().isoformat()})

    @property
    def decisions(self) -> List[Dict[str, Any]]:
        """Recorded entries, oldest first (a copy)."""
        return list(self._decisions)

    def __len__(self) -> int:
        return len(self._decisions)

    def statistics(self) -> Dict[str, Any]:
        """
        Aggregate statistics over all recorded decisions.

        Returns:
            {
                'total_decisions': int,
                'applied': int,
                'skipped': int,
                'average_confidence': float,
                'application_rate': float,
                'by_category': {category: {total_decisions, applied, skipped,
                                           average_confidence, application_rate}},
                'confidence_distribution': {'0.0-0.3': int, ...}
            }
        """
        total = len(self._decisions)
        distribution = _empty_distribution()

        if total == 0:
            return {
                'total_decisions': 0,
                'applied': 0,
                'skipped': 0,
                'average_confidence': 0.0,
                'application_rate': 0.0,
                'by_category': {},
                'confidence_distribution': distribution,
            }

        by_category: Dict[str, Dict[str, Any]] = {}
        confidences: Dict[str, List[float]] = {}

        for decision in self._decisions:
            category = decision.get('category', 'unknown')
            stats = by_category.setdefault(category, {
                'total_decisions': 0,
                'applied': 0,
                'skipped': 0,
                'average_confidence': 0.0,
                'application_rate': 0.0,
            })
            stats['total_decisions'] += 1
            if decision.get('applied'):
                stats['applied'] += 1
            else:
                stats['skipped'] += 1
            confidences.setdefault(category, []).append(decision.get('confidence', 0.0))
            distribution[_bucket(decision.get('confidence', 0.0))] += 1

        for category, stats in by_category.items():
            values = confidences[category]
            stats['average_confidence'] = sum(values) / len(values)
            stats['application_rate'] = stats['applied'] / stats['total_decisions']

        applied = sum(1 for d in self._decisions if d.get('applied'))

        return {
            'total_decisions': total,
            'applied': applied,
            'skipped': total - applied,
            'average_confidence': sum(d.get('confidence', 0.0) for d in self._decisions) / total,
            'application_rate': applied / total,
            'by_category': by_category,
            'confidence_distribution': distribution,
        }

    def insights(self, threshold: float = 0.5) -> Dict[str, Any]:
        """
        Derive tuning hints from recorded decisions.

        - A penalty signal is potentially aggressive when it appears in 3+
          skipped decisions with an average magnitude above 0.2.
        - A boost signal is potentially permissive when it appears in 3+
          applied decisions under 0.6 confidence with an average below 0.15.
        - Decisions within 0.05 of the threshold are counted; a suggestion is
          made when they are more than 30% of all decisions, or when they
          are mostly skipped or mostly applied.

        Args:
            threshold: Confidence threshold to analyze around

        Returns:
            {
                'potentially_aggressive_signals': [str],
                'potentially_permissive_signals': [str],
                'threshold_recommendations': {
                    'near_threshold_count': int,
                    'current_threshold': float,
                    'suggestion': str
                }
            }
        """
        result = {
            'potentially_aggressive_signals': [],
            'potentially_permissive_signals': [],
            'threshold_recommendations': {
                'near_threshold_count': 0,
                'current_threshold': threshold,
                'suggestion': '',
            },
        }

        if not self._decisions:
            return result

        penalties: Dict[str, List[float]] = {}
        for decision in self._decisions:
            if decision.get('applied') or not decision.get('breakdown'):
                continue
            for signal, value in decision['breakdown'].items():
                if value < 0:
                    penalties.setdefault(signal, []).append(abs(value))

        for signal, values in penalties.items():
            if len(values) >= 3 and sum(values) / len(values) > 0.2:
                result['potentially_aggressive_signals'].append(signal)

        boosts: Dict[str, List[float]] = {}
        for decision in self._decisions:
            if not decision.get('applied') or decision.get('confidence', 0.0) >= 0.6:
                continue
            for signal, value in (decision.get('breakdown') or {}).items():
                if value > 0:
                    boosts.setdefault(signal, []).append(value)

        for signal, values in boosts.items():
            if len(values) >= 3 and sum(values) / len(values) < 0.15:
                result['potentially_permissive_signals'].append(signal)

        near = [
            d for d in self._decisions
            if threshold - 0.05 <= d.get('confidence', 0.0) <= threshold + 0.05
        ]
        recommendations = result['threshold_recommendations']
        recommendations['near_threshold_count'] = len(near)

        if len(near) > len(self._decisions) * 0.3:
            recommendations['suggestion'] = (
                f"High concentration of decisions near threshold ({threshold}). "
                f"Consider adjusting signal weights for clearer separation."
            )
        elif near:
            rate = sum(1 for d in near if d.get('applied')) / len(near)
            if rate < 0.3:
                recommendations['suggestion'] = (
                    "Many decisions near threshold are being skipped. "
                    "Consider lowering threshold or reducing signal penalties."
                )
            elif rate > 0.7:
                recommendations['suggestion'] = (
                    "Many decisions near threshold are being applied. "
                    "Consider raising threshold or increasing signal penalties for safety."
                )

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Decisions, statistics, insights and timing, ready for json.dumps."""
        now = datetime.now()
        return {
            'decisions': self.decisions,
            'statistics': self.statistics(),
            'insights': self.insights(),
            'metadata': {
                'start_time': self.started_at.isoformat(),
                'end_time': now.isoformat(),
                'duration': (now - self.started_at).total_seconds(),
            },
        }

    def reset(self) -> None:
        self._decisions = []
        self.started_at = datetime.now()
