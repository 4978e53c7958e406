"""
Sinks that receive autofix decisions from build_safe_fix().

Sinks are passed explicitly by the caller; there is no global instance.
"""

from .telemetry import TelemetrySink, AutofixTelemetry
from .review import ReviewSink, NeedsReviewQueue

__all__ = [
    'TelemetrySink',
    'AutofixTelemetry',
    'ReviewSink',
    'NeedsReviewQueue',
]
