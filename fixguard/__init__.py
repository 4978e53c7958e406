"""
fixguard - Autofix safety for documentation linters.

Scores proposed text corrections and sorts them into apply, review and skip
tiers so that linters only rewrite what they are confident about.
"""

from fixguard.core import (
    Category,
    Tier,
    CorrectionCandidate,
    CorrectionContext,
    Decision,
    SafetyConfig,
    evaluate_correction,
    build_safe_fix,
    resolve_safety_config,
    load_safety_config,
)
from fixguard.sinks import AutofixTelemetry, NeedsReviewQueue

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    # Data model
    "Category",
    "Tier",
    "CorrectionCandidate",
    "CorrectionContext",
    "Decision",
    "SafetyConfig",
    # Decisions
    "evaluate_correction",
    "build_safe_fix",
    # Configuration
    "resolve_safety_config",
    "load_safety_config",
    # Sinks
    "AutofixTelemetry",
    "NeedsReviewQueue",
    # Version info
    "__version__",
    "__license__",
]
