"""
fixguard core - confidence scoring and tiered decisions for automated
text corrections.

Pure computation apart from logging; sinks and reports live alongside.
"""

from .base import (
    Category,
    Tier,
    AmbiguityType,
    CorrectionContext,
    CorrectionCandidate,
    AmbiguityInfo,
    Decision,
    SignalWeights,
    SafetyConfig,
    DEFAULT_SAFETY_CONFIG,
)
from .signals import (
    file_path_signal,
    command_signal,
    natural_language_penalty,
    context_adjustment,
    analyze_code_vs_prose,
    CodeAnalysis,
)
from .ambiguity import detect_ambiguity
from .confidence import (
    ConfidenceResult,
    calculate_case_confidence,
    calculate_wrap_confidence,
    calculate_fixed_rule_confidence,
    calculate_confidence,
    classify_tier,
)
from .safety import evaluate_correction, build_safe_fix
from .config_validator import (
    ConfigError,
    ConfigValidationError,
    ValidationError,
    ValidationResult,
    validate_threshold,
    validate_boolean,
    validate_string_list,
    validate_weight,
    validate_safety_config,
    resolve_safety_config,
    load_safety_config,
)
from .document_cache import DocumentCache
from .reporting import (
    generate_decision_console,
    generate_telemetry_console,
    generate_review_text,
    generate_review_json,
    save_report,
)

__all__ = [
    # Data model
    'Category',
    'Tier',
    'AmbiguityType',
    'CorrectionContext',
    'CorrectionCandidate',
    'AmbiguityInfo',
    'Decision',
    'SignalWeights',
    'SafetyConfig',
    'DEFAULT_SAFETY_CONFIG',

    # Signals
    'file_path_signal',
    'command_signal',
    'natural_language_penalty',
    'context_adjustment',
    'analyze_code_vs_prose',
    'CodeAnalysis',
    'detect_ambiguity',

    # Confidence
    'ConfidenceResult',
    'calculate_case_confidence',
    'calculate_wrap_confidence',
    'calculate_fixed_rule_confidence',
    'calculate_confidence',
    'classify_tier',

    # Decisions
    'evaluate_correction',
    'build_safe_fix',

    # Config Validation
    'ConfigError',
    'ConfigValidationError',
    'ValidationError',
    'ValidationResult',
    'validate_threshold',
    'validate_boolean',
    'validate_string_list',
    'validate_weight',
    'validate_safety_config',
    'resolve_safety_config',
    'load_safety_config',

    # Document cache
    'DocumentCache',

    # Reporting
    'generate_decision_console',
    'generate_telemetry_console',
    'generate_review_text',
    'generate_review_json',
    'save_report',
]
