"""
Configuration validation for the autofix safety engine.

Validation never aborts evaluation: every invalid field is reported as a
structured ValidationError record and the default is used in its place.

Usage:
    config, result = resolve_safety_config({'autoFixThreshold': 0.8})
    result.log_errors()

    config, result = load_safety_config(Path('.fixguard.yaml'))
    result.raise_if_invalid()
"""

import json
import logging
import math
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from .base import (
    DEFAULT_SAFETY_CONFIG,
    DEFAULT_WEIGHTS,
    SafetyConfig,
    SignalWeights,
)

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB max config file size
MAX_LIST_SIZE = 10000             # Max terms in any word list

# camelCase spellings used by markdown-lint style configs
KEY_ALIASES = {
    'autoFixThreshold': 'auto_fix_threshold',
    'confidenceThreshold': 'auto_fix_threshold',
    'reviewThreshold': 'review_threshold',
    'alwaysReview': 'always_review',
    'neverFlag': 'never_flag',
    'safeWords': 'safe_words',
    'unsafeWords': 'unsafe_words',
    'requireManualReview': 'require_manual_review',
}

BOOLEAN_OPTIONS = ('enabled', 'require_manual_review')
THRESHOLD_OPTIONS = ('auto_fix_threshold', 'review_threshold')
LIST_OPTIONS = ('always_review', 'never_flag', 'safe_words', 'unsafe_words')
KNOWN_OPTIONS = BOOLEAN_OPTIONS + THRESHOLD_OPTIONS + LIST_OPTIONS + ('weights',)

WEIGHT_NAMES = tuple(f.name for f in fields(SignalWeights))


class ConfigError(Exception):
    """Single-field configuration error with context."""

    def __init__(
        self,
        key: str,
        message: str,
        value: Any = None,
        expected: Optional[str] = None,
        error_code: str = "CFG-02"
    ):
        self.key = key
        self.message = message
        self.value = value
        self.expected = expected
        self.error_code = error_code
        full_message = f"Config error at '{key}': {message}"
        if value is not None:
            full_message += f" (got: {value!r})"
        if expected:
            full_message += f". Expected: {expected}"
        super().__init__(full_message)


@dataclass
class ValidationError:
    """Structured record for one invalid configuration field."""
    field: str
    message: str
    value: Any = None
    expected: Optional[str] = None
    error_code: str = "CFG-02"

    @classmethod
    def from_exception(cls, error: ConfigError) -> 'ValidationError':
        return cls(
            field=error.key,
            message=error.message,
            value=error.value,
            expected=error.expected,
            error_code=error.error_code,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'field': self.field,
            'message': self.message,
            'value': self.value,
            'expected': self.expected,
        }

    def __str__(self) -> str:
        text = f"[{self.field}] {self.message}"
        if self.value is not None:
            text += f" (got: {self.value!r})"
        if self.expected:
            text += f". Expected: {self.expected}"
        return text


class ConfigValidationError(Exception):
    """
    Raised when configuration validation fails with multiple errors.

    Use this exception when aggregating validation errors.
    """

    def __init__(self, errors: List[ValidationError], warnings: List[str] = None):
        self.errors = errors
        self.warnings = warnings or []
        message = f"Configuration validation failed with {len(errors)} error(s):\n"
        message += "\n".join(f"  - {err}" for err in errors[:20])
        if len(errors) > 20:
            message += f"\n  ... and {len(errors) - 20} more errors"
        super().__init__(message)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    validated_config: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.is_valid

    def add_error(self, error: ValidationError):
        self.errors.append(error)
        self.is_valid = False

    def raise_if_invalid(self) -> 'ValidationResult':
        """Raise ConfigValidationError if validation failed."""
        if not self.is_valid:
            raise ConfigValidationError(self.errors, self.warnings)
        return self

    def log_errors(self, log: Optional[logging.Logger] = None) -> 'ValidationResult':
        """Log errors and warnings; invalid fields fall back to defaults."""
        log = log or logger
        for error in self.errors:
            log.warning(
                f"Config error (default used): {error}",
                extra={'error_code': error.error_code, 'operation': 'config'}
            )
        for warning in self.warnings:
            log.warning(f"Config warning: {warning}", extra={'operation': 'config'})
        return self


# =============================================================================
# SINGLE-FIELD VALIDATORS
# =============================================================================

def validate_threshold(
    value: Any,
    key_name: str,
    min_val: float = 0.0,
    max_val: float = 1.0
) -> float:
    """
    Validate a numeric threshold is within range.

    Args:
        value: Value to validate
        key_name: Config key name for error messages
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Validated float value

    Raises:
        ConfigError: If value is invalid or out of range
    """
    expected = f"number between {min_val} and {max_val}"

    if value is None:
        raise ConfigError(key_name, "Value is null/None", None, expected)

    # Quoted numbers are a common YAML/TOML mistake
    if isinstance(value, str):
        raise ConfigError(key_name, "Must be a number, got string", value, expected)

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            key_name,
            f"Must be numeric, got {type(value).__name__}",
            value,
            expected
        )

    if isinstance(value, float):
        if math.isnan(value):
            raise ConfigError(key_name, "Value is NaN (Not a Number)", "NaN", expected)
        if math.isinf(value):
            raise ConfigError(key_name, "Value is infinite", "Infinity", expected)

    if value < min_val:
        raise ConfigError(
            key_name,
            f"Value too low (minimum is {min_val})",
            value,
            expected,
            error_code="CFG-03"
        )

    if value > max_val:
        raise ConfigError(
            key_name,
            f"Value too high (maximum is {max_val})",
            value,
            expected,
            error_code="CFG-03"
        )

    return float(value)


def validate_weight(value: Any, key_name: str) -> float:
    """Validate one signal weight (a signed contribution in [-1, 1])."""
    return validate_threshold(value, key_name, min_val=-1.0, max_val=1.0)


def validate_boolean(value: Any, key_name: str) -> bool:
    """
    Validate a boolean option.

    Raises:
        ConfigError: If value is not a bool (strings like "true" are rejected)
    """
    if not isinstance(value, bool):
        raise ConfigError(
            key_name,
            f"Must be a boolean, got {type(value).__name__}",
            value,
            "true or false"
        )
    return value


def validate_string_list(value: Any, key_name: str) -> Tuple[str, ...]:
    """
    Validate a list of non-empty strings.

    A bare string is rejected rather than iterated character by character.

    Args:
        value: Value to validate
        key_name: Config key name for error messages

    Returns:
        Tuple of validated strings

    Raises:
        ConfigError: If value is not a list or contains a bad entry
    """
    expected = "list of non-empty strings"

    if isinstance(value, str):
        raise ConfigError(key_name, "Expected a list, got a string", value, expected)

    if not isinstance(value, (list, tuple)):
        raise ConfigError(
            key_name,
            f"Expected a list, got {type(value).__name__}",
            value,
            expected
        )

    if len(value) > MAX_LIST_SIZE:
        raise ConfigError(
            key_name,
            f"List has {len(value)} items, exceeds limit of {MAX_LIST_SIZE}",
            f"[{len(value)} items]",
            expected,
            error_code="CFG-03"
        )

    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(
                f"{key_name}[{index}]",
                f"Must be a string, got {type(item).__name__}",
                item,
                expected
            )
        if not item.strip():
            raise ConfigError(
                f"{key_name}[{index}]",
                "Must not be empty or whitespace",
                item,
                expected,
                error_code="CFG-03"
            )

    return tuple(value)


def validate_weights(value: Any, key_name: str = 'weights') -> Tuple[Dict[str, float], List[ValidationError]]:
    """
    Validate a partial mapping of signal weights.

    Each weight is checked independently so one bad entry does not discard
    the others.

    Returns:
        (valid_weights, errors)
    """
    if not isinstance(value, Mapping):
        error = ConfigError(
            key_name,
            f"Expected a mapping, got {type(value).__name__}",
            value,
            "mapping of weight name to number"
        )
        return {}, [ValidationError.from_exception(error)]

    valid: Dict[str, float] = {}
    errors: List[ValidationError] = []

    for name, weight in value.items():
        weight_key = f"{key_name}.{name}"
        if name not in WEIGHT_NAMES:
            errors.append(ValidationError(
                field=weight_key,
                message="Unknown signal weight",
                value=weight,
                expected=f"one of: {', '.join(WEIGHT_NAMES)}",
                error_code="CFG-01",
            ))
            continue
        try:
            valid[name] = validate_weight(weight, weight_key)
        except ConfigError as e:
            errors.append(ValidationError.from_exception(e))

    return valid, errors


# =============================================================================
# WHOLE-CONFIG VALIDATION AND MERGE
# =============================================================================

def _dedupe(terms: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    result = []
    for term in terms:
        key = term.lower()
        if key not in seen:
            seen.add(key)
            result.append(term)
    return tuple(result)


def _merged_words(validated: Mapping[str, Any], option: str) -> Tuple[str, ...]:
    return _dedupe(getattr(DEFAULT_SAFETY_CONFIG, option) + validated.get(option, ()))


def validate_safety_config(overrides: Any) -> ValidationResult:
    """
    Validate user overrides for SafetyConfig.

    Checks:
    - unknown options (CFG-01)
    - option types (CFG-02) and ranges (CFG-03)
    - review_threshold <= auto_fix_threshold (CFG-04); both thresholds are
      dropped when violated
    - terms in both always_review and never_flag (CFG-05); the term is
      dropped from always_review
    - words in both safe_words and unsafe_words after merging with the
      defaults (CFG-07); the word is dropped from safe_words

    Args:
        overrides: Mapping of option name (snake_case or camelCase) to value

    Returns:
        ValidationResult whose validated_config holds only the valid fields,
        keyed by canonical option name
    """
    result = ValidationResult(is_valid=True)

    if overrides is None:
        return result

    if not isinstance(overrides, Mapping):
        result.add_error(ValidationError(
            field='config',
            message=f"Config must be a mapping, got {type(overrides).__name__}",
            value=overrides,
            expected="mapping of option name to value",
        ))
        return result

    validated = result.validated_config

    for key, value in overrides.items():
        option = KEY_ALIASES.get(key, key)

        if option not in KNOWN_OPTIONS:
            result.add_error(ValidationError(
                field=str(key),
                message="Unknown option",
                value=value,
                expected=f"one of: {', '.join(KNOWN_OPTIONS)}",
                error_code="CFG-01",
            ))
            continue

        if option in validated:
            result.warnings.append(f"Option '{option}' given more than once; last value wins")

        if option == 'weights':
            weights, errors = validate_weights(value, str(key))
            for error in errors:
                result.add_error(error)
            if weights:
                validated['weights'] = weights
            continue

        try:
            if option in BOOLEAN_OPTIONS:
                validated[option] = validate_boolean(value, str(key))
            elif option in THRESHOLD_OPTIONS:
                validated[option] = validate_threshold(value, str(key))
            else:
                validated[option] = validate_string_list(value, str(key))
        except ConfigError as e:
            result.add_error(ValidationError.from_exception(e))
            validated.pop(option, None)

    auto_fix = validated.get('auto_fix_threshold', DEFAULT_SAFETY_CONFIG.auto_fix_threshold)
    review = validated.get('review_threshold', DEFAULT_SAFETY_CONFIG.review_threshold)
    if review > auto_fix:
        result.add_error(ValidationError(
            field='review_threshold',
            message=f"review_threshold ({review}) is greater than auto_fix_threshold ({auto_fix})",
            value=review,
            expected=f"number <= {auto_fix}",
            error_code="CFG-04",
        ))
        validated.pop('auto_fix_threshold', None)
        validated.pop('review_threshold', None)

    never_flag = {term.lower() for term in validated.get('never_flag', ())}
    always_review = validated.get('always_review', ())
    conflicts = [term for term in always_review if term.lower() in never_flag]
    for term in conflicts:
        result.add_error(ValidationError(
            field='always_review',
            message=f'Term "{term}" is in both always_review and never_flag; never_flag wins',
            value=term,
            expected="term in at most one of always_review and never_flag",
            error_code="CFG-05",
        ))
    if conflicts:
        validated['always_review'] = tuple(t for t in always_review if t.lower() not in never_flag)

    # Word lists extend the defaults, so overlap is checked on the merged lists
    if 'safe_words' in validated or 'unsafe_words' in validated:
        safe = {term.lower() for term in _merged_words(validated, 'safe_words')}
        for term in _merged_words(validated, 'unsafe_words'):
            if term.lower() in safe:
                result.add_error(ValidationError(
                    field='safe_words/unsafe_words',
                    message=f'Word "{term}" appears in both safe_words and unsafe_words; unsafe_words wins',
                    value=term,
                    expected="no overlap between safe_words and unsafe_words",
                    error_code="CFG-07",
                ))

    return result


def resolve_safety_config(
    overrides: Optional[Mapping[str, Any]] = None
) -> Tuple[SafetyConfig, ValidationResult]:
    """
    Merge validated overrides over the defaults.

    Merge rules:
    - scalars and always_review/never_flag replace the defaults
    - safe_words/unsafe_words extend the defaults (deduplicated, order kept);
      a word in both stays only in unsafe_words
    - weights replace only the named weights
    - invalid fields keep their defaults

    Args:
        overrides: Mapping of option name to value (None for pure defaults)

    Returns:
        (SafetyConfig, ValidationResult)

    Example:
        >>> config, result = resolve_safety_config({'neverFlag': ['localhost']})
        >>> config.never_flag
        ('localhost',)
    """
    result = validate_safety_config(overrides)
    validated = result.validated_config
    defaults = DEFAULT_SAFETY_CONFIG
    unsafe_words = _merged_words(validated, 'unsafe_words')
    unsafe = {term.lower() for term in unsafe_words}

    config = SafetyConfig(
        enabled=validated.get('enabled', defaults.enabled),
        auto_fix_threshold=validated.get('auto_fix_threshold', defaults.auto_fix_threshold),
        review_threshold=validated.get('review_threshold', defaults.review_threshold),
        always_review=_dedupe(validated.get('always_review', defaults.always_review)),
        never_flag=_dedupe(validated.get('never_flag', defaults.never_flag)),
        safe_words=tuple(
            t for t in _merged_words(validated, 'safe_words') if t.lower() not in unsafe
        ),
        unsafe_words=unsafe_words,
        require_manual_review=validated.get('require_manual_review', defaults.require_manual_review),
        weights=replace(DEFAULT_WEIGHTS, **validated.get('weights', {})),
    )

    if result.errors:
        logger.debug(f"Resolved safety config with {len(result.errors)} invalid field(s) defaulted")

    return config, result


# =============================================================================
# FILE LOADING
# =============================================================================

def safe_read_file(path: Path, max_size: int = MAX_FILE_SIZE) -> str:
    """
    Safely read a file with size limits.

    Args:
        path: Path to file
        max_size: Maximum file size in bytes

    Returns:
        File contents

    Raises:
        ValueError: If file exceeds size limit
        FileNotFoundError: If file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    size = path.stat().st_size
    if size > max_size:
        raise ValueError(
            f"File too large: {path} ({size:,} bytes). "
            f"Maximum allowed: {max_size:,} bytes"
        )

    return path.read_text(encoding='utf-8')


def _safety_section(config: Mapping[str, Any]) -> Any:
    autofix = config.get('autofix')
    if isinstance(autofix, Mapping) and 'safety' in autofix:
        return autofix['safety']
    if 'safety' in config:
        return config['safety']
    return config


def _failed(message: str, error_code: str = "CFG-06") -> Tuple[SafetyConfig, ValidationResult]:
    result = ValidationResult(is_valid=False)
    result.add_error(ValidationError(field='config_file', message=message, error_code=error_code))
    return DEFAULT_SAFETY_CONFIG, result


def load_safety_config(config_path: Path) -> Tuple[SafetyConfig, ValidationResult]:
    """
    Load and validate a safety configuration file.

    The section used is `autofix.safety`, else a top-level `safety`, else
    the whole document.

    Args:
        config_path: Path to config file (YAML, TOML, or JSON)

    Returns:
        (SafetyConfig, ValidationResult). Parse errors return the default
        config with a failed result.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is unsupported, or the file is empty
                    or too large
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()

    if suffix not in ('.yaml', '.yml', '.toml', '.json'):
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .yaml, .yml, .toml, or .json"
        )

    text = safe_read_file(config_path)
    if not text.strip():
        raise ValueError(f"Config file is empty: {config_path}")

    if suffix in ('.yaml', '.yml'):
        try:
            config = yaml.safe_load(text)
        except yaml.YAMLError as e:
            return _failed(f"YAML parse error: {e}")

    elif suffix == '.toml':
        try:
            config = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            return _failed(f"TOML parse error: {e}")

    else:
        try:
            config = json.loads(text)
        except json.JSONDecodeError as e:
            return _failed(f"JSON parse error at line {e.lineno}: {e.msg}")

    if not isinstance(config, Mapping):
        return _failed(
            f"Config must be a dictionary/mapping, got {type(config).__name__}",
            error_code="CFG-02"
        )

    logger.debug(f"Loaded safety config from {config_path}")
    return resolve_safety_config(_safety_section(config))
