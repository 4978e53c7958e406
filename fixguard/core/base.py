"""
Core data model for the fixguard autofix safety engine.

Every record here is an immutable dataclass. Candidates are built by calling
rules, decisions are produced fresh per evaluation, and the safety
configuration is resolved once per lint run and only read afterwards.
"""

import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import DEFAULT_SAFE_WORDS, DEFAULT_UNSAFE_WORDS


class Category(str, Enum):
    """Kinds of correction a calling rule can propose."""
    CASE_NORMALIZE = 'case-normalize'
    TOKEN_WRAP = 'token-wrap'
    SYMBOL_REPLACE = 'symbol-replace'
    LINK_AUTOLINK = 'link-autolink'


class Tier(str, Enum):
    """Three-way outcome of a safety decision."""
    APPLY = 'apply'
    REVIEW = 'review'
    SKIP = 'skip'


class AmbiguityType(str, Enum):
    """Why a term is ambiguous between prose and a proper name."""
    PROGRAMMING_LANGUAGE = 'programming-language'
    PRODUCT_NAME = 'product-name'
    SEMVER_TERM = 'semver-term'
    PROPER_NOUN_OR_COMMON = 'proper-noun-or-common'


def normalize_category(value: Any) -> str:
    """
    Return the canonical string for a category.

    Known categories (enum members or their string values) map to the enum
    value. Anything else is returned as a plain string so that the
    orchestrator can score it as an unknown category instead of failing.
    """
    if isinstance(value, Category):
        return value.value
    text = '' if value is None else str(value)
    try:
        return Category(text).value
    except ValueError:
        return text


@dataclass(frozen=True)
class CorrectionContext:
    """
    Advisory information about where a correction was found.

    Attributes:
        source_line: Full text of the line containing the original span
        file_path: Document path, if known
        line_number: 1-based line number, if known
    """
    source_line: str = ''
    file_path: Optional[str] = None
    line_number: Optional[int] = None

    @classmethod
    def from_value(cls, value: Any) -> Optional['CorrectionContext']:
        """
        Build a context from whatever the caller passed.

        Accepts an existing CorrectionContext, a mapping (snake_case or
        camelCase keys), or None. Fields with the wrong type are dropped
        individually; a value that is not a mapping at all yields None.
        """
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            return None

        def pick(*keys):
            for key in keys:
                if key in value:
                    return value[key]
            return None

        source_line = pick('source_line', 'sourceLine', 'line')
        file_path = pick('file_path', 'filePath', 'file')
        line_number = pick('line_number', 'lineNumber')

        if isinstance(file_path, os.PathLike):
            file_path = os.fspath(file_path)

        return cls(
            source_line=source_line if isinstance(source_line, str) else '',
            file_path=file_path if isinstance(file_path, str) else None,
            line_number=line_number if isinstance(line_number, int) and not isinstance(line_number, bool) else None,
        )


@dataclass(frozen=True)
class CorrectionCandidate:
    """
    A proposed textual correction, as supplied by a calling rule.

    Malformed fields are coerced rather than rejected: a missing original or
    proposed text becomes an empty string, and a malformed context is
    dropped.

    Attributes:
        category: Correction kind (see Category); unknown strings are kept
        original: Exact source span being replaced
        proposed: Exact replacement text (may be empty for fixed-rule kinds)
        context: Optional CorrectionContext
    """
    category: str
    original: str = ''
    proposed: str = ''
    context: Optional[CorrectionContext] = None

    def __post_init__(self):
        object.__setattr__(self, 'category', normalize_category(self.category))
        object.__setattr__(self, 'original', _as_text(self.original))
        object.__setattr__(self, 'proposed', _as_text(self.proposed))
        object.__setattr__(self, 'context', CorrectionContext.from_value(self.context))

    @property
    def source_line(self) -> str:
        return self.context.source_line if self.context else ''

    @property
    def file_path(self) -> Optional[str]:
        return self.context.file_path if self.context else None

    @property
    def line_number(self) -> Optional[int]:
        return self.context.line_number if self.context else None


def _as_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class AmbiguityInfo:
    """
    A known ambiguous term found in the original text.

    Attributes:
        term: Lower-cased term as matched
        proper_form: Capitalization of the technical/proper reading
        reason: Human-readable explanation of the two readings
        category: AmbiguityType of the term
    """
    term: str
    proper_form: str
    reason: str
    category: AmbiguityType

    def to_dict(self) -> Dict[str, str]:
        return {
            'term': self.term,
            'proper_form': self.proper_form,
            'reason': self.reason,
            'category': self.category.value,
        }


@dataclass(frozen=True)
class Decision:
    """
    Outcome of evaluating one CorrectionCandidate.

    Attributes:
        confidence: Final score in [0, 1]
        tier: Tier the correction falls into
        breakdown: Signal name -> signed contribution (read-only)
        reason: Human-readable explanation
        ambiguity: AmbiguityInfo when an ambiguous term was found
        suggested_fix: Proposed text, only populated for the review tier
        requires_review: True for review tier, or for any non-apply tier when
                         the configuration demands manual review
    """
    confidence: float
    tier: Tier
    breakdown: Mapping[str, float]
    reason: str
    ambiguity: Optional[AmbiguityInfo] = None
    suggested_fix: Optional[str] = None
    requires_review: bool = False

    def __post_init__(self):
        if not isinstance(self.breakdown, MappingProxyType):
            object.__setattr__(self, 'breakdown', MappingProxyType(dict(self.breakdown)))

    @property
    def applied(self) -> bool:
        return self.tier == Tier.APPLY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict, omitting absent optionals."""
        result: Dict[str, Any] = {
            'confidence': self.confidence,
            'tier': self.tier.value,
            'breakdown': dict(self.breakdown),
            'reason': self.reason,
            'requires_review': self.requires_review,
        }
        if self.ambiguity is not None:
            result['ambiguity'] = self.ambiguity.to_dict()
        if self.suggested_fix is not None:
            result['suggested_fix'] = self.suggested_fix
        return result


@dataclass(frozen=True)
class SignalWeights:
    """
    Signed contributions used by the signal extractors and calculators.

    The defaults are empirically chosen and carry no derivation; they are
    kept configurable so projects can tune them from telemetry.
    """
    # case-normalize
    base_confidence: float = 0.5
    first_word_capitalization: float = 0.3
    case_changes_only: float = 0.2
    structural_change: float = -0.2
    many_words_changed: float = -0.3
    technical_term: float = 0.1
    technical_term_cap: float = 0.3

    # file-path shape
    path_with_extension: float = 0.4
    path_code_directory: float = 0.3
    path_multi_segment: float = 0.3
    path_two_segment: float = 0.15

    # command / identifier shape
    standalone_filename: float = 0.3
    import_statement: float = 0.2
    command_keyword: float = 0.3
    env_variable: float = 0.2
    extension_keyword: float = 0.2
    snake_case: float = 0.25
    camel_case: float = 0.25
    pascal_case: float = 0.2
    command_cap: float = 0.4

    # natural-language penalty
    common_word: float = -0.7
    natural_phrase: float = -0.9
    ambiguous_word: float = -0.5
    very_short: float = -0.3
    short_alpha: float = -0.2

    # surrounding-line context
    prose_context: float = -0.3
    repeated_term: float = -0.2
    technical_context: float = 0.2

    # orchestrator and fixed-rule categories
    ambiguity_penalty: float = -0.25
    symbol_replace: float = 0.85
    link_autolink: float = 0.9
    unknown_category: float = 0.5

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


DEFAULT_WEIGHTS = SignalWeights()

DEFAULT_AUTO_FIX_THRESHOLD = 0.7
DEFAULT_REVIEW_THRESHOLD = 0.3


@dataclass(frozen=True)
class SafetyConfig:
    """
    Validated autofix safety configuration.

    Build instances through config_validator.resolve_safety_config() so that
    overrides are validated and merged with the defaults.

    Attributes:
        enabled: When False every correction is applied without scoring
        auto_fix_threshold: Minimum confidence for the apply tier (0.7)
        review_threshold: Minimum confidence for the review tier (0.3)
        always_review: Terms that force the review tier (substring match)
        never_flag: Terms that force the skip tier (substring match)
        safe_words: Terms known to be technical (validated, not scored)
        unsafe_words: Terms known to be prose (validated, not scored)
        require_manual_review: Flag every non-applied decision for review
        weights: SignalWeights used by all calculators
    """
    enabled: bool = True
    auto_fix_threshold: float = DEFAULT_AUTO_FIX_THRESHOLD
    review_threshold: float = DEFAULT_REVIEW_THRESHOLD
    always_review: Tuple[str, ...] = ()
    never_flag: Tuple[str, ...] = ()
    safe_words: Tuple[str, ...] = DEFAULT_SAFE_WORDS
    unsafe_words: Tuple[str, ...] = DEFAULT_UNSAFE_WORDS
    require_manual_review: bool = False
    weights: SignalWeights = field(default_factory=SignalWeights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'auto_fix_threshold': self.auto_fix_threshold,
            'review_threshold': self.review_threshold,
            'always_review': list(self.always_review),
            'never_flag': list(self.never_flag),
            'safe_words': list(self.safe_words),
            'unsafe_words': list(self.unsafe_words),
            'require_manual_review': self.require_manual_review,
            'weights': self.weights.to_dict(),
        }


DEFAULT_SAFETY_CONFIG = SafetyConfig()
