"""
Signal extractors for token-wrap corrections.

Each extractor maps a text fragment (and optionally its surrounding line) to
a signed contribution. Extractors are pure: they never clamp the final score
and never look at configuration other than the weights they are handed.

Signals:
- file_path_signal: path-like shape (0 to +0.4)
- command_signal: command and identifier shapes (0 to +0.4, capped)
- natural_language_penalty: prose shape (0 to -0.9)
- context_adjustment: surrounding-line hints (-0.5 to +0.2)

analyze_code_vs_prose() is a separate, coarser classifier whose result is
attached to applied fixes for transparency. It does not feed the score.
"""

import re
from dataclasses import dataclass, field
from typing import AbstractSet, List, Union

from .base import CorrectionContext, DEFAULT_WEIGHTS, SignalWeights
from .constants import (
    AMBIGUOUS_WORD_PATTERNS,
    CODE_DIRECTORY_PREFIXES,
    COMMAND_KEYWORDS,
    COMMON_WORDS,
    FILE_EXTENSION_KEYWORDS,
    NATURAL_LANGUAGE_INDICATORS,
    NATURAL_LANGUAGE_PHRASES,
    STANDALONE_FILE_PATTERN,
    TECHNICAL_INDICATORS,
)


_TRAILING_EXTENSION = re.compile(r'\.[a-zA-Z0-9]+$')
_LAST_EXTENSION = re.compile(r'\.([^.]+)$')
_IMPORT_STATEMENT = re.compile(r'^import\s+\w+')
_ENV_VARIABLE = re.compile(r'[A-Z_][A-Z0-9_]*')
_SNAKE_CASE = re.compile(r'_?[a-z][a-z0-9]*(?:_[a-z0-9]+)+')
_CAMEL_CASE = re.compile(r'[a-z][a-z0-9]*[A-Z][a-zA-Z0-9]*')
_PASCAL_CASE = re.compile(r'[A-Z](?=[a-zA-Z0-9]*[A-Z])[a-zA-Z0-9]*[a-z][a-zA-Z0-9]*')
_LETTERS_ONLY = re.compile(r'[a-zA-Z]+')

ContextLike = Union[CorrectionContext, str, None]


def file_extension(text: str) -> str:
    """Return the lower-cased text after the last dot, or '' if none."""
    match = _LAST_EXTENSION.search(text)
    return match.group(1).lower() if match else ''


def file_path_signal(
    text: str,
    weights: SignalWeights = DEFAULT_WEIGHTS,
    directory_prefixes: AbstractSet[str] = CODE_DIRECTORY_PREFIXES
) -> float:
    """
    Score how much a fragment looks like a repository path.

    Rules (first match wins):
    - no '/' at all: 0
    - ends in an extension (src/index.js): +0.4
    - first segment is a known code directory (src/utils): +0.3
    - more than two segments (a/b/c): +0.3
    - bare two-segment path (foo/bar): +0.15

    Args:
        text: Fragment to score
        weights: SignalWeights to read contributions from
        directory_prefixes: Lower-cased first segments that mark code paths

    Returns:
        Non-negative contribution
    """
    if '/' not in text:
        return 0.0

    if _TRAILING_EXTENSION.search(text):
        return weights.path_with_extension

    segments = text.split('/')
    if segments[0].lower() in directory_prefixes:
        return weights.path_code_directory

    if len(segments) > 2:
        return weights.path_multi_segment

    return weights.path_two_segment


def command_signal(text: str, weights: SignalWeights = DEFAULT_WEIGHTS) -> float:
    """
    Score command-line and identifier shapes.

    Contributions are summed, then capped at weights.command_cap (0.4):
    - standalone file name (package.json): +0.3
    - import statement: +0.2
    - first token is a known CLI tool (npm install): +0.3
    - ENV_VARIABLE shape, longer than 2 chars: +0.2
    - known file extension: +0.2
    - snake_case: +0.25
    - camelCase: +0.25
    - PascalCase with 2+ capitals and a lowercase letter: +0.2
    """
    score = 0.0

    if STANDALONE_FILE_PATTERN.match(text):
        score += weights.standalone_filename

    if _IMPORT_STATEMENT.match(text):
        score += weights.import_statement

    tokens = text.split()
    if tokens and tokens[0].lower() in COMMAND_KEYWORDS:
        score += weights.command_keyword

    if len(text) > 2 and _ENV_VARIABLE.fullmatch(text):
        score += weights.env_variable

    if file_extension(text) in FILE_EXTENSION_KEYWORDS:
        score += weights.extension_keyword

    if _SNAKE_CASE.fullmatch(text):
        score += weights.snake_case

    if _CAMEL_CASE.fullmatch(text):
        score += weights.camel_case

    if _PASCAL_CASE.fullmatch(text):
        score += weights.pascal_case

    return min(score, weights.command_cap)


def natural_language_penalty(text: str, weights: SignalWeights = DEFAULT_WEIGHTS) -> float:
    """
    Return a negative contribution for prose-like fragments.

    Exact matches are checked first and returned immediately:
    - common English word: -0.7
    - prose word pair such as "pass/fail": -0.9
    - generic ambiguous short word: -0.5

    Otherwise the two shape penalties accumulate:
    - length <= 2: -0.3
    - letters only and shorter than 5: -0.2
    """
    lowered = text.lower()

    if lowered in COMMON_WORDS:
        return weights.common_word
    if lowered in NATURAL_LANGUAGE_PHRASES:
        return weights.natural_phrase
    if any(pattern.search(text) for pattern in AMBIGUOUS_WORD_PATTERNS):
        return weights.ambiguous_word

    penalty = 0.0
    if len(text) <= 2:
        penalty += weights.very_short
    if len(text) < 5 and _LETTERS_ONLY.fullmatch(text):
        penalty += weights.short_alpha
    return penalty


def _source_line(context: ContextLike) -> str:
    if isinstance(context, CorrectionContext):
        return context.source_line
    if isinstance(context, str):
        return context
    return ''


def context_adjustment(
    text: str,
    context: ContextLike = None,
    weights: SignalWeights = DEFAULT_WEIGHTS
) -> float:
    """
    Adjust confidence from the line surrounding the fragment.

    The three adjustments are independent and additive:
    - line contains a prose indicator ("for example", "i think"): -0.3
    - fragment occurs more than once on the line: -0.2
    - line contains a technical keyword ("install", "execute"): +0.2

    Args:
        text: Fragment being scored
        context: CorrectionContext, the raw source line, or None
        weights: SignalWeights to read contributions from

    Returns:
        Signed contribution (0 when there is no line)
    """
    line = _source_line(context)
    if not line or not text:
        return 0.0

    lowered = line.lower()
    adjustment = 0.0

    if any(indicator in lowered for indicator in NATURAL_LANGUAGE_INDICATORS):
        adjustment += weights.prose_context

    # \b anchors need word characters at both ends; "--flag" or "(x)" never repeat
    occurrences = re.findall(rf'\b{re.escape(text)}\b', line, re.IGNORECASE)
    if len(occurrences) > 1:
        adjustment += weights.repeated_term

    if any(indicator in lowered for indicator in TECHNICAL_INDICATORS):
        adjustment += weights.technical_context

    return adjustment


# =============================================================================
# Code vs prose analysis
# =============================================================================

_DEFINITELY_NOT_CODE = (
    re.compile(r'^(a|an|the|and|or|but|if|then|else|when|where|why|how|who|what|which|that|this|these|those|here|there|now|today|yesterday|tomorrow)$', re.IGNORECASE),
    re.compile(r'^(i|you|he|she|it|we|they|me|him|her|us|them|my|your|his|its|our|their)$', re.IGNORECASE),
    re.compile(r'^(is|are|was|were|be|been|being|have|has|had|do|does|did|will|would|could|should|may|might|can|must|shall)$', re.IGNORECASE),
    re.compile(r'^(good|bad|big|small|new|old|first|last|next|previous|best|worst|better|worse|more|less|most|least)$', re.IGNORECASE),
    re.compile(r'^(one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|twenty|thirty|hundred|thousand)$', re.IGNORECASE),
)

_STRONG_CODE_INDICATORS = (
    re.compile(r'\.(' + '|'.join(re.escape(ext) for ext in sorted(FILE_EXTENSION_KEYWORDS)) + r')$', re.IGNORECASE),
    re.compile(r'^[A-Z_][A-Z0-9_]*$'),
    re.compile(r'^(' + '|'.join(sorted(COMMAND_KEYWORDS)) + r')\s'),
    re.compile(r'\(.*\)$'),
    re.compile(r'^import\s+'),
    re.compile(r'^from\s+.*import'),
    re.compile(r'^\$[A-Z_]+$'),
    re.compile(r'^--[a-z-]+$'),
    re.compile(r'/.*/'),
    re.compile(r'^\.[a-zA-Z]'),
)

_MODERATE_CODE_INDICATORS = (
    re.compile(r'[A-Z]{2,}'),
    re.compile(r'_'),
    re.compile(r'\d'),
    re.compile(r'^[a-z]+[A-Z]'),
    re.compile(r'^[A-Z][a-z]+[A-Z]'),
    re.compile(r'^[a-z-]{4,}$'),
)

_TECHNICAL_CONTEXT = re.compile(r'(command|execute|run|install|configure|setup|deploy|build|compile)')
_EXAMPLE_CONTEXT = re.compile(r'(example|like|such as|for instance|namely)')


@dataclass
class CodeAnalysis:
    """Coarse verdict on whether a fragment is code or prose."""
    is_likely_code: bool = False
    confidence: float = 0.5
    reasons: List[str] = field(default_factory=list)
    should_autofix: bool = False

    def to_dict(self):
        return {
            'is_likely_code': self.is_likely_code,
            'confidence': self.confidence,
            'reasons': list(self.reasons),
            'should_autofix': self.should_autofix,
        }


def analyze_code_vs_prose(text: str, context: ContextLike = None) -> CodeAnalysis:
    """
    Classify a fragment as code or prose from indicator pattern counts.

    Scoring:
    - disqualifying English word: confidence 0.1, returned immediately
    - any strong indicator (extension, ENV_VAR, command, call, flag...): +0.4
    - each moderate indicator (acronym, underscore, digit, casing): +0.1
    - technical words on the line: +0.2; example/illustration words: -0.3

    The result is clamped to [0, 1]. is_likely_code means > 0.5 and
    should_autofix means > 0.6.
    """
    analysis = CodeAnalysis()

    if any(pattern.search(text) for pattern in _DEFINITELY_NOT_CODE):
        analysis.confidence = 0.1
        analysis.reasons.append('Matches common English word pattern')
        return analysis

    strong = sum(1 for pattern in _STRONG_CODE_INDICATORS if pattern.search(text))
    if strong:
        analysis.confidence += 0.4
        analysis.reasons.append(f'Strong code pattern: {strong} matches')

    moderate = sum(1 for pattern in _MODERATE_CODE_INDICATORS if pattern.search(text))
    if moderate:
        analysis.confidence += 0.1 * moderate
        analysis.reasons.append(f'Moderate code patterns: {moderate} matches')

    line = _source_line(context).lower()
    if line:
        if _TECHNICAL_CONTEXT.search(line):
            analysis.confidence += 0.2
            analysis.reasons.append('Technical context detected')
        if _EXAMPLE_CONTEXT.search(line):
            analysis.confidence -= 0.3
            analysis.reasons.append('Example/illustration context detected')

    analysis.confidence = max(0.0, min(1.0, analysis.confidence))
    analysis.is_likely_code = analysis.confidence > 0.5
    analysis.should_autofix = analysis.confidence > 0.6
    return analysis
