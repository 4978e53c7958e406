"""
Detection of terms that read as both ordinary prose and a technical name.

"rust" may be corrosion or the Rust language, "minor" may be an adjective or
the SemVer MINOR component. Such terms are never fatal on their own; the
orchestrator lowers confidence and records the term on the decision.
"""

import re
from types import MappingProxyType
from typing import Optional

from .base import AmbiguityInfo, AmbiguityType
from .constants import AMBIGUOUS_TERMS


_NON_LETTERS = re.compile(r'[^a-z]')


def _classify(reason: str) -> AmbiguityType:
    if 'programming language' in reason:
        return AmbiguityType.PROGRAMMING_LANGUAGE
    if 'software' in reason or 'browser' in reason:
        return AmbiguityType.PRODUCT_NAME
    if 'SemVer' in reason:
        return AmbiguityType.SEMVER_TERM
    return AmbiguityType.PROPER_NOUN_OR_COMMON


_AMBIGUITY_TYPES = MappingProxyType({
    term: _classify(entry['reason']) for term, entry in AMBIGUOUS_TERMS.items()
})


def detect_ambiguity(text: str) -> Optional[AmbiguityInfo]:
    """
    Find the first known ambiguous term in a text.

    The text is lower-cased and split on whitespace; each word is stripped
    of anything that is not a letter before lookup, so "Rust," and "(go)"
    still match.

    Args:
        text: Original text of a correction candidate

    Returns:
        AmbiguityInfo for the first matching word, or None

    Example:
        >>> detect_ambiguity('Rust programming').proper_form
        'Rust'
        >>> detect_ambiguity('hello world') is None
        True
    """
    if not text:
        return None

    for word in text.lower().split():
        term = _NON_LETTERS.sub('', word)
        entry = AMBIGUOUS_TERMS.get(term)
        if entry is not None:
            return AmbiguityInfo(
                term=term,
                proper_form=entry['proper_form'],
                reason=entry['reason'],
                category=_AMBIGUITY_TYPES[term],
            )
    return None
