"""
Per-document cache of code regions for calling rules.

Rules that propose corrections must not touch code. DocumentCache computes
which lines sit inside fenced or indented code blocks, and where inline code
spans are, once per document and only when first asked.

Create one instance per document being linted and drop it afterwards.
Nothing is shared between documents, so documents can be processed in any
order or in parallel.

Usage:
    cache = DocumentCache(lines)
    for index, line in enumerate(lines):
        if cache.is_code_line(index):
            continue
        ...
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

_FENCE = re.compile(r'^(`{3,}|~{3,})')
_INDENT = re.compile(r'^(?: {4}|\t)')

Span = Tuple[int, int]


def find_code_block_lines(lines: Sequence[str]) -> List[bool]:
    """
    Flag each line that is inside a fenced or indented code block.

    Fences are 3+ backticks or tildes. A fence closes only on the same
    character with at least the opening length; any other fence inside a
    block is content. Outside fences, a line indented by 4 spaces or a tab
    with content after it is indented code.

    Args:
        lines: Document lines without newlines

    Returns:
        One flag per line; fence lines themselves are flagged
    """
    flags = [False] * len(lines)
    fence_char: Optional[str] = None
    fence_length = 0

    for index, line in enumerate(lines):
        if fence_char is None and not line:
            continue

        stripped = line.strip()
        match = _FENCE.match(stripped)
        if match:
            marker = match.group(1)
            flags[index] = True
            if fence_char is None:
                fence_char, fence_length = marker[0], len(marker)
            elif marker[0] == fence_char and len(marker) >= fence_length:
                fence_char, fence_length = None, 0
            continue

        if fence_char is not None:
            flags[index] = True
        elif len(line) > 4 and _INDENT.match(line) and stripped:
            flags[index] = True

    return flags


def find_inline_code_spans(line: str) -> List[Span]:
    """
    Return [start, end) ranges of backtick-delimited spans, ticks included.

    Backticks pair up left to right; an unmatched trailing tick is ignored.
    """
    spans: List[Span] = []
    position = 0

    while True:
        start = line.find('`', position)
        if start == -1:
            break
        end = line.find('`', start + 1)
        if end == -1:
            break
        spans.append((start, end + 1))
        position = end + 1

    return spans


class DocumentCache:
    """
    Lazily computed code-region lookups for one document.

    Attributes:
        lines: The document lines (read-only tuple)
    """

    def __init__(self, lines: Sequence[str]):
        self.lines: Tuple[str, ...] = tuple(lines)
        self._code_block_lines: Optional[Tuple[bool, ...]] = None
        self._inline_spans: Dict[int, Tuple[Span, ...]] = {}
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_text(cls, text: str) -> 'DocumentCache':
        return cls(text.split('\n'))

    @classmethod
    def from_file(cls, file_path: Path) -> 'DocumentCache':
        return cls.from_text(Path(file_path).read_text(encoding='utf-8'))

    @property
    def code_block_lines(self) -> Tuple[bool, ...]:
        """Per-line code-block flags, computed on first access."""
        if self._code_block_lines is None:
            self._misses += 1
            self._code_block_lines = tuple(find_code_block_lines(self.lines))
        else:
            self._hits += 1
        return self._code_block_lines

    def is_code_line(self, index: int) -> bool:
        """True if the 0-based line index is inside a code block."""
        return self.code_block_lines[index]

    def inline_code_spans(self, index: int) -> Tuple[Span, ...]:
        """Inline code spans of one line, computed on first access."""
        spans = self._inline_spans.get(index)
        if spans is None:
            self._misses += 1
            spans = tuple(find_inline_code_spans(self.lines[index]))
            self._inline_spans[index] = spans
        else:
            self._hits += 1
        return spans

    def is_in_inline_code(self, index: int, position: int) -> bool:
        """True if a character position falls inside an inline code span."""
        return any(start <= position < end for start, end in self.inline_code_spans(index))

    def is_in_code_span(self, index: int, start: int, end: int) -> bool:
        """True if the [start, end) range lies entirely within one span."""
        return any(
            start >= span_start and end <= span_end
            for span_start, span_end in self.inline_code_spans(index)
        )

    @property
    def stats(self) -> Dict:
        """Get cache statistics."""
        total = self._hits + self._misses
        return {
            'lines': len(self.lines),
            'hits': self._hits,
            'misses': self._misses,
            'hit_rate': self._hits / total if total > 0 else 0.0,
        }
