"""
Example calling rule: replace standalone "&" with "and".

Shows how a linter rule uses fixguard:
- one DocumentCache per document to skip code blocks and inline code
- a symbol-replace CorrectionCandidate per finding
- build_safe_fix() with sinks the caller owns

Run directly to lint a markdown file:
    python examples/ampersand_rule.py README.md
"""

import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from fixguard.core.base import Category, CorrectionCandidate, DEFAULT_SAFETY_CONFIG, SafetyConfig
from fixguard.core.document_cache import DocumentCache
from fixguard.core.reporting import generate_review_text, generate_telemetry_console
from fixguard.core.safety import build_safe_fix
from fixguard.sinks import AutofixTelemetry, NeedsReviewQueue

# Names where the ampersand is part of the name
BRAND_NAMES = (
    'AT&T', 'H&M', 'M&M', 'P&G', 'J&J', 'S&P', 'R&D', 'Q&A', 'M&S',
    'Barnes & Noble', 'Johnson & Johnson', 'Procter & Gamble', 'Ben & Jerry',
    'Ernst & Young', 'Marks & Spencer', 'Simon & Schuster', 'Tiffany & Co',
    'Black & Decker', 'Standard & Poor', 'R & D', 'Q & A',
)

_HEADING = re.compile(r'^\s*#{1,6}\s')
_ENTITY = re.compile(r'^[a-zA-Z0-9#]+;')


def _in_markup(line: str, position: int) -> bool:
    """True inside an HTML entity or a markdown link text."""
    if _ENTITY.match(line[position + 1:]):
        return True
    before = line[:position]
    return before.rfind('[') > before.rfind(']')


def _is_standalone(line: str, position: int) -> bool:
    before = line[position - 1] if position > 0 else ''
    after = line[position + 1] if position < len(line) - 1 else ''
    return (before == '' or before.isspace()) and (after == '' or after.isspace())


def find_ampersand_fixes(
    lines: Sequence[str],
    config: SafetyConfig = DEFAULT_SAFETY_CONFIG,
    file_path: Optional[str] = None,
    telemetry=None,
    review_sink=None
) -> List[Dict[str, Any]]:
    """
    Return the fixes fixguard allows for standalone ampersands.

    Each fix is {'line_number', 'edit_column', 'delete_count', 'insert_text',
    '_safety'} with a 1-based line number and column.
    """
    cache = DocumentCache(lines)
    fixes = []

    for index, line in enumerate(cache.lines):
        if not line.strip() or cache.is_code_line(index) or _HEADING.match(line):
            continue
        lowered = line.lower()
        if any(brand.lower() in lowered for brand in BRAND_NAMES):
            continue

        for position, char in enumerate(line):
            if char != '&':
                continue
            if cache.is_in_inline_code(index, position) or _in_markup(line, position):
                continue
            if not _is_standalone(line, position):
                continue

            candidate = CorrectionCandidate(
                category=Category.SYMBOL_REPLACE,
                original='&',
                proposed='and',
                context={'source_line': line, 'file_path': file_path, 'line_number': index + 1},
            )
            fix = build_safe_fix(
                candidate,
                config,
                {
                    'line_number': index + 1,
                    'edit_column': position + 1,
                    'delete_count': 1,
                    'insert_text': 'and',
                },
                telemetry=telemetry,
                review_sink=review_sink,
            )
            if fix is not None:
                fixes.append(fix)

    return fixes


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("usage: ampersand_rule.py FILE.md", file=sys.stderr)
        return 2

    path = Path(argv[0])
    telemetry = AutofixTelemetry()
    queue = NeedsReviewQueue()
    lines = path.read_text(encoding='utf-8').split('\n')

    for fix in find_ampersand_fixes(lines, file_path=str(path), telemetry=telemetry, review_sink=queue):
        print(f"{path}:{fix['line_number']}:{fix['edit_column']} & -> and "
              f"(confidence {fix['_safety']['confidence']:.2f})")

    print(generate_telemetry_console(telemetry))
    if len(queue):
        print(generate_review_text(queue))
    return 0


if __name__ == '__main__':
    sys.exit(main())
