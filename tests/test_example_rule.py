"""
Tests for the example ampersand rule built on fixguard.
"""

from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "examples"))

from ampersand_rule import find_ampersand_fixes, main
from fixguard.core.base import SafetyConfig
from fixguard.sinks import AutofixTelemetry, NeedsReviewQueue


DOCUMENT = [
    "Salt & pepper",
    "```",
    "a & b",
    "```",
    "Use `x & y` here",
    "Call AT&T & more",
    "# Heading & title",
    "Tom&Jerry",
    "See [this & that](link)",
    "Fish &amp; chips",
]


class TestAmpersandRule:
    """Only standalone ampersands in prose are fixed."""

    def test_fixes(self):
        telemetry = AutofixTelemetry()
        fixes = find_ampersand_fixes(DOCUMENT, file_path="doc.md", telemetry=telemetry)

        assert len(fixes) == 1
        fix = fixes[0]
        assert fix['line_number'] == 1
        assert fix['edit_column'] == 6
        assert fix['delete_count'] == 1
        assert fix['insert_text'] == 'and'
        assert fix['_safety']['confidence'] == 0.85
        assert fix['_safety']['category'] == 'symbol-replace'

        assert len(telemetry) == 1
        assert telemetry.decisions[0]['file_path'] == 'doc.md'

    def test_review_when_threshold_raised(self):
        """Above 0.85 the fix is queued for review instead."""
        queue = NeedsReviewQueue()
        fixes = find_ampersand_fixes(
            ["Salt & pepper"], SafetyConfig(auto_fix_threshold=0.9), file_path="doc.md", review_sink=queue
        )

        assert fixes == []
        assert len(queue) == 1
        assert queue.items[0]['file_path'] == 'doc.md'
        assert queue.items[0]['line_number'] == 1
        assert queue.items[0]['context'] == "Salt & pepper"

    def test_multiple_on_one_line(self):
        fixes = find_ampersand_fixes(["a & b & c"])
        assert [fix['edit_column'] for fix in fixes] == [3, 7]

    def test_main(self, tmp_path, capsys):
        doc = tmp_path / "doc.md"
        doc.write_text("Salt & pepper\n", encoding='utf-8')

        assert main([str(doc)]) == 0

        out = capsys.readouterr().out
        assert ":1:6 & -> and" in out
        assert "Autofix Telemetry Summary" in out

    def test_main_without_arguments(self, capsys):
        assert main([]) == 2
