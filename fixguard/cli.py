#!/usr/bin/env python3
"""
fixguard command line.

Evaluates a single correction the way a linter rule would, or validates a
safety configuration file before it is rolled out.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fixguard.core.base import (
    Category,
    CorrectionCandidate,
    CorrectionContext,
    DEFAULT_SAFETY_CONFIG,
)
from fixguard.core.colors import error, success, warning
from fixguard.core.config_validator import ValidationResult, load_safety_config
from fixguard.core.logger import setup_logger
from fixguard.core.reporting import generate_decision_console
from fixguard.core.safety import evaluate_correction


def _print_validation(result: ValidationResult):
    for err in result.errors[:20]:
        print(f"   - {err}", file=sys.stderr)
    if len(result.errors) > 20:
        print(f"   ... and {len(result.errors) - 20} more errors", file=sys.stderr)
    for message in result.warnings:
        print(warning(f"Warning: {message}", sys.stderr), file=sys.stderr)


def _load_config(path: Optional[Path]):
    """Return (config, result) or raise the loader's file errors."""
    if path is None:
        return DEFAULT_SAFETY_CONFIG, ValidationResult(is_valid=True)
    return load_safety_config(path)


def cmd_evaluate(args: argparse.Namespace) -> int:
    try:
        config, result = _load_config(args.config)
    except FileNotFoundError:
        print(error(f"ERROR: Config file not found: {args.config}", sys.stderr), file=sys.stderr)
        return 1
    except ValueError as e:
        print(error(f"ERROR: Failed to load config: {e}", sys.stderr), file=sys.stderr)
        return 1

    if not result.is_valid:
        print(
            warning(f"Config has {len(result.errors)} error(s); defaults used for those fields:", sys.stderr),
            file=sys.stderr
        )
    _print_validation(result)

    candidate = CorrectionCandidate(
        category=args.category,
        original=args.original,
        proposed=args.proposed,
        context=CorrectionContext(
            source_line=args.line or '',
            file_path=args.file,
            line_number=args.line_number,
        ),
    )
    decision = evaluate_correction(candidate, config)

    if args.json:
        print(json.dumps(decision.to_dict(), indent=2))
    else:
        print(generate_decision_console(candidate, decision))
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    try:
        config, result = load_safety_config(args.path)
    except FileNotFoundError:
        print(error(f"ERROR: Config file not found: {args.path}", sys.stderr), file=sys.stderr)
        return 1
    except ValueError as e:
        print(error(f"ERROR: Failed to load config: {e}", sys.stderr), file=sys.stderr)
        return 1

    if not result.is_valid:
        print(
            error(f"ERROR: Configuration validation failed with {len(result.errors)} error(s):", sys.stderr),
            file=sys.stderr
        )
        _print_validation(result)
        return 1

    _print_validation(result)
    if args.json:
        print(json.dumps(config.to_dict(), indent=2))
    else:
        print(success(f"✓ {args.path} is valid"))
        print(f"  auto_fix_threshold: {config.auto_fix_threshold}")
        print(f"  review_threshold: {config.review_threshold}")
        print(f"  always_review: {', '.join(config.always_review) or '(none)'}")
        print(f"  never_flag: {', '.join(config.never_flag) or '(none)'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fixguard',
        description="Autofix safety scoring for documentation corrections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s evaluate case-normalize "hello world" --proposed "Hello world"
  %(prog)s evaluate token-wrap "src/utils/helper.js" --line "Edit src/utils/helper.js first"
  %(prog)s evaluate token-wrap "rust" --config .fixguard.yaml --json
  %(prog)s check-config .fixguard.yaml
        """
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log each decision at debug level'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        help='Also write logs to this file (JSON lines)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    evaluate = subparsers.add_parser(
        'evaluate',
        help='Score one proposed correction and print the decision'
    )
    evaluate.add_argument(
        'category',
        help=f"Correction category ({', '.join(c.value for c in Category)})"
    )
    evaluate.add_argument('original', help='Original text')
    evaluate.add_argument('--proposed', default='', help='Proposed replacement text')
    evaluate.add_argument('--line', help='Full source line containing the original text')
    evaluate.add_argument('--file', help='Document path (for logs and reports)')
    evaluate.add_argument('--line-number', type=int, help='1-based line number')
    evaluate.add_argument('--config', type=Path, help='Safety config file (YAML, TOML or JSON)')
    evaluate.add_argument('--json', action='store_true', help='Print the decision as JSON')
    evaluate.set_defaults(handler=cmd_evaluate)

    check = subparsers.add_parser(
        'check-config',
        help='Validate a safety config file (exit 1 on errors)'
    )
    check.add_argument('path', type=Path, help='Config file (YAML, TOML or JSON)')
    check.add_argument('--json', action='store_true', help='Print the resolved config as JSON')
    check.set_defaults(handler=cmd_check_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logger(
        "fixguard",
        log_file=args.log_file,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    return args.handler(args)


if __name__ == '__main__':
    sys.exit(main())
