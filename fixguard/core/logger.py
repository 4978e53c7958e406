"""
Logging for fixguard.

Provides structured logging with:
- Console output (colorized if supported)
- File output (JSON lines for parsing)
- Context tracking (correction category, document location)
- Error codes for configuration and sink failures

Usage:
    from fixguard.core.logger import setup_logger, RuleLogger

    # Setup once, usually from the CLI or the calling linter
    logger = setup_logger("fixguard", log_file=Path("fixguard.log"))

    # Per-category wrapper used by the orchestrator
    log = RuleLogger("token-wrap")
    log.debug("Decision: apply", file_path="README.md", line_number=12)
"""

import json
import logging
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


ERROR_CODES = {
    # Configuration errors
    "CFG-01": "Unknown configuration option",
    "CFG-02": "Wrong option type",
    "CFG-03": "Option value out of range",
    "CFG-04": "Invalid threshold ordering",
    "CFG-05": "Term in both always_review and never_flag",
    "CFG-06": "Unreadable configuration file",
    "CFG-07": "Word in both safe_words and unsafe_words",

    # Sink errors
    "SNK-01": "Telemetry sink failure",
    "SNK-02": "Review sink failure",
}

CONTEXT_FIELDS = ('category', 'file_path', 'line_number', 'error_code', 'operation')


@dataclass
class LogContext:
    """Context information for log entries."""
    category: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    error_code: Optional[str] = None
    operation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        return {k: v for k, v in asdict(self).items() if v is not None}


class ContextFilter(logging.Filter):
    """Add context information to log records."""

    def __init__(self, default_context: Optional[LogContext] = None):
        super().__init__()
        self.context = default_context or LogContext()

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.to_dict().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        # Formatters rely on every context field being present
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)

        return True


class ColoredFormatter(logging.Formatter):
    """Colorized console formatter."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname

        parts = []
        if self.use_colors:
            parts.append(f"{self.COLORS.get(level, '')}{level}{self.COLORS['RESET']}")
        else:
            parts.append(level)

        context_parts = []
        category = getattr(record, 'category', None)
        if category:
            context_parts.append(f"[{category}]")
        file_path = getattr(record, 'file_path', None)
        if file_path:
            line_number = getattr(record, 'line_number', None)
            if line_number:
                file_path = f"{file_path}:{line_number}"
            context_parts.append(f"({file_path})")
        if context_parts:
            parts.append(' '.join(context_parts))

        parts.append(record.getMessage())

        error_code = getattr(record, 'error_code', None)
        if error_code:
            parts.append(f"[{error_code}: {ERROR_CODES.get(error_code, 'Unknown error')}]")

        message = ' '.join(parts)
        if record.exc_info:
            message += '\n' + self.formatException(record.exc_info)
        return message


class JSONFormatter(logging.Formatter):
    """JSON formatter for file logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logger(
    name: str = "fixguard",
    log_file: Optional[Path] = None,
    level: int = logging.INFO,
    console: bool = True,
    use_colors: bool = True
) -> logging.Logger:
    """
    Setup logger with console and optional file output.

    Console output goes to stderr so that report output on stdout stays
    machine-readable.

    Args:
        name: Logger name
        log_file: Path to log file (JSON lines)
        level: Logging level
        console: Enable console output
        use_colors: Use ANSI colors in console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    logger.handlers.clear()
    for existing in [f for f in logger.filters if isinstance(f, ContextFilter)]:
        logger.removeFilter(existing)
    logger.addFilter(ContextFilter())

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColoredFormatter(use_colors))
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "fixguard") -> logging.Logger:
    """Get existing logger or create new one."""
    return logging.getLogger(name)


class RuleLogger:
    """
    Logger wrapper with automatic correction-category context.

    Used by the orchestrator for per-decision DEBUG lines and by the fix
    materializer for sink failures.
    """

    def __init__(self, category: str, logger: Optional[logging.Logger] = None):
        self.category = category
        self._logger = logger or get_logger()

    def _log(
        self,
        level: int,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        error_code: Optional[str] = None,
        exc_info: Any = None,
        **kwargs
    ):
        extra = {
            'category': self.category,
            'file_path': str(file_path) if file_path else None,
            'line_number': line_number,
            'error_code': error_code,
            **kwargs
        }
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, **kwargs):
        if self._logger.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def sink_failure(
        self,
        sink_name: str,
        error: BaseException,
        error_code: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None
    ):
        """
        Log a sink that raised while receiving a decision.

        Args:
            sink_name: Human-readable sink name ("telemetry", "review")
            error: Exception raised by the sink
            error_code: SNK-01 or SNK-02
            file_path: Document path of the candidate, if known
            line_number: Line number of the candidate, if known
        """
        self.warning(
            f"{sink_name} sink failed: {error}",
            file_path=file_path,
            line_number=line_number,
            error_code=error_code,
            operation=f"{sink_name}_sink",
            exc_info=error,
        )
