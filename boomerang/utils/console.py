"""Colorful console logging formatter for fleet runs."""

import logging
import re
import sys
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

# Log level colors
LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "boomerang.services.fleet": COLORS["bright_cyan"],
    "boomerang.services.connection": COLORS["bright_magenta"],
    "boomerang.services.runner": COLORS["bright_blue"],
    "boomerang.services": COLORS["cyan"],
    "boomerang.config": COLORS["green"],
    "boomerang.server": COLORS["yellow"],
    "default": COLORS["white"],
}

SSH_TARGET_PATTERN = re.compile(r"(\w[\w.\-]*@[\w.\-]+:\d+)")
DURATION_PATTERN = re.compile(r"(\d+\.\d+s)\b")
ATTEMPT_PATTERN = re.compile(r"(attempt \d+/\d+)")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component highlighting and event markers."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt.strftime('%H:%M:%S')}.{int(record.msecs):03d} {dt.strftime('%m/%d')}"

    def _format_level(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("boomerang."):
            name = name[len("boomerang.") :]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        """Highlight SSH targets, durations and retry attempts."""
        if not self.use_colors:
            return message

        reset = COLORS["reset"]
        message = SSH_TARGET_PATTERN.sub(f"{COLORS['bright_magenta']}\\1{reset}", message)
        message = DURATION_PATTERN.sub(f"{COLORS['bright_yellow']}\\1{reset}", message)
        message = ATTEMPT_PATTERN.sub(f"{COLORS['cyan']}\\1{reset}", message)
        return message

    def _marker(self, message: str) -> str:
        """Pick a short prefix marking the kind of event."""
        lowered = message.lower()
        if "starting" in lowered:
            return self._colorize(">>>", COLORS["bright_green"])
        if "failed" in lowered or "error" in lowered:
            return self._colorize("!! ", COLORS["bright_red"])
        if "retrying" in lowered or "disabled" in lowered:
            return self._colorize("!  ", COLORS["bright_yellow"])
        if "completed" in lowered or "established" in lowered:
            return self._colorize("OK ", COLORS["bright_green"])
        if "opening" in lowered or "connecting" in lowered:
            return self._colorize("+  ", COLORS["bright_cyan"])
        if "closing" in lowered or "removing" in lowered:
            return self._colorize("-  ", COLORS["bright_yellow"])
        return "   "

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as ``time | level | component | message``."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])

        message = record.getMessage()
        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {self._highlight_message(message)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"

        if not self.use_colors:
            return line
        return f"{self._marker(message)} {line}"


NOISY_LOGGERS = ["asyncssh", "httpx", "httpcore", "fastmcp", "uvicorn", "starlette", "anyio"]


def configure_logging(log_level: str = "INFO", use_colors: bool = True) -> None:
    """Attach a colorful stderr handler to the ``boomerang`` logger.

    Colors are dropped when stderr is not a TTY. Third-party loggers are
    limited to WARNING.
    """
    if not sys.stderr.isatty():
        use_colors = False

    root = logging.getLogger("boomerang")
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        root.addHandler(handler)
        root.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
