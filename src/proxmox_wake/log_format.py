import logging

RESET = "\033[0m"
DIM = "\033[2m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
MAGENTA = "\033[35m"

LEVEL_COLORS = {
    logging.DEBUG: DIM,
    logging.INFO: GREEN,
    logging.WARNING: YELLOW,
    logging.ERROR: RED,
    logging.CRITICAL: RED + BOLD,
}

# First matching prefix wins.
MESSAGE_HIGHLIGHTS: list[tuple[str, str]] = [
    ("State:", BOLD + CYAN),
    ("Trigger ", BOLD + MAGENTA),
    ("Successfully started", BOLD + GREEN),
    ("VM started successfully", BOLD + GREEN),
    ("Gamepad ", CYAN),
    ("Health check:", BOLD),
]


def highlight_for(msg: str) -> str:
    for prefix, style in MESSAGE_HIGHLIGHTS:
        if msg.startswith(prefix):
            return style
    return ""


class ColoredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        level_color = LEVEL_COLORS.get(record.levelno, "")
        component = record.name.rsplit(".", 1)[-1]
        msg = record.getMessage()

        style = highlight_for(msg)
        if not style and record.levelno == logging.DEBUG:
            style = DIM
        elif not style and record.levelno >= logging.WARNING:
            style = level_color
        if style:
            msg = f"{style}{msg}{RESET}"

        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        stamp = self.formatTime(record, self.datefmt)
        return f"{DIM}{stamp}{RESET} {level_color}{record.levelname:<7}{RESET} {DIM}[{component}]{RESET} {msg}"
