"""
Diagnostic output for Prowling.

Lines go to the rich console and, when a log file is configured, are mirrored
to it as plain text. Request/response tracing only happens in debug mode.
"""
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from rich.console import Console
from rich.text import Text

INFO_PREFIX = "[INFO] "
WARNING_PREFIX = "[WARNING] "
ERROR_PREFIX = "[ERROR] "
MAX_LOGGED_PAYLOAD = 5000

_PREFIX_STYLES = {
    WARNING_PREFIX: "yellow",
    ERROR_PREFIX: "red",
    INFO_PREFIX: "cyan",
}


def _stamp() -> str:
    return datetime.now().strftime('%H:%M:%S.%f')[:-3]


def _dump(payload: Any) -> str:
    text = json.dumps(payload, indent=2, default=str)
    if len(text) > MAX_LOGGED_PAYLOAD:
        text = text[:MAX_LOGGED_PAYLOAD] + "\n  ... (truncated)"
    return text


class ProwlingLogger:
    """Screen logger with an optional flushed file mirror."""

    def __init__(self, log_file: Optional[Path] = None, debug: bool = False):
        self.log_file = log_file
        self.debug_mode = debug
        self._console = Console()
        self._opened_at = datetime.now()
        self._handle: Optional[TextIO] = None

        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._handle = log_file.open('a', buffering=1, encoding='utf-8')
            from prowling import __version__

            self._write_file(f"({self._opened_at:%H:%M:%S}  Started Prowling {__version__})")

    def _screen_text(self, output: str, prefix: str = "") -> Text:
        # Plain Text keeps release titles like "[1080p]" from being read as markup.
        rendered = Text()
        if prefix:
            rendered.append(prefix, style=_PREFIX_STYLES.get(prefix, "grey50"))
        rendered.append(output)
        return rendered

    def _write_file(self, line: str) -> None:
        if self._handle is None:
            return
        self._handle.write(f"{line}\n")
        self._handle.flush()
        os.fsync(self._handle.fileno())

    def log(self, msg: str, prefix: str = ""):
        self._console.print(self._screen_text(msg, prefix))
        self._write_file(prefix + msg)

    def info(self, msg: str):
        self.log(msg, INFO_PREFIX)

    def warning(self, msg: str):
        self.log(msg, WARNING_PREFIX)

    def error(self, msg: str):
        self.log(msg, ERROR_PREFIX)

    def debug(self, msg: str):
        if not self.debug_mode:
            return
        self.log(msg, f"[{_stamp()}] [DEBUG] ")

    def api_request(self, method: str, url: str, params: Optional[dict] = None):
        """Trace an outgoing request and its body or form fields."""
        if not self.debug_mode:
            return
        prefix = f"[{_stamp()}] "
        self.log(f"API Request: {method} {url}", prefix)
        if params:
            self.log(f"  Params: {_dump(params)}", prefix)

    def api_response(self, status: int, data: Any, elapsed_ms: float):
        """Trace a response; large bodies are cut at MAX_LOGGED_PAYLOAD characters."""
        if not self.debug_mode:
            return
        prefix = f"[{_stamp()}] "
        self.log(f"API Response ({elapsed_ms:.0f}ms): Status {status}", prefix)
        if data:
            self.log(f"  Data: {_dump(data)}", prefix)

    def close(self):
        if self._handle is None:
            return
        elapsed = (datetime.now() - self._opened_at).total_seconds()
        self._write_file(f"({datetime.now():%H:%M:%S}  Ended session, elapsed {elapsed:.1f}s)")
        self._handle.close()
        self._handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# Installed by the CLI once config is loaded; screen-only until then.
_logger: Optional[ProwlingLogger] = None


def set_logger(logger: ProwlingLogger):
    global _logger
    _logger = logger


def get_logger() -> ProwlingLogger:
    global _logger
    if _logger is None:
        _logger = ProwlingLogger()
    return _logger


def log(msg: str):
    get_logger().log(msg)


def info(msg: str):
    get_logger().info(msg)


def warning(msg: str):
    get_logger().warning(msg)


def error(msg: str):
    get_logger().error(msg)


def debug(msg: str):
    get_logger().debug(msg)
