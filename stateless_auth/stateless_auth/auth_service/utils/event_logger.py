"""
Event logger utility for authentication events.
"""
import logging
import os
import sys
from typing import Optional

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "signup_success",
    "signup_failure",
    "login_success",
    "login_failure",
    "access_granted",
    "access_denied",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure stdout logging, plus a file handler when ``log_dir`` is given.

    When the root logger already has handlers (an earlier call, or the hosting
    server), they are kept: the level is applied and only a new file handler
    is added.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "auth_events.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers)
        return

    root.setLevel(numeric_level)
    for handler in handlers[1:]:
        if any(getattr(h, "baseFilename", None) == handler.baseFilename for h in root.handlers):
            handler.close()
            continue
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def _escape(value) -> str:
    # Request-supplied values must not be able to start a new log line
    return str(value).replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


def log_auth_event(event_type: str, **details) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of: signup_success, signup_failure, login_success,
                    login_failure, access_granted, access_denied
        **details: Context written as key=value pairs (user_id, email, reason).
                   Never pass passwords, hashes or tokens.

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    fields = " ".join(f"{key}={_escape(value)}" for key, value in details.items())
    level = logging.WARNING if event_type.endswith(("_failure", "_denied")) else logging.INFO
    logger.log(level, "AUTH %s %s", event_type, fields)
