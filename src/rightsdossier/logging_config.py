"""Process-wide logging, configured in two phases around the litellm import.

litellm reads ``LITELLM_LOG`` when it is first imported and attaches its
own StreamHandlers, so entry points call :func:`setup_logging` first,
import the rest of the package, then call
:func:`cleanup_third_party_handlers`. Both phases run once per process.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")
_SUPPRESSED_LOGGERS = (*_LITELLM_LOGGERS, "httpx", "httpcore", "google_genai")

_phase1_done = False
_phase2_done = False


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger before any module imports litellm.

    ``level`` defaults to the ``LOG_LEVEL`` environment variable, the
    same one Settings reads. At DEBUG, litellm is left verbose too;
    otherwise its own log level is capped at WARNING unless the user
    set ``LITELLM_LOG``.
    """
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    resolved = _resolve_level(level)
    os.environ.setdefault(
        "LITELLM_LOG", "DEBUG" if resolved <= logging.DEBUG else "WARNING"
    )
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    if resolved > logging.DEBUG:
        for name in _SUPPRESSED_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def cleanup_third_party_handlers() -> None:
    """Route litellm records through root only; call after imports."""
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
