"""Structured JSON-lines logger for dossier requests and stages.

One line per record in ``<log_dir>/dossier.log``. Records share a
``request_id`` so a dialogue run can be followed from its stage records
to the final request summary.
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from rightsdossier.constants import ERROR_TRUNCATION_CHARS

__all__ = ["DossierLogger"]

_LOGGER_NAME = "rightsdossier.dossier"


def _clip(text: str | None) -> str | None:
    return None if text is None else text[:ERROR_TRUNCATION_CHARS]


class DossierLogger:
    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger(_LOGGER_NAME)
        self._logger.setLevel(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        )
        if not self._logger.handlers:
            handler = logging.FileHandler(log_dir / "dossier.log")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def _emit(
        self, level: int, record_type: str, request_id: str, **fields: Any
    ) -> None:
        record = {
            "type": record_type,
            "timestamp": datetime.now(UTC).isoformat(),
            "request_id": request_id,
            **fields,
        }
        self._logger.log(level, json.dumps(record, ensure_ascii=False))

    def log_request(
        self,
        request_id: str,
        kind: str,
        query: str,
        candidates: int,
        accepted: int,
        citations: int,
        degraded: bool,
        duration_ms: float,
    ) -> None:
        """Summary of a finished dialogue run, degraded or not."""
        self._emit(
            logging.INFO,
            "request",
            request_id,
            kind=kind,
            query=_clip(query),
            candidates=candidates,
            accepted=accepted,
            citations=citations,
            degraded=degraded,
            duration_ms=duration_ms,
        )

    def log_stage(
        self,
        request_id: str,
        stage_name: str,
        status: str,
        duration_ms: float,
        error: str | None = None,
    ) -> None:
        self._emit(
            logging.INFO,
            "stage",
            request_id,
            stage=stage_name,
            status=status,
            duration_ms=duration_ms,
            error=_clip(error),
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
        error_class: str | None = None,
    ) -> None:
        self._emit(
            logging.ERROR,
            "error",
            request_id,
            component=component,
            error=_clip(error),
            error_class=error_class,
        )
