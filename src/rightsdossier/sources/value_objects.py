"""Frozen, identity-less types passed between pipeline stages.

A CandidateSource is something the grounded search actually reported;
a Citation is what the dossier shows. The extraction stage is the only
place that turns one into the other, and it always copies the URI from
the candidate, never from model output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rightsdossier.constants import AnalysisKind, Scope


@dataclass(frozen=True)
class CandidateSource:
    """A (title, uri) pair observed from one grounded retrieval call."""

    title: str
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "uri": self.uri}


@dataclass(frozen=True)
class Citation:
    """A citeable source shown to the user (a.k.a. legal instrument)."""

    title: str
    uri: str
    reference: str
    date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "uri": self.uri,
            "reference": self.reference,
        }
        if self.date:
            data["date"] = self.date
        return data


@dataclass(frozen=True)
class RetrievalResult:
    """Output of the grounded retrieval stage."""

    text: str
    candidates: tuple[CandidateSource, ...] = ()


@dataclass(frozen=True)
class AnalysisRequest:
    """One user action asking for a dossier."""

    kind: AnalysisKind
    right_name: str
    scope: Scope
    sub_scope: str = ""
    second_right: str | None = None


@dataclass(frozen=True)
class DialogueResult:
    """Ordered citations plus the raw grounding list kept for audit.

    ``degraded`` marks the static fallback returned when the pipeline
    could not complete.
    """

    sources: tuple[Citation, ...] = ()
    grounding_urls: tuple[CandidateSource, ...] = field(default=())
    degraded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "sources": [s.to_dict() for s in self.sources],
            "groundingUrls": [g.to_dict() for g in self.grounding_urls],
            "degraded": self.degraded,
        }
