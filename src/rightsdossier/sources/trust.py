"""Domain trust filter for candidate sources.

Pure and total: every input yields a bool, nothing touches the network.
Matching is a case-insensitive substring test on the URI. For the
academic category a deny pattern (paywalled, abstract-only pages) wins
over any allow pattern.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from rightsdossier.constants import GROUNDING_REDIRECT_HOSTS, SourceCategory
from rightsdossier.sources.institutions import (
    ACADEMIC_DENY_PATTERNS,
    trusted_domains,
)
from rightsdossier.sources.value_objects import CandidateSource


@dataclass(frozen=True)
class TrustRule:
    """Allow and deny substrings for one source category."""

    allow: tuple[str, ...]
    deny: tuple[str, ...] = ()

    def accepts(self, uri: str) -> bool:
        lowered = uri.lower()
        if not any(p in lowered for p in self.allow):
            return False
        return not any(p in lowered for p in self.deny)


TRUST_RULES: MappingProxyType[SourceCategory, TrustRule] = MappingProxyType({
    SourceCategory.LEGAL: TrustRule(
        allow=trusted_domains(SourceCategory.LEGAL)
    ),
    SourceCategory.NGO: TrustRule(allow=trusted_domains(SourceCategory.NGO)),
    SourceCategory.ACADEMIC: TrustRule(
        allow=trusted_domains(SourceCategory.ACADEMIC),
        deny=ACADEMIC_DENY_PATTERNS,
    ),
})

# Unknown categories get no allow patterns, so they reject everything.
_REJECT_ALL = TrustRule(allow=())


def rule_for(category: SourceCategory | str) -> TrustRule:
    try:
        return TRUST_RULES.get(SourceCategory(category), _REJECT_ALL)
    except (ValueError, TypeError):
        return _REJECT_ALL


def is_acceptable(uri: object, category: SourceCategory | str) -> bool:
    """True if ``uri`` is from a trusted domain for ``category``."""
    if not isinstance(uri, str) or not uri:
        return False
    return rule_for(category).accepts(uri)


def is_grounding_redirect(uri: str) -> bool:
    lowered = uri.lower()
    return any(host in lowered for host in GROUNDING_REDIRECT_HOSTS)


def candidate_is_acceptable(
    candidate: CandidateSource, category: SourceCategory | str
) -> bool:
    """Judge a candidate by its URI, or by its title for redirect links.

    Search-grounding redirect URIs hide the publisher; the grounding
    API reports the publisher's domain as the title instead.
    """
    if is_grounding_redirect(candidate.uri):
        return is_acceptable(candidate.title, category)
    return is_acceptable(candidate.uri, category)


def filter_candidates(
    candidates: Iterable[CandidateSource],
    category: SourceCategory | str,
) -> list[CandidateSource]:
    """Acceptable candidates, in their original order."""
    return [c for c in candidates if candidate_is_acceptable(c, category)]
