"""Registry of institutions the pipeline names and trusts.

Instruction text and trust patterns are both derived from these
records. An institution the builder tells the search to prefer is
therefore always trusted for the categories it is registered under.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from rightsdossier.constants import SourceCategory

_LEGAL = SourceCategory.LEGAL
_NGO = SourceCategory.NGO
_ACADEMIC = SourceCategory.ACADEMIC


@dataclass(frozen=True)
class Institution:
    """An organisation whose web domains are trusted for some categories."""

    name: str
    domains: tuple[str, ...]
    categories: frozenset[SourceCategory]


@dataclass(frozen=True)
class RegionalSystem:
    """A regional human-rights system selected by sub-scope keywords."""

    label: str
    keywords: tuple[str, ...]
    instruments: tuple[str, ...]
    institutions: tuple[Institution, ...]


# ── Global ───────────────────────────────────────────────

OHCHR = Institution(
    "UN Office of the High Commissioner for Human Rights",
    ("ohchr.org",),
    frozenset({_LEGAL, _NGO}),
)
UNITED_NATIONS = Institution(
    "United Nations",
    ("un.org", "treaties.un.org", "undocs.org"),
    frozenset({_LEGAL, _NGO}),
)
UN_AGENCIES = Institution(
    "UN specialised agencies",
    ("ilo.org", "unesco.org", "who.int", "unhcr.org", "unicef.org"),
    frozenset({_LEGAL, _NGO}),
)
REFWORLD = Institution(
    "Refworld",
    ("refworld.org",),
    frozenset({_LEGAL}),
)
ICRC = Institution(
    "International Committee of the Red Cross",
    ("icrc.org",),
    frozenset({_LEGAL, _NGO}),
)

GLOBAL_LEGAL: tuple[Institution, ...] = (
    OHCHR,
    UNITED_NATIONS,
    UN_AGENCIES,
    REFWORLD,
    ICRC,
)

# ── Regional systems ─────────────────────────────────────

COUNCIL_OF_EUROPE = Institution(
    "European Court of Human Rights / Council of Europe",
    ("echr.coe.int", "hudoc.echr.coe.int", "coe.int"),
    frozenset({_LEGAL}),
)
EUROPEAN_UNION = Institution(
    "European Union (EUR-Lex, Fundamental Rights Agency)",
    ("eur-lex.europa.eu", "fra.europa.eu", "curia.europa.eu"),
    frozenset({_LEGAL, _NGO}),
)
AFRICAN_COMMISSION = Institution(
    "African Commission on Human and Peoples' Rights",
    ("achpr.au.int", "achpr.org"),
    frozenset({_LEGAL, _NGO}),
)
AFRICAN_COURT = Institution(
    "African Court on Human and Peoples' Rights",
    ("african-court.org", "au.int"),
    frozenset({_LEGAL}),
)
INTER_AMERICAN_COMMISSION = Institution(
    "Inter-American Commission on Human Rights",
    ("oas.org",),
    frozenset({_LEGAL, _NGO}),
)
INTER_AMERICAN_COURT = Institution(
    "Inter-American Court of Human Rights",
    ("corteidh.or.cr",),
    frozenset({_LEGAL}),
)
ASEAN_COMMISSION = Institution(
    "ASEAN Intergovernmental Commission on Human Rights",
    ("asean.org", "aichr.org"),
    frozenset({_LEGAL}),
)
ARAB_LEAGUE = Institution(
    "League of Arab States",
    ("lasportal.org",),
    frozenset({_LEGAL}),
)

EUROPEAN = RegionalSystem(
    label="European",
    keywords=("europe", "european"),
    instruments=(
        "European Convention on Human Rights (1950)",
        "Charter of Fundamental Rights of the European Union (2000)",
        "European Social Charter (1961, revised 1996)",
    ),
    institutions=(COUNCIL_OF_EUROPE, EUROPEAN_UNION),
)
AFRICAN = RegionalSystem(
    label="African",
    keywords=("african", "africa"),
    instruments=(
        "African Charter on Human and Peoples' Rights (1981)",
        "Protocol to the African Charter on the Rights of Women in Africa (2003)",
    ),
    institutions=(AFRICAN_COMMISSION, AFRICAN_COURT),
)
INTER_AMERICAN = RegionalSystem(
    label="Inter-American",
    keywords=("inter-american", "america", "americas", "oea", "oas"),
    instruments=(
        "American Convention on Human Rights (1969)",
        "American Declaration of the Rights and Duties of Man (1948)",
        "Protocol of San Salvador (1988)",
    ),
    institutions=(INTER_AMERICAN_COMMISSION, INTER_AMERICAN_COURT),
)
ASEAN = RegionalSystem(
    label="ASEAN",
    keywords=("asean", "southeast asia"),
    instruments=("ASEAN Human Rights Declaration (2012)",),
    institutions=(ASEAN_COMMISSION,),
)
ARAB = RegionalSystem(
    label="Arab",
    keywords=("arab",),
    instruments=("Arab Charter on Human Rights (2004)",),
    institutions=(ARAB_LEAGUE,),
)

REGIONAL_SYSTEMS: tuple[RegionalSystem, ...] = (
    EUROPEAN,
    AFRICAN,
    INTER_AMERICAN,
    ASEAN,
    ARAB,
)

# ── NGOs and research ────────────────────────────────────

STATUS_MONITORS: tuple[Institution, ...] = (
    Institution("Human Rights Watch", ("hrw.org",), frozenset({_NGO})),
    Institution(
        "Amnesty International", ("amnesty.org",), frozenset({_NGO})
    ),
    Institution("Freedom House", ("freedomhouse.org",), frozenset({_NGO})),
    Institution(
        "International Commission of Jurists",
        ("icj.org",),
        frozenset({_NGO}),
    ),
    Institution(
        "International Federation for Human Rights",
        ("fidh.org",),
        frozenset({_NGO}),
    ),
    Institution(
        "Minority Rights Group", ("minorityrights.org",), frozenset({_NGO})
    ),
    Institution(
        "Press freedom monitors",
        ("article19.org", "rsf.org", "cpj.org"),
        frozenset({_NGO}),
    ),
    Institution(
        "Digital rights monitors",
        ("privacyinternational.org", "accessnow.org", "eff.org"),
        frozenset({_NGO}),
    ),
    Institution(
        "Business & Human Rights Resource Centre",
        ("business-humanrights.org",),
        frozenset({_NGO}),
    ),
    Institution("ReliefWeb", ("reliefweb.int",), frozenset({_NGO})),
)

OPEN_SCHOLARSHIP: tuple[Institution, ...] = (
    Institution(
        "Preprint and working-paper servers",
        ("arxiv.org", "ssrn.com", "hal.science", "osf.io"),
        frozenset({_ACADEMIC}),
    ),
    Institution(
        "Open repositories and indexes",
        (
            "core.ac.uk",
            "europepmc.org",
            "ncbi.nlm.nih.gov",
            "semanticscholar.org",
            "doaj.org",
            "scholar.google.com",
        ),
        frozenset({_ACADEMIC}),
    ),
    Institution(
        "University presses and journals",
        (
            "cambridge.org",
            "academic.oup.com",
            "tandfonline.com",
            "link.springer.com",
            "journals.sagepub.com",
            "onlinelibrary.wiley.com",
            "sciencedirect.com",
            "jstor.org",
            "muse.jhu.edu",
            "brill.com",
            "ejil.org",
            "doi.org",
        ),
        frozenset({_ACADEMIC}),
    ),
)

# Generic patterns that are not tied to one institution.
GENERIC_PATTERNS: dict[SourceCategory, tuple[str, ...]] = {
    _LEGAL: (
        ".gov",
        ".gouv.",
        ".gob.",
        "legislation.gov.uk",
        "gesetze-im-internet.de",
        "constituteproject.org",
        "legifrance.gouv.fr",
    ),
    _NGO: (),
    _ACADEMIC: (
        ".edu",
        ".ac.uk",
        ".ac.",
        "repository.",
        "digitalcommons.",
        "scholarship.",
    ),
}

# Abstract-only or paywalled landing pages.
ACADEMIC_DENY_PATTERNS: tuple[str, ...] = (
    "/doi/abs/",
    "/science/article/abs/",
    "/article-abstract/",
    "/abstract/",
    "researchgate.net",
    "academia.edu",
    "/purchase",
    "/paywall",
)


def all_institutions() -> tuple[Institution, ...]:
    regional = tuple(
        inst for system in REGIONAL_SYSTEMS for inst in system.institutions
    )
    return GLOBAL_LEGAL + regional + STATUS_MONITORS + OPEN_SCHOLARSHIP


def trusted_domains(category: SourceCategory) -> tuple[str, ...]:
    """Allow patterns for ``category``: institution domains then generics."""
    seen: dict[str, None] = {}
    for inst in all_institutions():
        if category in inst.categories:
            for domain in inst.domains:
                seen.setdefault(domain.lower(), None)
    for pattern in GENERIC_PATTERNS.get(category, ()):
        seen.setdefault(pattern.lower(), None)
    return tuple(seen)


def match_regional_system(sub_scope: str) -> RegionalSystem | None:
    """Regional system with a keyword appearing as a whole word in ``sub_scope``."""
    lowered = sub_scope.lower()
    for system in REGIONAL_SYSTEMS:
        if any(
            re.search(rf"\b{re.escape(kw)}\b", lowered)
            for kw in system.keywords
        ):
            return system
    return None
