"""Search directives for the grounded retrieval stage.

Pure string composition, no error path. Institutions and domains named
here come from the institution registry, the same records the trust
filter is built from.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from urllib.parse import quote_plus

from rightsdossier.constants import Scope
from rightsdossier.sources.institutions import (
    GLOBAL_LEGAL,
    OHCHR,
    OPEN_SCHOLARSHIP,
    REGIONAL_SYSTEMS,
    STATUS_MONITORS,
    UNITED_NATIONS,
    Institution,
    RegionalSystem,
    match_regional_system,
)

CORE_INSTRUMENTS = (
    "Universal Declaration of Human Rights (1948)",
    "International Covenant on Civil and Political Rights (1966)",
    "International Covenant on Economic, Social and Cultural Rights (1966)",
)

THEMATIC_INSTRUMENTS = (
    "Convention against Torture (1984)",
    "Convention on the Elimination of All Forms of Discrimination against Women (1979)",
    "Convention on the Rights of the Child (1989)",
    "International Convention on the Elimination of All Forms of Racial Discrimination (1965)",
)

_CITATION_FORMAT = """\
For EACH source provide:
1. FULL OFFICIAL NAME with YEAR in parentheses
2. The SPECIFIC ARTICLE NUMBER that protects this right
3. The EXACT TEXT of that article (a direct quote, not a summary)"""


def _domains(institutions: Iterable[Institution]) -> str:
    return ", ".join(d for inst in institutions for d in inst.domains)


def _bullets(lines: Iterable[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _international(right_name: str) -> str:
    return (
        f"Find the international treaties and declarations that protect "
        f"the right to {right_name}.\n\n"
        f"Prioritize these global instruments:\n"
        f"{_bullets(CORE_INSTRUMENTS)}\n"
        f"and, where relevant, the thematic core treaties:\n"
        f"{_bullets(THEMATIC_INSTRUMENTS)}\n\n"
        f"Prefer official texts and treaty-body material hosted on "
        f"{_domains(GLOBAL_LEGAL)}."
    )


def _regional(right_name: str, system: RegionalSystem) -> str:
    names = "; ".join(inst.name for inst in system.institutions)
    return (
        f"Find how the {system.label} regional human rights system "
        f"protects the right to {right_name}.\n\n"
        f"Prioritize these instruments:\n"
        f"{_bullets(system.instruments)}\n"
        f"and the case law or general comments of: {names}.\n\n"
        f"Prefer official sources hosted on "
        f"{_domains(system.institutions)}."
    )


def _regional_generic(right_name: str) -> str:
    lines = [
        f"{s.label}: {'; '.join(s.instruments)} "
        f"({_domains(s.institutions)})"
        for s in REGIONAL_SYSTEMS
    ]
    return (
        f"Find how the regional human rights systems protect the right "
        f"to {right_name}. Cover the systems below, citing each one's "
        f"main charter or convention and its court or commission:\n"
        f"{_bullets(lines)}"
    )


def _national(right_name: str, sub_scope: str) -> str:
    return (
        f"Find the constitutional and statutory provisions of "
        f"{sub_scope} that protect the right to {right_name}.\n\n"
        f"Include the relevant article of the constitution of "
        f"{sub_scope}, the main national statutes implementing it, and "
        f"the international treaties {sub_scope} has ratified that "
        f"cover this right. Prefer official government, legislature or "
        f"court websites of {sub_scope}, and {_domains([OHCHR])} for "
        f"ratification status."
    )


def _national_examples(right_name: str) -> str:
    return (
        f"Give representative examples of how national constitutions "
        f"and statutes protect the right to {right_name}. Choose "
        f"several countries from different regions and legal "
        f"traditions, citing the constitutional article for each. "
        f"Prefer official government websites and "
        f"{_domains([UNITED_NATIONS, OHCHR])}."
    )


def build_instruction(
    scope: Scope | str, sub_scope: str | None, right_name: str
) -> str:
    """Retrieval directive for a legal-framework dossier."""
    sub = (sub_scope or "").strip()
    if scope == Scope.REGIONAL:
        system = match_regional_system(sub) if sub else None
        body = (
            _regional(right_name, system)
            if system is not None
            else _regional_generic(right_name)
        )
    elif scope == Scope.NATIONAL:
        body = (
            _national(right_name, sub)
            if sub
            else _national_examples(right_name)
        )
    else:
        body = _international(right_name)
    return f"{body}\n\n{_CITATION_FORMAT}"


def _jurisdiction_label(scope: Scope | str, sub_scope: str) -> str:
    if scope != Scope.INTERNATIONAL and sub_scope:
        return sub_scope
    return "the world"


def build_status_query(
    right_name: str,
    scope: Scope | str,
    sub_scope: str | None,
    year: int | None = None,
) -> str:
    """Retrieval directive for a current-status (NGO report) dossier."""
    current = year or datetime.now(UTC).year
    where = _jurisdiction_label(scope, (sub_scope or "").strip())
    monitors = ", ".join(inst.name for inst in STATUS_MONITORS[:3])
    return (
        f"List specific real reports from {monitors}, or UN human "
        f"rights bodies about {right_name} in {where} from "
        f"{current - 1}-{current}.\n\n"
        f"For EACH report provide:\n"
        f"1. EXACT report title as published\n"
        f"2. Organization name and month/year\n"
        f"3. A DIRECT QUOTE (not summary) from the report about "
        f"{right_name}\n\n"
        f"Prefer reports hosted on {_domains(STATUS_MONITORS)}, "
        f"{_domains([OHCHR])}."
    )


def build_nexus_query(
    from_right: str,
    to_right: str,
    scope: Scope | str,
    sub_scope: str | None,
) -> str:
    """Retrieval directive for a rights-nexus (scholarship) dossier."""
    where = _jurisdiction_label(scope, (sub_scope or "").strip())
    return (
        f"Find open-access scholarship on how {from_right} and "
        f"{to_right} are interconnected in human rights law and "
        f"practice, with attention to {where}.\n\n"
        f"Discuss:\n"
        f"1. How violations of {from_right} lead to or enable "
        f"violations of {to_right}\n"
        f"2. How protecting {to_right} strengthens {from_right}\n"
        f"3. Real-world cases where both rights are affected together\n"
        f"4. Constitutional or international law principles linking "
        f"them\n\n"
        f"Prefer full-text papers from university repositories and "
        f"{_domains(OPEN_SCHOLARSHIP[:2])}; avoid abstract-only or "
        f"paywalled pages."
    )


def scholar_search_url(from_right: str, to_right: str) -> str:
    """Google Scholar query for papers discussing both rights."""
    q = f'"{from_right}" AND "{to_right}" human rights law'
    return f"https://scholar.google.com/scholar?q={quote_plus(q)}"
