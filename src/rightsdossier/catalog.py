"""Static rights catalog and jurisdiction lists.

Loaded once at import and never mutated. The pipeline only reads it:
the semantic matcher sends it to the model as the closed set of valid
identifiers, and the API serves it to the board.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rightsdossier.constants import RightCategory, Scope


@dataclass(frozen=True)
class HumanRight:
    """A catalog entry derived from one UDHR article."""

    id: str
    name: str
    category: RightCategory
    summary: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "name": self.name,
            "category": str(self.category),
            "summary": self.summary,
        }


def _r(
    id_: str, name: str, category: RightCategory, summary: str
) -> HumanRight:
    return HumanRight(id=id_, name=name, category=category, summary=summary)


_C = RightCategory

RIGHTS: tuple[HumanRight, ...] = (
    _r("1", "Freedom & Equality", _C.CIVIL, "All human beings are born free and equal in dignity and rights."),
    _r("2", "Non-Discrimination", _C.CIVIL, "Everyone is entitled to all rights without distinction of any kind."),
    _r("3", "Life & Security", _C.CIVIL, "Everyone has the right to life, liberty and security of person."),
    _r("4", "No Slavery", _C.CIVIL, "No one shall be held in slavery or servitude."),
    _r("5", "No Torture", _C.CIVIL, "No one shall be subjected to torture or degrading treatment."),
    _r("6", "Recognition", _C.CIVIL, "Right to recognition everywhere as a person before the law."),
    _r("7", "Equality", _C.CIVIL, "All are equal before the law and entitled to equal protection."),
    _r("8", "Legal Remedy", _C.CIVIL, "Right to an effective remedy by competent national tribunals."),
    _r("9", "No Arbitrary Arrest", _C.CIVIL, "No one shall be subjected to arbitrary arrest or detention."),
    _r("10", "Fair Trial", _C.CIVIL, "Right to a fair and public hearing by an independent tribunal."),
    _r("11", "Innocence", _C.CIVIL, "Right to be presumed innocent until proved guilty."),
    _r("12", "Privacy", _C.CIVIL, "No arbitrary interference with privacy, family, or home."),
    _r("13", "Movement", _C.CIVIL, "Right to freedom of movement and residence within borders."),
    _r("14", "Asylum", _C.CIVIL, "Right to seek and enjoy in other countries asylum from persecution."),
    _r("15", "Nationality", _C.CIVIL, "Everyone has the right to a nationality."),
    _r("16", "Marriage", _C.SOCIAL, "Right to marry and found a family with free and full consent."),
    _r("17", "Property", _C.ECONOMIC, "Everyone has the right to own property alone or in association."),
    _r("18", "Religion", _C.CIVIL, "Right to freedom of thought, conscience and religion."),
    _r("19", "Expression", _C.CIVIL, "Right to freedom of opinion and expression."),
    _r("20", "Assembly", _C.POLITICAL, "Right to freedom of peaceful assembly and association."),
    _r("21", "Democracy", _C.POLITICAL, "Right to take part in the government of his country."),
    _r("22", "Social Security", _C.SOCIAL, "Everyone has the right to social security."),
    _r("23", "Work", _C.ECONOMIC, "Right to work, to free choice of employment, and fair pay."),
    _r("24", "Rest", _C.SOCIAL, "Right to rest and leisure, including reasonable limitation of hours."),
    _r("25", "Standard of Living", _C.SOCIAL, "Right to a standard of living adequate for health and well-being."),
    _r("26", "Education", _C.SOCIAL, "Right to education. Education shall be free, at least in stages."),
    _r("27", "Culture", _C.CULTURAL, "Right freely to participate in the cultural life of the community."),
    _r("28", "Order", _C.POLITICAL, "Entitled to a social and international order."),
    _r("29", "Duties", _C.CIVIL, "Everyone has duties to the community."),
    _r("30", "Limits", _C.CIVIL, "Nothing may be interpreted as implying any right to destroy others."),
)

_RIGHTS_BY_ID: dict[str, HumanRight] = {r.id: r for r in RIGHTS}

COUNTRIES: tuple[str, ...] = (
    "Afghanistan", "Albania", "Algeria", "Andorra", "Angola", "Antigua and Barbuda", "Argentina", "Armenia", "Australia", "Austria",
    "Azerbaijan", "Bahamas", "Bahrain", "Bangladesh", "Barbados", "Belarus", "Belgium", "Belize", "Benin", "Bhutan",
    "Bolivia", "Bosnia and Herzegovina", "Botswana", "Brazil", "Brunei", "Bulgaria", "Burkina Faso", "Burundi", "Cabo Verde", "Cambodia",
    "Cameroon", "Canada", "Central African Republic", "Chad", "Chile", "China", "Colombia", "Comoros", "Congo", "Costa Rica",
    "Croatia", "Cuba", "Cyprus", "Czech Republic", "Denmark", "Djibouti", "Dominica", "Dominican Republic", "East Timor", "Ecuador",
    "Egypt", "El Salvador", "Equatorial Guinea", "Eritrea", "Estonia", "Eswatini", "Ethiopia", "Fiji", "Finland", "France",
    "Gabon", "Gambia", "Georgia", "Germany", "Ghana", "Greece", "Grenada", "Guatemala", "Guinea", "Guinea-Bissau",
    "Guyana", "Haiti", "Honduras", "Hungary", "Iceland", "India", "Indonesia", "Iran", "Iraq", "Ireland",
    "Israel", "Italy", "Ivory Coast", "Jamaica", "Japan", "Jordan", "Kazakhstan", "Kenya", "Kiribati", "Korea, North",
    "Korea, South", "Kosovo", "Kuwait", "Kyrgyzstan", "Laos", "Latvia", "Lebanon", "Lesotho", "Liberia", "Libya",
    "Liechtenstein", "Lithuania", "Luxembourg", "Madagascar", "Malawi", "Malaysia", "Maldives", "Mali", "Malta", "Marshall Islands",
    "Mauritania", "Mauritius", "Mexico", "Micronesia", "Moldova", "Monaco", "Mongolia", "Montenegro", "Morocco", "Mozambique",
    "Myanmar", "Namibia", "Nauru", "Nepal", "Netherlands", "New Zealand", "Nicaragua", "Niger", "Nigeria", "North Macedonia",
    "Norway", "Oman", "Pakistan", "Palau", "Panama", "Papua New Guinea", "Paraguay", "Peru", "Philippines", "Poland",
    "Portugal", "Qatar", "Romania", "Russia", "Rwanda", "Saint Kitts and Nevis", "Saint Lucia", "Saint Vincent", "Samoa", "San Marino",
    "Sao Tome and Principe", "Saudi Arabia", "Senegal", "Serbia", "Seychelles", "Sierra Leone", "Singapore", "Slovakia", "Slovenia", "Solomon Islands",
    "Somalia", "South Africa", "South Sudan", "Spain", "Sri Lanka", "Sudan", "Suriname", "Sweden", "Switzerland", "Syria",
    "Taiwan", "Tajikistan", "Tanzania", "Thailand", "Togo", "Tonga", "Trinidad and Tobago", "Tunisia", "Turkey", "Turkmenistan",
    "Tuvalu", "Uganda", "Ukraine", "United Arab Emirates", "United Kingdom", "United States", "Uruguay", "Uzbekistan", "Vanuatu", "Vatican City",
    "Venezuela", "Vietnam", "Yemen", "Zambia", "Zimbabwe",
)

REGIONS: tuple[str, ...] = (
    "OEA (Americas)",
    "European Union",
    "African Union",
    "ASEAN",
    "Arab League",
)


def get_right(right_id: str) -> HumanRight | None:
    """Look up a catalog entry by its identifier."""
    return _RIGHTS_BY_ID.get(right_id)


def get_right_by_name(name: str) -> HumanRight | None:
    """Case-insensitive lookup by display name."""
    needle = name.strip().lower()
    for right in RIGHTS:
        if right.name.lower() == needle:
            return right
    return None


def rights_by_category(
    category: RightCategory | str,
    rights: Iterable[HumanRight] = RIGHTS,
) -> list[HumanRight]:
    return [r for r in rights if r.category == category]


def jurisdiction_options(scope: Scope, query: str = "") -> list[str]:
    """Sub-scope choices for a scope; national options filter by ``query``."""
    if scope == Scope.REGIONAL:
        return list(REGIONS)
    if scope != Scope.NATIONAL:
        return []
    needle = query.strip().lower()
    if not needle:
        return list(COUNTRIES)
    return [c for c in COUNTRIES if needle in c.lower()]


def filter_rights(
    rights: Iterable[HumanRight],
    term: str,
    semantic_ids: Iterable[str] = (),
    category: RightCategory | str | None = None,
) -> list[HumanRight]:
    """Rights matching ``term`` by keyword OR by semantic identifier.

    Keyword matching is a case-insensitive substring test on name and
    summary. An empty term returns every right (of ``category``).
    """
    pool = [
        r for r in rights if category is None or r.category == category
    ]
    needle = term.strip().lower()
    if not needle:
        return pool
    ids = set(semantic_ids)
    return [
        r
        for r in pool
        if needle in r.name.lower()
        or (r.summary is not None and needle in r.summary.lower())
        or r.id in ids
    ]
