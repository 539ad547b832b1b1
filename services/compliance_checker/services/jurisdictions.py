"""
Jurisdiction Labels
===================

Maps a business location onto the flat jurisdiction labels used by
regulation records (Federal, state name, county label, city name).

Version: 0.1.0
"""

from dataclasses import dataclass

from shared.models.business import Location
from shared.models.regulation import FEDERAL


STATE_NAMES: dict[str, str] = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "DC": "District of Columbia",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}


@dataclass(frozen=True)
class JurisdictionLabels:
    """The four jurisdiction tiers a location belongs to."""

    federal: str
    state: str
    county: str
    city: str

    def as_set(self) -> frozenset[str]:
        return frozenset((self.federal, self.state, self.county, self.city))

    def is_federal_or_state(self, jurisdiction: str) -> bool:
        return jurisdiction in (self.federal, self.state)


def state_label(state_code: str) -> str:
    """Full state name for a two-letter code; unknown codes map to themselves."""
    code = state_code.strip().upper()
    return STATE_NAMES.get(code, code)


def county_label(county: str) -> str:
    """County jurisdiction label, e.g. ``Kern`` -> ``Kern County``."""
    county = county.strip()
    if county.lower().endswith(" county") or county.lower() == "county":
        return county
    return f"{county} County"


def jurisdiction_labels(location: Location) -> JurisdictionLabels:
    """Build every jurisdiction label that applies to a location."""
    return JurisdictionLabels(
        federal=FEDERAL,
        state=state_label(location.state),
        county=county_label(location.county),
        city=location.city.strip(),
    )
