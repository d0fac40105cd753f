# fantasy_nexus/services/nfl_teams.py
from __future__ import annotations

from typing import Dict, Optional

TEAM_ABBR_TO_NAME: Dict[str, str] = {
    "ARI": "Arizona Cardinals",
    "ATL": "Atlanta Falcons",
    "BAL": "Baltimore Ravens",
    "BUF": "Buffalo Bills",
    "CAR": "Carolina Panthers",
    "CHI": "Chicago Bears",
    "CIN": "Cincinnati Bengals",
    "CLE": "Cleveland Browns",
    "DAL": "Dallas Cowboys",
    "DEN": "Denver Broncos",
    "DET": "Detroit Lions",
    "GB": "Green Bay Packers",
    "HOU": "Houston Texans",
    "IND": "Indianapolis Colts",
    "JAX": "Jacksonville Jaguars",
    "KC": "Kansas City Chiefs",
    "LV": "Las Vegas Raiders",
    "LAC": "Los Angeles Chargers",
    "LAR": "Los Angeles Rams",
    "MIA": "Miami Dolphins",
    "MIN": "Minnesota Vikings",
    "NE": "New England Patriots",
    "NO": "New Orleans Saints",
    "NYG": "New York Giants",
    "NYJ": "New York Jets",
    "PHI": "Philadelphia Eagles",
    "PIT": "Pittsburgh Steelers",
    "SEA": "Seattle Seahawks",
    "SF": "San Francisco 49ers",
    "TB": "Tampa Bay Buccaneers",
    "TEN": "Tennessee Titans",
    "WAS": "Washington Commanders",
}

_ALIASES = {
    "oakland raiders": "LV",
    "san diego chargers": "LAC",
    "st. louis rams": "LAR",
    "st louis rams": "LAR",
    "washington": "WAS",
    "washington football team": "WAS",
    "washington redskins": "WAS",
}


def _build_name_to_abbr() -> Dict[str, str]:
    out: Dict[str, str] = {}
    for abbr, full in TEAM_ABBR_TO_NAME.items():
        out[full.lower()] = abbr
        # city-only shortcut ("Los Angeles" ends up pointing at LAR, last one wins)
        city = " ".join(full.split(" ")[:-1])
        if city:
            out[city.lower()] = abbr
    out.update(_ALIASES)
    for abbr in TEAM_ABBR_TO_NAME:
        out[abbr.lower()] = abbr
    return out


TEAM_NAME_TO_ABBR = _build_name_to_abbr()


def team_abbr_from(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return TEAM_NAME_TO_ABBR.get(str(value).strip().lower())


def team_name_from_abbr(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return TEAM_ABBR_TO_NAME.get(str(value).strip().upper())
