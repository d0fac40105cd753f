from typing_extensions import TypedDict, Literal, NotRequired
from typing import Any, Dict, List, Optional, Union

FantasyProfile = Literal[
    "half_ppr_4pt",
    "half_ppr_6pt",
    "full_ppr_4pt",
    "full_ppr_6pt",
    "standard_4pt",
    "standard_6pt",
]

FantasyPosition = Literal["QB", "RB", "WR", "TE", "FLEX"]

class RankItem(TypedDict):
    player_id: str
    full_name: str
    position: FantasyPosition
    team_abbr: str
    team_id: Union[str, int]
    score: float
    proj_key: str
    event_id: NotRequired[str]
    home_team: NotRequired[str]
    away_team: NotRequired[str]
    commence_time: NotRequired[str]

class RankResponse(TypedDict):
    profile: FantasyProfile
    position: FantasyPosition
    items: List[RankItem]
    updatedAt: NotRequired[str]

class CompareIdentity(TypedDict):
    player_id: Optional[str]
    full_name: Optional[str]
    position: Optional[str]
    team_abbr: Optional[str]
    team_name: Optional[str]
    headshot_url: Optional[str]

class CompareItem(TypedDict):
    proj_key: str
    identity: CompareIdentity
    event_total: Optional[float]
    home_spread: Optional[float]
    home_team: Optional[str]
    away_team: Optional[str]
    inputs: Optional[Dict[str, Any]]
    projections: Optional[Dict[str, Any]]
    fantasy_points: Dict[str, float]
