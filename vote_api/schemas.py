from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class AdminLogin(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ChoiceStats(BaseModel):
    count: int = 0
    percentage: str = "0.00"


class StatsOut(BaseModel):
    total: int
    stats: Dict[str, ChoiceStats]
    latestVotes: List[Dict[str, Any]] = []
