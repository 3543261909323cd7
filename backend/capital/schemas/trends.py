"""
Dashboard trend schemas.
"""

from pydantic import BaseModel
from typing import List, Optional

from capital.services.trends_service import TrendKind


class TrendSeries(BaseModel):
    id: str
    label: str
    data: List[Optional[float]]
    liability: bool = False


class TrendResponse(BaseModel):
    kind: TrendKind
    year: int
    series: List[TrendSeries]
    net_worth: Optional[float] = None
    empty: bool
    message: Optional[str] = None
