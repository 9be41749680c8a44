# backend/schemas.py

import math
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DealStatus(str, Enum):
    REVIEWING = "Reviewing"
    LOI_SUBMITTED = "LOI Submitted"
    DUE_DILIGENCE = "Due Diligence"
    NEGOTIATING = "Negotiating"
    PASSED = "Passed"
    CLOSED = "Closed"


STATUSES = tuple(status.value for status in DealStatus)
ACTIVE_STATUSES = (
    DealStatus.LOI_SUBMITTED.value,
    DealStatus.DUE_DILIGENCE.value,
    DealStatus.NEGOTIATING.value,
)

# Leading numeric prefix, the way a browser's parseFloat reads "120000abc" as 120000
NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_number(value: Any) -> float:
    """Coerce user or store input to a float; anything unreadable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = NUMBER_PREFIX.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


class DealPayload(BaseModel):
    """Fields sent to the store on insert/update (no identifier, no timestamps)."""

    business_name: str
    asking_price: float
    sde: float
    industry: str
    status: DealStatus = DealStatus.REVIEWING
    location: str
    notes: str = ""

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class Deal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    business_name: str
    asking_price: float = 0.0
    sde: float = 0.0
    industry: str = ""
    status: DealStatus = DealStatus.REVIEWING
    location: str = ""
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("asking_price", "sde", mode="before")
    @classmethod
    def numeric_or_zero(cls, v):
        return to_number(v)

    @field_validator("industry", "location", mode="before")
    @classmethod
    def text_or_blank(cls, v):
        return "" if v is None else v


class DealStats(BaseModel):
    total: int = 0
    avg_price: float = 0.0
    status_counts: Dict[str, int] = Field(default_factory=lambda: {s: 0 for s in STATUSES})

    @property
    def active(self) -> int:
        return sum(self.status_counts.get(status, 0) for status in ACTIVE_STATUSES)

    @property
    def closed(self) -> int:
        return self.status_counts.get(DealStatus.CLOSED.value, 0)
