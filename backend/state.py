# backend/state.py

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from .schemas import DealStatus

ALL_STATUSES = "all"

SortKey = Literal["created_at", "business_name", "asking_price", "sde", "status"]
SortOrder = Literal["asc", "desc"]
ViewMode = Literal["table", "card"]

SORT_LABELS = {
    "created_at": "Date Added",
    "business_name": "Business Name",
    "asking_price": "Asking Price",
    "sde": "SDE",
    "status": "Status",
}


class AppState(BaseModel):
    """Dashboard selections: which deals are shown, in what order, and how."""

    model_config = ConfigDict(frozen=True)

    status_filter: Union[Literal["all"], DealStatus] = ALL_STATUSES
    sort_key: SortKey = "created_at"
    sort_order: SortOrder = "desc"
    view_mode: ViewMode = "table"

    def toggle_sort_order(self) -> "AppState":
        return self.model_copy(update={"sort_order": "asc" if self.sort_order == "desc" else "desc"})
