# backend/form.py

import logging
from typing import Dict, Optional

from .errors import RefreshError, StoreError, ValidationError
from .repository import DealRepository
from .schemas import NUMBER_PREFIX, STATUSES, Deal, DealPayload, DealStatus, to_number
from .store import RecordId

logger = logging.getLogger(__name__)

DEFAULT_FIELDS: Dict[str, str] = {
    "business_name": "",
    "asking_price": "",
    "sde": "",
    "industry": "",
    "status": DealStatus.REVIEWING.value,
    "location": "",
    "notes": "",
}

REQUIRED_FIELDS = ("business_name", "asking_price", "sde", "industry", "status", "location")
NUMERIC_FIELDS = ("asking_price", "sde")

FIELD_LABELS = {
    "business_name": "Business Name",
    "asking_price": "Asking Price",
    "sde": "SDE",
    "industry": "Industry",
    "status": "Status",
    "location": "Location",
    "notes": "Notes",
}


def _number_text(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class DealFormController:
    """Draft state for the add/edit deal form.

    The form is either closed, open in create mode (no bound id) or open in
    edit mode (bound to an existing deal). Field values are kept as text, the
    way they are typed, and only coerced to numbers on submit.
    """

    def __init__(self, repository: DealRepository):
        self.repository = repository
        self._fields: Dict[str, str] = dict(DEFAULT_FIELDS)
        self._editing_id: Optional[RecordId] = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def editing_id(self) -> Optional[RecordId]:
        return self._editing_id

    @property
    def mode(self) -> str:
        if not self._open:
            return "closed"
        return "edit" if self._editing_id is not None else "create"

    @property
    def draft(self) -> Dict[str, str]:
        return dict(self._fields)

    @property
    def title(self) -> str:
        return "Edit Deal" if self._editing_id is not None else "Add New Deal"

    @property
    def submit_label(self) -> str:
        return "Update Deal" if self._editing_id is not None else "Add Deal"

    def start_create(self) -> None:
        self._reset()
        self._open = True

    def start_edit(self, deal: Deal) -> None:
        self._editing_id = deal.id
        self._fields = {
            "business_name": deal.business_name,
            "asking_price": _number_text(deal.asking_price),
            "sde": _number_text(deal.sde),
            "industry": deal.industry,
            "status": deal.status.value,
            "location": deal.location,
            "notes": deal.notes or "",
        }
        self._open = True

    def update_fields(self, **values: str) -> None:
        unknown = set(values) - set(DEFAULT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        for name, value in values.items():
            self._fields[name] = "" if value is None else str(value)

    def validate(self) -> None:
        missing = [name for name in REQUIRED_FIELDS if not self._fields.get(name, "").strip()]
        if missing:
            labels = ", ".join(FIELD_LABELS[name] for name in missing)
            raise ValidationError(f"Please fill in: {labels}", fields=missing)
        if self._fields["status"] not in STATUSES:
            raise ValidationError(f"Unknown status: {self._fields['status']}", fields=["status"])

    def build_payload(self) -> DealPayload:
        numbers = {}
        for name in NUMERIC_FIELDS:
            text = self._fields[name]
            numbers[name] = to_number(text)
            if numbers[name] == 0 and not NUMBER_PREFIX.match(text):
                logger.warning("Could not read %s %r as a number, using 0", name, text)
        return DealPayload(
            business_name=self._fields["business_name"],
            asking_price=numbers["asking_price"],
            sde=numbers["sde"],
            industry=self._fields["industry"],
            status=DealStatus(self._fields["status"]),
            location=self._fields["location"],
            notes=self._fields["notes"],
        )

    def submit(self) -> DealPayload:
        """Validate the draft and persist it through the repository.

        Raises ValidationError before anything is sent, or StoreError when the
        store rejects the write; either way the draft is left as it was. A
        RefreshError means the write went through, so the form is reset before
        it is raised.
        """
        self.validate()
        payload = self.build_payload()
        try:
            if self._editing_id is not None:
                self.repository.update(self._editing_id, payload)
            else:
                self.repository.create(payload)
        except RefreshError:
            self._reset()
            raise
        except StoreError:
            logger.warning("Keeping %s draft after failed save", self.mode)
            raise
        self._reset()
        return payload

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._fields = dict(DEFAULT_FIELDS)
        self._editing_id = None
        self._open = False
