"""Mini README: Hospital income ledgers and their withholding tax summaries.

Structure:
    * IncomeKind - enum of channeling versus surgical income.
    * ChannelingRecord / SurgicalRecord - the two variants of an income record.
    * Hospital - a doctor's ledger at one hospital, records newest-first.
    * HospitalSummary - channeling/surgical subtotals and the payable total.
    * summarize_hospital - reduce a ledger into a HospitalSummary.
    * build_income_record / add_record / delete_record - ledger mutations.
    * round_half_up - display rounding used by dashboards.

Missing amounts are treated as zero rather than rejected, so partially
filled records from the mobile forms still contribute to totals. Rounding
happens only when a figure is displayed; summaries keep full precision.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Dict, List, Mapping, Optional, Union

from ..errors import NotFoundError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

WHT_RATE = 0.05

_CHANNELING_FIELDS = ("patients", "income")
_SURGICAL_FIELDS = ("bht", "amount")


class IncomeKind(str, Enum):
    """Enumerate the supported income record categories."""

    CHANNELING = "channeling"
    SURGICAL = "surgical"

    @classmethod
    def from_str(cls, value: str) -> "IncomeKind":
        """Coerce arbitrary casing into a valid income kind."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported record type: {value}") from error


@dataclass(frozen=True, slots=True)
class ChannelingRecord:
    """Consultation session income for a day."""

    record_id: str
    occurred_on: date
    patient_count: Optional[int] = None
    income: Optional[float] = None

    kind: ClassVar[IncomeKind] = IncomeKind.CHANNELING

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.record_id,
            "type": self.kind.value,
            "date": self.occurred_on.isoformat(),
            "patients": self.patient_count,
            "income": self.income,
            "bht": None,
            "amount": None,
        }


@dataclass(frozen=True, slots=True)
class SurgicalRecord:
    """Flat fee for a surgery tied to a hospital admission (BHT)."""

    record_id: str
    occurred_on: date
    bht: Optional[str] = None
    amount: Optional[float] = None

    kind: ClassVar[IncomeKind] = IncomeKind.SURGICAL

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.record_id,
            "type": self.kind.value,
            "date": self.occurred_on.isoformat(),
            "patients": None,
            "income": None,
            "bht": self.bht,
            "amount": self.amount,
        }


IncomeRecord = Union[ChannelingRecord, SurgicalRecord]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Hospital:
    """A doctor's finance ledger at a single hospital.

    Records live in an arena keyed by ``record_id``; iteration order is
    newest-first because new records are always prepended.
    """

    hospital_id: str
    doctor_id: str
    name: str
    wht_enabled: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    _records: Dict[str, IncomeRecord] = field(default_factory=dict, init=False, repr=False)
    _sequence: int = field(default=0, init=False, repr=False)

    @property
    def records(self) -> List[IncomeRecord]:
        """Return records newest-first."""

        return list(self._records.values())

    def next_record_id(self) -> str:
        """Generate a record identifier unique within this ledger."""

        self._sequence += 1
        return f"rec_{self._sequence:04d}"

    def get_record(self, record_id: str) -> IncomeRecord:
        if record_id not in self._records:
            raise NotFoundError(f"Record {record_id} not found in hospital {self.hospital_id}")
        return self._records[record_id]

    def prepend(self, record: IncomeRecord) -> None:
        """Insert ``record`` ahead of every existing record."""

        if record.record_id in self._records:
            raise ValueError(f"Record {record.record_id} already exists.")
        self._records = {record.record_id: record, **self._records}

    def remove(self, record_id: str) -> Optional[IncomeRecord]:
        """Drop a record by id, returning it or ``None`` when absent."""

        return self._records.pop(record_id, None)

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.hospital_id,
            "doctorId": self.doctor_id,
            "name": self.name,
            "whtEnabled": self.wht_enabled,
            "records": [record.as_dict() for record in self.records],
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class HospitalSummary:
    """Reporting figures for one hospital ledger, unrounded."""

    hospital_id: str
    name: str
    wht_enabled: bool
    channeling_income: float
    surgical_income: float
    gross_total: float
    total_payable: float

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.hospital_id,
            "name": self.name,
            "whtEnabled": self.wht_enabled,
            "channelingIncome": self.channeling_income,
            "surgicalIncome": self.surgical_income,
            "totalPayable": self.total_payable,
        }


def summarize_hospital(hospital: Hospital, wht_rate: float = WHT_RATE) -> HospitalSummary:
    """Sum channeling and surgical income and apply withholding tax."""

    channeling_income = 0.0
    surgical_income = 0.0
    for record in hospital.records:
        if isinstance(record, ChannelingRecord):
            channeling_income += record.income or 0
        elif isinstance(record, SurgicalRecord):
            surgical_income += record.amount or 0

    gross_total = channeling_income + surgical_income
    total_payable = gross_total * (1.0 - wht_rate) if hospital.wht_enabled else gross_total
    return HospitalSummary(
        hospital_id=hospital.hospital_id,
        name=hospital.name,
        wht_enabled=hospital.wht_enabled,
        channeling_income=channeling_income,
        surgical_income=surgical_income,
        gross_total=gross_total,
        total_payable=total_payable,
    )


def round_half_up(value: float) -> int:
    """Round for display, sending halves towards positive infinity."""

    return math.floor(value + 0.5)


def _parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as error:
            raise ValueError(f"Invalid record date: {value}") from error
    raise ValueError("Record date must be provided as an ISO string or date/datetime instance.")


def _parse_amount(value: object, field_name: str) -> Optional[float]:
    """Coerce money values, leaving missing values as ``None``."""

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Field '{field_name}' must be numeric.")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValueError(f"Field '{field_name}' must be numeric.") from error
    if not math.isfinite(number):
        raise ValueError(f"Field '{field_name}' must be a finite number.")
    return number


def _parse_count(value: object, field_name: str) -> Optional[int]:
    number = _parse_amount(value, field_name)
    if number is None:
        return None
    if not number.is_integer():
        raise ValueError(f"Field '{field_name}' must be a whole number.")
    return int(number)


def build_income_record(record_id: str, payload: Mapping[str, object]) -> IncomeRecord:
    """Create the record variant named by ``payload['type']``.

    Only the fields of that variant are read; the other variant's fields are
    dropped rather than zeroed.
    """

    if payload.get("type") is None:
        raise ValueError("Record type is required.")
    kind = IncomeKind.from_str(str(payload["type"]))
    occurred_on = _parse_date(payload.get("date"))

    if kind is IncomeKind.CHANNELING:
        ignored = [name for name in _SURGICAL_FIELDS if payload.get(name) is not None]
        record: IncomeRecord = ChannelingRecord(
            record_id=record_id,
            occurred_on=occurred_on,
            patient_count=_parse_count(payload.get("patients"), "patients"),
            income=_parse_amount(payload.get("income"), "income"),
        )
    else:
        ignored = [name for name in _CHANNELING_FIELDS if payload.get(name) is not None]
        bht = payload.get("bht")
        record = SurgicalRecord(
            record_id=record_id,
            occurred_on=occurred_on,
            bht=str(bht) if bht not in (None, "") else None,
            amount=_parse_amount(payload.get("amount"), "amount"),
        )

    if ignored:
        LOGGER.debug("Dropped %s fields %s from record %s", kind.value, ignored, record_id)
    return record


def add_record(hospital: Hospital, payload: Mapping[str, object]) -> IncomeRecord:
    """Build a record from ``payload`` and prepend it to the ledger."""

    record = build_income_record(hospital.next_record_id(), payload)
    hospital.prepend(record)
    LOGGER.info(
        "Added %s record %s to hospital %s", record.kind.value, record.record_id, hospital.hospital_id
    )
    return record


def delete_record(hospital: Hospital, record_id: str) -> Hospital:
    """Remove a record by id; unknown ids leave the ledger untouched."""

    removed = hospital.remove(record_id)
    if removed is None:
        LOGGER.debug(
            "Record %s not present in hospital %s; nothing deleted", record_id, hospital.hospital_id
        )
    else:
        LOGGER.info("Deleted record %s from hospital %s", record_id, hospital.hospital_id)
    return hospital
