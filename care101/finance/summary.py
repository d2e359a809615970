"""Mini README: Finance rollups for the doctor dashboard.

Structure:
    * DashboardStats - headline figures for the doctor dashboard.
    * FinanceSummaryService - summarises every ledger a doctor owns.

``dashboard_stats`` adds the unrounded payable totals of all hospitals and
rounds the grand total once, so per-hospital rounding drift does not
accumulate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List

from ..logging_utils import get_logger
from .ledger import WHT_RATE, HospitalSummary, round_half_up, summarize_hospital

if TYPE_CHECKING:  # pragma: no cover
    from ..store import InMemoryStore

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Dashboard headline numbers for one doctor."""

    name: str
    specialization: str
    income: int
    records: int

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "specialization": self.specialization,
            "income": self.income,
            "records": self.records,
        }


class FinanceSummaryService:
    """Aggregate hospital ledgers across a doctor's account."""

    def __init__(self, store: "InMemoryStore", *, wht_rate: float = WHT_RATE) -> None:
        self._store = store
        self.wht_rate = wht_rate

    def hospital_summaries(self, doctor_id: str) -> List[HospitalSummary]:
        """Summarise each hospital the doctor tracks."""

        self._store.get_doctor(doctor_id)
        summaries = [
            summarize_hospital(hospital, self.wht_rate)
            for hospital in self._store.hospitals_for(doctor_id)
        ]
        LOGGER.debug("Summarised %s hospitals for doctor %s", len(summaries), doctor_id)
        return summaries

    def dashboard_stats(self, doctor_id: str) -> DashboardStats:
        """Return total payable income and surgery record count."""

        doctor = self._store.get_doctor(doctor_id)
        total_payable = sum(summary.total_payable for summary in self.hospital_summaries(doctor_id))
        stats = DashboardStats(
            name=doctor.name or "Doctor",
            specialization=doctor.specialization or "Specialist",
            income=round_half_up(total_payable),
            records=self._store.count_surgery_records(doctor_id),
        )
        LOGGER.debug(
            "Dashboard stats for doctor %s -> income: %s records: %s",
            doctor_id,
            stats.income,
            stats.records,
        )
        return stats
