"""Mini README: Hospital ledger management scoped to the owning doctor.

Structure:
    * FinanceManager - create, read, and delete hospital ledgers and their
      income records.

Hospitals owned by another doctor are reported as missing. Adding a hospital
goes through the plan guard while holding the store lock so two concurrent
requests cannot both pass the free plan quota.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Mapping

from ..errors import NotFoundError
from ..logging_utils import get_logger
from ..subscriptions.guard import PlanAction, PlanLimitGuard
from .ledger import Hospital, IncomeRecord, add_record, delete_record

if TYPE_CHECKING:  # pragma: no cover
    from ..store import InMemoryStore

LOGGER = get_logger(__name__)


class FinanceManager:
    """Manage a doctor's hospital ledgers."""

    def __init__(self, store: "InMemoryStore", guard: PlanLimitGuard) -> None:
        self._store = store
        self._guard = guard

    def list_hospitals(self, doctor_id: str) -> List[Hospital]:
        return self._store.hospitals_for(doctor_id)

    def get_hospital(self, doctor_id: str, hospital_id: str) -> Hospital:
        """Retrieve a ledger, raising ``NotFoundError`` for foreign ledgers."""

        hospital = self._store.get_hospital(hospital_id)
        if hospital.doctor_id != doctor_id:
            raise NotFoundError(f"Hospital {hospital_id} not found")
        return hospital

    def add_hospital(self, doctor_id: str, name: str, wht_enabled: bool = False) -> Hospital:
        if not name or not name.strip():
            raise ValueError("Hospital name is required.")
        with self._store.lock:
            self._guard.enforce(doctor_id, PlanAction.ADD_HOSPITAL)
            hospital = self._store.save_hospital(
                Hospital(
                    hospital_id=self._store.next_hospital_id(),
                    doctor_id=doctor_id,
                    name=name.strip(),
                    wht_enabled=wht_enabled,
                )
            )
        LOGGER.info("Doctor %s added hospital %s (%s)", doctor_id, hospital.hospital_id, hospital.name)
        return hospital

    def delete_hospital(self, doctor_id: str, hospital_id: str) -> None:
        with self._store.lock:
            self.get_hospital(doctor_id, hospital_id)
            self._store.delete_hospital(hospital_id)
        LOGGER.info("Doctor %s deleted hospital %s", doctor_id, hospital_id)

    def add_record(
        self, doctor_id: str, hospital_id: str, payload: Mapping[str, object]
    ) -> IncomeRecord:
        with self._store.lock:
            hospital = self.get_hospital(doctor_id, hospital_id)
            return add_record(hospital, payload)

    def delete_record(self, doctor_id: str, hospital_id: str, record_id: str) -> Hospital:
        with self._store.lock:
            hospital = self.get_hospital(doctor_id, hospital_id)
            return delete_record(hospital, record_id)
