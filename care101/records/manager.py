"""Mini README: Surgery record management for doctors.

Structure:
    * SurgeryRecordManager - create, list, delete surgery records and append
      progress entries, gated by the plan guard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ..errors import NotFoundError
from ..logging_utils import get_logger
from ..subscriptions.guard import PlanAction, PlanLimitGuard
from .models import ProgressEntry, SurgeryRecord

if TYPE_CHECKING:  # pragma: no cover
    from ..store import InMemoryStore

LOGGER = get_logger(__name__)


class SurgeryRecordManager:
    """Manage a doctor's surgery records and their progress entries."""

    def __init__(self, store: "InMemoryStore", guard: PlanLimitGuard) -> None:
        self._store = store
        self._guard = guard

    def list_records(self, doctor_id: str) -> List[SurgeryRecord]:
        return self._store.surgery_records_for(doctor_id)

    def get_record(self, doctor_id: str, record_id: str) -> SurgeryRecord:
        record = self._store.get_surgery_record(record_id)
        if record.doctor_id != doctor_id:
            raise NotFoundError(f"Record {record_id} not found")
        return record

    def create_record(
        self,
        doctor_id: str,
        *,
        name: str,
        surgery_card_image: str,
        nic: Optional[str] = None,
        hospital: Optional[str] = None,
    ) -> SurgeryRecord:
        """Create a surgery record once the plan quota allows it."""

        if not name or not surgery_card_image:
            raise ValueError("Name and Surgery Card Image are required")
        with self._store.lock:
            self._guard.enforce(doctor_id, PlanAction.CREATE_RECORD)
            record = self._store.save_surgery_record(
                SurgeryRecord(
                    record_id=self._store.next_surgery_record_id(),
                    doctor_id=doctor_id,
                    name=name,
                    surgery_card_image=surgery_card_image,
                    nic=nic,
                    hospital=hospital,
                )
            )
        LOGGER.info("Doctor %s created surgery record %s", doctor_id, record.record_id)
        return record

    def delete_record(self, doctor_id: str, record_id: str) -> None:
        self.get_record(doctor_id, record_id)
        self._store.delete_surgery_record(record_id)
        LOGGER.info("Doctor %s deleted surgery record %s", doctor_id, record_id)

    def add_entry(
        self,
        doctor_id: str,
        record_id: str,
        *,
        notes: Optional[str] = None,
        images: Optional[List[str]] = None,
    ) -> ProgressEntry:
        """Prepend a progress entry once the per-record quota allows it."""

        with self._store.lock:
            record = self.get_record(doctor_id, record_id)
            self._guard.enforce(doctor_id, PlanAction.ADD_ENTRY, record_id)
            entry = record.add_entry(notes or "", images)
        LOGGER.info("Added entry %s to surgery record %s", entry.entry_id, record_id)
        return entry
