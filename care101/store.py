"""Mini README: In-memory document store for doctors, ledgers and records.

Structure:
    * InMemoryStore - keyed collections of doctors, hospital ledgers and
      surgery records with count and lookup helpers.

The store stands in for the document database. Callers own its lifecycle:
the application factory builds one per app and tests build their own, so
there is no module-level instance. ``lock`` is re-entrant and lets a caller
run a quota check and the following insert without interleaving with other
callers of the same store.
"""

from __future__ import annotations

import threading
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from .errors import NotFoundError
from .finance.ledger import Hospital, add_record
from .logging_utils import get_logger
from .records.models import SurgeryRecord
from .subscriptions.models import Doctor, Subscription, SubscriptionPlan

LOGGER = get_logger(__name__)


class InMemoryStore:
    """Hold Care101 documents keyed by generated identifiers."""

    def __init__(self) -> None:
        self._doctors: Dict[str, Doctor] = {}
        self._hospitals: Dict[str, Hospital] = {}
        self._surgery_records: Dict[str, SurgeryRecord] = {}
        self._sequences: Dict[str, int] = {}
        self.lock = threading.RLock()

    @classmethod
    def with_demo_data(cls) -> "InMemoryStore":
        """Build a store populated with deterministic demo documents."""

        store = cls()
        store._seed_demo_data()
        LOGGER.debug("Seeded demo store with %s doctors", len(store._doctors))
        return store

    def _seed_demo_data(self) -> None:
        free_doctor = self.add_doctor(
            name="Dr. Nimal Perera",
            email="nimal.perera@care101.lk",
            specialization="General Surgeon",
        )
        premium_doctor = self.add_doctor(
            name="Dr. Ayesha Fernando",
            email="ayesha.fernando@care101.lk",
            specialization="Orthopaedic Surgeon",
            subscription=Subscription(plan=SubscriptionPlan.PREMIUM),
        )

        asiri = self.save_hospital(
            Hospital(
                hospital_id=self.next_hospital_id(),
                doctor_id=free_doctor.doctor_id,
                name="Asiri Central",
                wht_enabled=True,
            )
        )
        add_record(asiri, {"type": "channeling", "date": date(2024, 5, 2), "patients": 18, "income": 27000})
        add_record(asiri, {"type": "surgical", "date": date(2024, 5, 9), "bht": "BHT-4412", "amount": 85000})

        for name, wht_enabled, entries in (
            ("Nawaloka", False, [{"type": "channeling", "date": date(2024, 5, 3), "patients": 25, "income": 40000}]),
            ("Lanka Hospitals", True, [{"type": "surgical", "date": date(2024, 5, 12), "bht": "LH-88", "amount": 120000}]),
        ):
            hospital = self.save_hospital(
                Hospital(
                    hospital_id=self.next_hospital_id(),
                    doctor_id=premium_doctor.doctor_id,
                    name=name,
                    wht_enabled=wht_enabled,
                )
            )
            for payload in entries:
                add_record(hospital, payload)

        record = self.save_surgery_record(
            SurgeryRecord(
                record_id=self.next_surgery_record_id(),
                doctor_id=free_doctor.doctor_id,
                name="K. Silva",
                surgery_card_image="cards/k-silva.jpg",
                hospital="Asiri Central",
                created_at=datetime(2024, 5, 9, 8, 30, tzinfo=timezone.utc),
            )
        )
        record.add_entry(
            "Wound clean, sutures intact.",
            recorded_at=datetime(2024, 5, 12, 9, 0, tzinfo=timezone.utc),
        )

    def _next_id(self, prefix: str) -> str:
        """Generate a deterministic identifier for ``prefix`` documents."""

        with self.lock:
            self._sequences[prefix] = self._sequences.get(prefix, 0) + 1
            return f"{prefix}_{self._sequences[prefix]:04d}"

    # Doctors

    def add_doctor(
        self,
        *,
        name: str,
        email: str,
        specialization: str = "General Practitioner",
        subscription: Optional[Subscription] = None,
        doctor_id: Optional[str] = None,
    ) -> Doctor:
        doctor = Doctor(
            doctor_id=doctor_id or self._next_id("doc"),
            name=name,
            email=email,
            specialization=specialization,
            subscription=subscription or Subscription(),
        )
        if doctor.doctor_id in self._doctors:
            raise ValueError(f"Doctor {doctor.doctor_id} already exists.")
        self._doctors[doctor.doctor_id] = doctor
        return doctor

    def get_doctor(self, doctor_id: str) -> Doctor:
        if doctor_id not in self._doctors:
            raise NotFoundError(f"Doctor {doctor_id} not found")
        return self._doctors[doctor_id]

    # Hospital ledgers

    def next_hospital_id(self) -> str:
        return self._next_id("hsp")

    def save_hospital(self, hospital: Hospital) -> Hospital:
        self._hospitals[hospital.hospital_id] = hospital
        return hospital

    def get_hospital(self, hospital_id: str) -> Hospital:
        if hospital_id not in self._hospitals:
            raise NotFoundError(f"Hospital {hospital_id} not found")
        return self._hospitals[hospital_id]

    def hospitals_for(self, doctor_id: str) -> List[Hospital]:
        """Return the doctor's hospitals in creation order."""

        return [hospital for hospital in self._hospitals.values() if hospital.doctor_id == doctor_id]

    def count_hospitals(self, doctor_id: str) -> int:
        return len(self.hospitals_for(doctor_id))

    def delete_hospital(self, hospital_id: str) -> None:
        self._hospitals.pop(hospital_id, None)

    # Surgery records

    def next_surgery_record_id(self) -> str:
        return self._next_id("srg")

    def save_surgery_record(self, record: SurgeryRecord) -> SurgeryRecord:
        self._surgery_records[record.record_id] = record
        return record

    def find_surgery_record(self, record_id: str) -> Optional[SurgeryRecord]:
        return self._surgery_records.get(record_id)

    def get_surgery_record(self, record_id: str) -> SurgeryRecord:
        record = self.find_surgery_record(record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found")
        return record

    def surgery_records_for(self, doctor_id: str) -> List[SurgeryRecord]:
        """Return the doctor's surgery records newest-first."""

        return sorted(
            (record for record in self._surgery_records.values() if record.doctor_id == doctor_id),
            key=lambda record: (record.created_at, record.record_id),
            reverse=True,
        )

    def count_surgery_records(self, doctor_id: str) -> int:
        return sum(1 for record in self._surgery_records.values() if record.doctor_id == doctor_id)

    def delete_surgery_record(self, record_id: str) -> None:
        self._surgery_records.pop(record_id, None)
