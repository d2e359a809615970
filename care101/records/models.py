"""Mini README: Surgery record value types.

Structure:
    * ProgressEntry - dated notes and image references for a patient.
    * SurgeryRecord - a patient's surgery card with progress entries.

Entries are kept newest-first; ``add_entry`` always prepends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ProgressEntry:
    """Follow-up notes recorded against a surgery record."""

    entry_id: str
    recorded_at: datetime = field(default_factory=_utcnow)
    notes: str = ""
    images: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.entry_id,
            "date": self.recorded_at.isoformat(),
            "notes": self.notes,
            "images": list(self.images),
        }


@dataclass(slots=True)
class SurgeryRecord:
    """Patient surgery card owned by a doctor."""

    record_id: str
    doctor_id: str
    name: str
    surgery_card_image: str
    nic: Optional[str] = None
    hospital: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    entries: List[ProgressEntry] = field(default_factory=list)
    _sequence: int = field(default=0, init=False, repr=False)

    def add_entry(
        self,
        notes: str = "",
        images: Optional[List[str]] = None,
        *,
        recorded_at: Optional[datetime] = None,
    ) -> ProgressEntry:
        """Prepend a new progress entry and return it."""

        self._sequence += 1
        entry = ProgressEntry(
            entry_id=f"ent_{self._sequence:04d}",
            recorded_at=recorded_at or _utcnow(),
            notes=notes,
            images=list(images or []),
        )
        self.entries.insert(0, entry)
        return entry

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.record_id,
            "doctorId": self.doctor_id,
            "name": self.name,
            "nic": self.nic,
            "hospital": self.hospital,
            "surgeryCardImage": self.surgery_card_image,
            "entries": [entry.as_dict() for entry in self.entries],
            "createdAt": self.created_at.isoformat(),
        }
