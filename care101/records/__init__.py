"""Mini README: Patient surgery records and their progress entries."""

from .manager import SurgeryRecordManager
from .models import ProgressEntry, SurgeryRecord

__all__ = ["ProgressEntry", "SurgeryRecord", "SurgeryRecordManager"]
