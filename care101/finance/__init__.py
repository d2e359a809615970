"""Mini README: Finance ledgers for doctors' hospital income.

``ledger`` holds the record types and the withholding tax aggregation,
``manager`` the doctor-scoped ledger CRUD, and ``summary`` the rollups shown
on the finance screen and the dashboard.
"""

from .ledger import (
    WHT_RATE,
    ChannelingRecord,
    Hospital,
    HospitalSummary,
    IncomeKind,
    IncomeRecord,
    SurgicalRecord,
    add_record,
    build_income_record,
    delete_record,
    round_half_up,
    summarize_hospital,
)
from .manager import FinanceManager
from .summary import DashboardStats, FinanceSummaryService

__all__ = [
    "WHT_RATE",
    "ChannelingRecord",
    "DashboardStats",
    "FinanceManager",
    "FinanceSummaryService",
    "Hospital",
    "HospitalSummary",
    "IncomeKind",
    "IncomeRecord",
    "SurgicalRecord",
    "add_record",
    "build_income_record",
    "delete_record",
    "round_half_up",
    "summarize_hospital",
]
