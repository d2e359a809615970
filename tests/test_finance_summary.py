"""Mini README: Tests for the finance summary service and ledger manager.

Structure:
    * dashboard tests - grand total rounding and surgery record counts.
    * manager tests - ownership scoping and quota denial on add_hospital.
"""

from __future__ import annotations

import threading
import time

import pytest

from care101.errors import NotFoundError, QuotaExceededError
from care101.finance import FinanceManager, FinanceSummaryService, round_half_up
from care101.records import SurgeryRecordManager
from care101.store import InMemoryStore
from care101.subscriptions import PlanLimitGuard, Subscription, SubscriptionPlan


def _premium_store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_doctor(
        doctor_id="doc_1",
        name="Dr. Premium",
        email="premium@care101.lk",
        specialization="Cardiologist",
        subscription=Subscription(plan=SubscriptionPlan.PREMIUM),
    )
    store.add_doctor(doctor_id="doc_2", name="Dr. Other", email="other@care101.lk")
    return store


def test_dashboard_rounds_grand_total_once() -> None:
    """Payables of 1000.40 and 2000.40 give 3001, not the per-hospital rounded sum."""

    store = _premium_store()
    manager = FinanceManager(store, PlanLimitGuard(store))
    first = manager.add_hospital("doc_1", "Nawaloka")
    second = manager.add_hospital("doc_1", "Durdans")
    manager.add_record("doc_1", first.hospital_id, {"type": "channeling", "date": "2024-05-01", "income": 1000.40})
    manager.add_record("doc_1", second.hospital_id, {"type": "surgical", "date": "2024-05-01", "amount": 2000.40})

    service = FinanceSummaryService(store)
    summaries = service.hospital_summaries("doc_1")
    stats = service.dashboard_stats("doc_1")

    assert [summary.total_payable for summary in summaries] == pytest.approx([1000.40, 2000.40])
    assert stats.income == 3001
    assert stats.income != sum(round_half_up(summary.total_payable) for summary in summaries)


def test_dashboard_counts_surgery_records() -> None:
    store = _premium_store()
    records = SurgeryRecordManager(store, PlanLimitGuard(store))
    for name in ("A. Perera", "B. Silva", "C. Dias"):
        records.create_record("doc_1", name=name, surgery_card_image="card.jpg")
    records.create_record("doc_2", name="D. Other", surgery_card_image="card.jpg")

    stats = FinanceSummaryService(store).dashboard_stats("doc_1")

    assert stats.records == 3
    assert stats.as_dict() == {
        "name": "Dr. Premium",
        "specialization": "Cardiologist",
        "income": 0,
        "records": 3,
    }


def test_dashboard_applies_configured_wht_rate() -> None:
    store = _premium_store()
    manager = FinanceManager(store, PlanLimitGuard(store))
    hospital = manager.add_hospital("doc_1", "Asiri", wht_enabled=True)
    manager.add_record("doc_1", hospital.hospital_id, {"type": "channeling", "date": "2024-05-01", "income": 10000})

    assert FinanceSummaryService(store, wht_rate=0.1).dashboard_stats("doc_1").income == 9000
    assert FinanceSummaryService(store).dashboard_stats("doc_1").income == 9500


def test_dashboard_unknown_doctor() -> None:
    with pytest.raises(NotFoundError):
        FinanceSummaryService(InMemoryStore()).dashboard_stats("doc_missing")


def test_manager_scopes_hospitals_to_owner() -> None:
    store = _premium_store()
    manager = FinanceManager(store, PlanLimitGuard(store))
    hospital = manager.add_hospital("doc_1", "Asiri")

    with pytest.raises(NotFoundError):
        manager.get_hospital("doc_2", hospital.hospital_id)
    with pytest.raises(NotFoundError):
        manager.delete_hospital("doc_2", hospital.hospital_id)
    assert FinanceSummaryService(store).hospital_summaries("doc_2") == []

    manager.delete_hospital("doc_1", hospital.hospital_id)
    assert manager.list_hospitals("doc_1") == []


def test_manager_denies_second_hospital_on_free_plan() -> None:
    store = _premium_store()
    manager = FinanceManager(store, PlanLimitGuard(store))
    manager.add_hospital("doc_2", "Asiri")

    with pytest.raises(QuotaExceededError):
        manager.add_hospital("doc_2", "Nawaloka")
    assert store.count_hospitals("doc_2") == 1


def test_manager_rejects_blank_hospital_name() -> None:
    store = _premium_store()

    with pytest.raises(ValueError):
        FinanceManager(store, PlanLimitGuard(store)).add_hospital("doc_1", "   ")


def test_manager_delete_unknown_record_returns_hospital() -> None:
    store = _premium_store()
    manager = FinanceManager(store, PlanLimitGuard(store))
    hospital = manager.add_hospital("doc_1", "Asiri")
    manager.add_record("doc_1", hospital.hospital_id, {"type": "surgical", "date": "2024-05-01", "amount": 10})

    returned = manager.delete_record("doc_1", hospital.hospital_id, "rec_0404")

    assert returned is hospital
    assert len(returned.records) == 1


def test_hospital_summaries_unknown_doctor() -> None:
    with pytest.raises(NotFoundError):
        FinanceSummaryService(InMemoryStore()).hospital_summaries("doc_missing")


def test_add_record_waiting_on_lock_sees_deleted_hospital() -> None:
    """A record add queued behind a delete reports the hospital as missing."""

    store = _premium_store()
    manager = FinanceManager(store, PlanLimitGuard(store))
    hospital = manager.add_hospital("doc_1", "Asiri")
    outcomes = []

    def attempt() -> None:
        try:
            manager.add_record("doc_1", hospital.hospital_id, {"type": "surgical", "date": "2024-05-01", "amount": 10})
            outcomes.append("added")
        except NotFoundError:
            outcomes.append("missing")

    with store.lock:
        worker = threading.Thread(target=attempt)
        worker.start()
        time.sleep(0.05)
        manager.delete_hospital("doc_1", hospital.hospital_id)
    worker.join()

    assert outcomes == ["missing"]
    assert hospital.records == []
