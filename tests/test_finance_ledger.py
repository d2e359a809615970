"""Mini README: Tests covering hospital ledgers and income aggregation.

Structure:
    * summary tests - subtotals, withholding tax, and permissive missing fields.
    * mutation tests - newest-first ordering, dropped foreign fields, deletion.
"""

from __future__ import annotations

from datetime import date

import pytest

from care101.errors import NotFoundError
from care101.finance import (
    ChannelingRecord,
    Hospital,
    IncomeKind,
    SurgicalRecord,
    add_record,
    build_income_record,
    delete_record,
    round_half_up,
    summarize_hospital,
)


def _hospital(wht_enabled: bool = False) -> Hospital:
    return Hospital(hospital_id="hsp_0001", doctor_id="doc_0001", name="Asiri", wht_enabled=wht_enabled)


def test_summarize_applies_withholding_tax() -> None:
    """A WHT hospital pays 95% of combined channeling and surgical income."""

    hospital = _hospital(wht_enabled=True)
    add_record(hospital, {"type": "channeling", "date": "2024-05-01", "income": 10000})
    add_record(hospital, {"type": "surgical", "date": "2024-05-02", "amount": 5000})

    summary = summarize_hospital(hospital)

    assert summary.channeling_income == pytest.approx(10000)
    assert summary.surgical_income == pytest.approx(5000)
    assert summary.total_payable == pytest.approx(14250)
    assert summary.as_dict() == {
        "id": "hsp_0001",
        "name": "Asiri",
        "whtEnabled": True,
        "channelingIncome": summary.channeling_income,
        "surgicalIncome": summary.surgical_income,
        "totalPayable": summary.total_payable,
    }


@pytest.mark.parametrize(
    "incomes, amounts",
    [
        ([], []),
        ([1200.5], []),
        ([], [75000.0, 12000.25]),
        ([333.33, 666.67, 1000.01], [0.99]),
    ],
)
@pytest.mark.parametrize("wht_enabled", [False, True])
def test_total_payable_matches_gross(incomes, amounts, wht_enabled) -> None:
    """Payable equals gross, or 95% of gross when WHT is enabled."""

    hospital = _hospital(wht_enabled=wht_enabled)
    for income in incomes:
        add_record(hospital, {"type": "channeling", "date": date(2024, 1, 1), "income": income})
    for amount in amounts:
        add_record(hospital, {"type": "surgical", "date": date(2024, 1, 1), "amount": amount})

    summary = summarize_hospital(hospital)
    gross = sum(incomes) + sum(amounts)

    assert summary.gross_total == pytest.approx(gross)
    expected = gross * 0.95 if wht_enabled else gross
    assert summary.total_payable == pytest.approx(expected)


def test_missing_amounts_count_as_zero() -> None:
    """Records without income or amount contribute nothing instead of failing."""

    hospital = _hospital()
    add_record(hospital, {"type": "channeling", "date": "2024-05-01", "patients": 12})
    add_record(hospital, {"type": "surgical", "date": "2024-05-01", "bht": "BHT-1", "amount": ""})
    add_record(hospital, {"type": "surgical", "date": "2024-05-01", "amount": 800})

    summary = summarize_hospital(hospital)

    assert summary.channeling_income == 0
    assert summary.surgical_income == pytest.approx(800)
    assert summary.total_payable == pytest.approx(800)


def test_summarize_is_idempotent() -> None:
    hospital = _hospital(wht_enabled=True)
    add_record(hospital, {"type": "channeling", "date": "2024-05-01", "income": 4321.5})

    assert summarize_hospital(hospital) == summarize_hospital(hospital)


def test_records_are_newest_first() -> None:
    """New records are prepended so the latest entry appears first."""

    hospital = _hospital()
    first = add_record(hospital, {"type": "channeling", "date": "2024-05-01", "income": 1})
    second = add_record(hospital, {"type": "surgical", "date": "2024-04-01", "amount": 2})

    assert [record.record_id for record in hospital.records] == [second.record_id, first.record_id]
    assert first.record_id != second.record_id


def test_build_record_drops_other_kind_fields() -> None:
    """Channeling records ignore surgical fields and vice versa."""

    channeling = build_income_record(
        "rec_0001",
        {"type": "Channeling", "date": "2024-05-01T09:30:00.000Z", "patients": "14", "income": "2100", "amount": 99},
    )
    surgical = build_income_record(
        "rec_0002", {"type": "surgical", "date": "2024-05-01", "bht": 4412, "amount": 5000, "income": 7}
    )

    assert isinstance(channeling, ChannelingRecord)
    assert channeling.kind is IncomeKind.CHANNELING
    assert channeling.patient_count == 14
    assert channeling.income == pytest.approx(2100)
    assert channeling.occurred_on == date(2024, 5, 1)
    assert channeling.as_dict()["amount"] is None

    assert isinstance(surgical, SurgicalRecord)
    assert surgical.bht == "4412"
    assert surgical.as_dict()["income"] is None
    assert surgical.as_dict()["patients"] is None


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2024-05-01", "income": 10},
        {"type": "consultation", "date": "2024-05-01"},
        {"type": "channeling"},
        {"type": "channeling", "date": "yesterday"},
        {"type": "surgical", "date": "2024-05-01", "amount": "lots"},
        {"type": "channeling", "date": "2024-05-01", "patients": 2.5},
        {"type": "surgical", "date": "2024-05-01", "amount": "Infinity"},
        {"type": "surgical", "date": "2024-05-01", "amount": float("inf")},
        {"type": "channeling", "date": "2024-05-01", "income": "nan"},
        {"type": "channeling", "date": "2024-05-01", "patients": "-inf"},
    ],
)
def test_build_record_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ValueError):
        build_income_record("rec_0001", payload)


def test_delete_record_removes_by_id() -> None:
    hospital = _hospital()
    keep = add_record(hospital, {"type": "channeling", "date": "2024-05-01", "income": 100})
    drop = add_record(hospital, {"type": "channeling", "date": "2024-05-02", "income": 200})

    returned = delete_record(hospital, drop.record_id)

    assert returned is hospital
    assert [record.record_id for record in hospital.records] == [keep.record_id]
    assert summarize_hospital(hospital).channeling_income == pytest.approx(100)


def test_delete_unknown_record_is_not_fatal() -> None:
    """Deleting an id that does not exist leaves the ledger unchanged."""

    hospital = _hospital()
    add_record(hospital, {"type": "surgical", "date": "2024-05-01", "amount": 500})
    before = [record.as_dict() for record in hospital.records]

    returned = delete_record(hospital, "rec_9999")

    assert returned is hospital
    assert [record.as_dict() for record in hospital.records] == before


@pytest.mark.parametrize(
    "value, expected",
    [(3000.8, 3001), (1000.4, 1000), (2.5, 3), (0.0, 0), (-2.5, -2), (14249.999999999998, 14250)],
)
def test_round_half_up(value, expected) -> None:
    assert round_half_up(value) == expected


def test_get_record_by_id() -> None:
    hospital = _hospital()
    record = add_record(hospital, {"type": "surgical", "date": "2024-05-01", "bht": "BHT-9", "amount": 900})

    assert hospital.get_record(record.record_id) is record
    delete_record(hospital, record.record_id)
    with pytest.raises(NotFoundError):
        hospital.get_record(record.record_id)


def test_rejected_record_leaves_ledger_unchanged() -> None:
    """A payload that fails validation adds nothing to the ledger."""

    hospital = _hospital(wht_enabled=True)
    add_record(hospital, {"type": "channeling", "date": "2024-05-01", "income": 1000})
    before = summarize_hospital(hospital)

    with pytest.raises(ValueError):
        add_record(hospital, {"type": "surgical", "date": "2024-05-02", "amount": "Infinity"})

    assert len(hospital.records) == 1
    assert summarize_hospital(hospital) == before
