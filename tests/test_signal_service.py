"""Tests for signal domain service."""

from dataclasses import replace
from decimal import Decimal

import pytest

from burnrate.domain.entities import FlowDirection, RecurringFrequency, SignalNature
from burnrate.domain.errors import NotFoundError, ValidationError
from burnrate.domain.signal import build_signal, coerce_choice


def test_create_signal(signal_service):
    signal_id = signal_service.create_signal(
        date="2024-02-08",
        amount=Decimal("22.99"),
        flow="outflow",
        nature="fixed_recurring",
        merchant="Netflix",
        category="Streaming",
        frequency="monthly",
    )

    signal = signal_service.get_signal(signal_id)
    assert signal is not None
    assert signal.date == "2024-02-08"
    assert signal.amount == Decimal("22.99")
    assert signal.flow == FlowDirection.OUTFLOW
    assert signal.nature == SignalNature.FIXED_RECURRING
    assert signal.frequency == RecurringFrequency.MONTHLY
    assert signal.currency == "USD"
    assert signal.source_doc_id is None


def test_create_signal_ids_are_unique(signal_service):
    first = signal_service.create_signal(
        date="2024-01-01", amount=Decimal("1"), flow="outflow",
        nature="fixed_recurring", merchant="A", category="X",
    )
    second = signal_service.create_signal(
        date="2024-01-01", amount=Decimal("1"), flow="outflow",
        nature="fixed_recurring", merchant="A", category="X",
    )
    assert first != second


def test_create_signal_rejects_negative_amount(signal_service):
    with pytest.raises(ValidationError, match="must not be negative"):
        signal_service.create_signal(
            date="2024-01-01", amount=Decimal("-5"), flow="outflow",
            nature="fixed_recurring", merchant="A", category="X",
        )


def test_create_signal_rejects_unknown_flow(signal_service):
    with pytest.raises(ValidationError, match="flow"):
        signal_service.create_signal(
            date="2024-01-01", amount=Decimal("5"), flow="sideways",
            nature="fixed_recurring", merchant="A", category="X",
        )


def test_coerce_choice_normalizes_case():
    assert coerce_choice(FlowDirection, " Inflow ", "flow") == FlowDirection.INFLOW
    assert coerce_choice(FlowDirection, FlowDirection.OUTFLOW, "flow") == FlowDirection.OUTFLOW


def test_build_signal_keeps_given_id_and_created_at(signal_service):
    original = build_signal(
        date="2024-01-01", amount=Decimal("10"), flow="outflow",
        nature="fixed_recurring", merchant="Gym", category="Health",
    )
    rebuilt = build_signal(
        date="2024-02-01", amount=Decimal("12"), flow="outflow",
        nature="fixed_recurring", merchant="Gym", category="Health",
        signal_id=original.id, created_at=original.created_at,
    )
    assert rebuilt.id == original.id
    assert rebuilt.created_at == original.created_at


def test_list_signals_newest_first(signal_service, sample_signals):
    signals = signal_service.list_signals()

    assert [s.date for s in signals] == [
        "2024-01-19",
        "2024-01-12",
        "2024-01-08",
        "2024-01-05",
        "2024-01-01",
    ]


def test_list_signals_search_matches_merchant_or_category(signal_service, sample_signals):
    by_merchant = signal_service.list_signals(search="netf")
    by_category = signal_service.list_signals(search="SALARY")

    assert [s.id for s in by_merchant] == [sample_signals["netflix"]]
    assert {s.id for s in by_category} == {sample_signals["salary_1"], sample_signals["salary_2"]}


def test_list_signals_recurring_only(signal_service, sample_signals):
    recurring = signal_service.list_signals(recurring_only=True)

    assert {s.id for s in recurring} == {
        sample_signals["salary_1"],
        sample_signals["salary_2"],
        sample_signals["netflix"],
    }


def test_replace_signal(signal_service, sample_signals):
    signal = signal_service.get_signal(sample_signals["netflix"])

    signal_service.replace_signal(replace(signal, amount=Decimal("24.99"), frequency=None))

    updated = signal_service.get_signal(signal.id)
    assert updated.amount == Decimal("24.99")
    assert updated.frequency is None
    assert updated.merchant == "Netflix"


def test_replace_missing_signal(signal_service, sample_signals):
    signal = signal_service.get_signal(sample_signals["netflix"])

    with pytest.raises(NotFoundError):
        signal_service.replace_signal(replace(signal, id="does-not-exist"))


def test_delete_signal(signal_service, sample_signals):
    signal_service.delete_signal(sample_signals["rent"])

    assert signal_service.get_signal(sample_signals["rent"]) is None
    assert len(signal_service.list_signals()) == 4


def test_delete_missing_signal(signal_service):
    with pytest.raises(NotFoundError):
        signal_service.delete_signal("nope")


def test_delete_all_signals(signal_service, sample_signals):
    assert signal_service.delete_all_signals() == 5
    assert signal_service.list_signals() == []
    assert signal_service.delete_all_signals() == 0


def test_monthly_amount_uses_declared_frequency(signal_service, sample_signals):
    salary = signal_service.get_signal(sample_signals["salary_1"])
    rent = signal_service.get_signal(sample_signals["rent"])

    assert signal_service.monthly_amount(salary) == Decimal("2500.00") * 26 / 12
    assert signal_service.monthly_amount(rent) == Decimal("1800.00")


def test_unparsable_date_is_stored_and_listed_last(signal_service, sample_signals):
    signal_id = signal_service.create_signal(
        date="sometime in spring", amount=Decimal("10"), flow="outflow",
        nature="variable_estimate", merchant="Bakery", category="Food",
    )

    signals = signal_service.list_signals()

    assert signals[-1].id == signal_id
