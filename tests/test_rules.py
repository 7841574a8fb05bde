"""Mini README: Tests for the transaction computation and validation rules.

Structure:
    * compute_totals - totals, clamped balance and range checks.
    * default_rate_for - crop lookup and unknown crops.
    * validate_transaction_input - ordered violations and defaults.
"""

from __future__ import annotations

import pytest

from millrecords.records import (
    CropType,
    TransactionDraft,
    UnknownCropError,
    ValidationError,
    apply_full_payment,
    compute_totals,
    default_rate_for,
    validate_transaction_input,
)


def _draft(**overrides) -> TransactionDraft:
    values = dict(
        customer_name="A",
        contact="1",
        date="2024-01-01",
        crop_type="Maize",
        quantity=10,
        charge_per_kg=400,
        amount_paid=3000,
    )
    values.update(overrides)
    return TransactionDraft(**values)


def test_compute_totals_matches_worked_example() -> None:
    totals = compute_totals(10, 400, 3000)
    assert totals.total_amount == pytest.approx(4000.0)
    assert totals.balance == pytest.approx(1000.0)


@pytest.mark.parametrize(
    "quantity, charge, paid",
    [(0.1, 0.01, 0.0), (2.5, 150.0, 375.0), (12.0, 300.0, 10000.0), (7.3, 412.5, 1.0)],
)
def test_compute_totals_properties(quantity: float, charge: float, paid: float) -> None:
    """Total is the product and balance never drops below zero."""

    totals = compute_totals(quantity, charge, paid)
    assert totals.total_amount == pytest.approx(quantity * charge)
    assert totals.balance == pytest.approx(max(0.0, quantity * charge - paid))
    assert totals.balance >= 0


def test_overpayment_is_clamped_to_zero_balance() -> None:
    assert compute_totals(1, 300, 1000).balance == 0


def test_compute_totals_names_offending_fields() -> None:
    with pytest.raises(ValidationError) as excinfo:
        compute_totals(0.05, 400, -1)
    assert excinfo.value.fields == ["quantity", "amount_paid"]


@pytest.mark.parametrize(
    "arguments, field",
    [
        ((float("nan"), 400, 0), "quantity"),
        ((10, float("inf"), 0), "charge_per_kg"),
        ((10, 400, float("nan")), "amount_paid"),
    ],
)
def test_compute_totals_rejects_non_finite_values(arguments, field) -> None:
    with pytest.raises(ValidationError) as excinfo:
        compute_totals(*arguments)
    assert excinfo.value.fields == [field]


def test_range_messages_state_the_minimum() -> None:
    with pytest.raises(ValidationError) as excinfo:
        compute_totals(0.05, 0.001, 0)
    assert [violation.message for violation in excinfo.value.violations] == [
        "Quantity must be at least 0.1 kg",
        "Charge per kg must be at least 0.01",
    ]


def test_default_rate_lookup() -> None:
    assert default_rate_for("Millet") == 300
    assert default_rate_for(CropType.MAIZE) == 400
    assert default_rate_for("Cassava") == 150
    with pytest.raises(UnknownCropError):
        default_rate_for("Wheat")


def test_valid_draft_returns_fields_with_totals() -> None:
    data = validate_transaction_input(_draft())

    assert data.crop_type is CropType.MAIZE
    assert data.total_amount == pytest.approx(4000.0)
    assert data.balance == pytest.approx(1000.0)


def test_empty_draft_reports_every_violation_in_field_order() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(TransactionDraft())

    assert excinfo.value.fields == ["customer_name", "contact", "date", "crop_type", "quantity"]


def test_range_violations_are_collected_not_short_circuited() -> None:
    draft = _draft(customer_name=" ", quantity="5", charge_per_kg="0.001", amount_paid="-1")

    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(draft)

    assert excinfo.value.fields == ["customer_name", "charge_per_kg", "amount_paid"]


def test_unknown_crop_is_a_violation_of_the_crop_field() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(_draft(crop_type="Wheat"))
    assert excinfo.value.fields == ["crop_type"]


def test_date_must_be_iso_formatted() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(_draft(date="01/02/2024"))
    assert excinfo.value.fields == ["date"]


def test_missing_charge_takes_crop_default() -> None:
    data = validate_transaction_input(_draft(crop_type="Cassava", quantity="2", charge_per_kg=None))

    assert data.charge_per_kg == 150
    assert data.total_amount == pytest.approx(300.0)


def test_explicit_charge_differing_from_default_is_kept() -> None:
    data = validate_transaction_input(_draft(charge_per_kg="350"))
    assert data.charge_per_kg == 350


def test_apply_full_payment_fills_amount_paid() -> None:
    draft = apply_full_payment(_draft(charge_per_kg=None, amount_paid=0))

    assert draft.amount_paid == pytest.approx(4000.0)
    assert validate_transaction_input(draft).balance == 0


def test_comma_decimal_is_not_a_number() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(_draft(quantity="0,5"))

    assert excinfo.value.fields == ["quantity"]
    assert excinfo.value.violations[0].message == "Quantity must be a number"


def test_thousands_separators_are_not_stripped() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(_draft(amount_paid="1,000"))
    assert excinfo.value.fields == ["amount_paid"]


def test_whitespace_only_name_is_blank() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction_input(_draft(customer_name="   "))
    assert excinfo.value.fields == ["customer_name"]
