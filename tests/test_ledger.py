"""Tests for Sale, Summary and SaleLedger."""

import random
from decimal import Decimal

import pytest

from conftest import make_sale
from ticketbooth.constants import Category
from ticketbooth.errors import (
    DuplicateSaleIdError,
    SaleNotFoundError,
    SummaryConsistencyError,
)
from ticketbooth.ledger import CategoryTotals, Sale, SaleLedger, Summary


# ---------------------------------------------------------------------------
# Sale
# ---------------------------------------------------------------------------


class TestSale:
    def test_create_computes_total(self) -> None:
        sale = make_sale(quantity=2, unit_price="50.00")
        assert sale.total == Decimal("100.00")
        assert sale.unit_price == Decimal("50.00")

    def test_create_stamps_created_at(self) -> None:
        sale = Sale.create(1, "Jo", Category.GENERAL, 1)
        assert sale.created_at

    def test_rejects_inconsistent_total(self) -> None:
        with pytest.raises(ValueError, match="total"):
            Sale(
                id=1, customer_name="Jo", category=Category.VIP, quantity=2,
                unit_price=Decimal("50.00"), total=Decimal("90.00"),
            )

    def test_rejects_zero_quantity(self) -> None:
        with pytest.raises(ValueError, match="quantity"):
            make_sale(quantity=0)

    def test_rejects_blank_name(self) -> None:
        with pytest.raises(ValueError, match="name"):
            make_sale(name="   ")

    def test_is_frozen(self) -> None:
        sale = make_sale()
        with pytest.raises(AttributeError):
            sale.total = Decimal("1.00")  # type: ignore[misc]

    def test_to_dict_uses_record_keys(self) -> None:
        data = make_sale(sale_id=7).to_dict()
        assert data == {
            "id": 7,
            "nombre": "Ana Lopez",
            "categoria": "vip",
            "cantidad": 2,
            "precio": "50.00",
            "total": "100.00",
            "fecha": "2026-10-18T12:00:00+00:00",
        }

    def test_from_dict_roundtrip(self) -> None:
        original = make_sale(sale_id=9, category=Category.ORCHESTRA, quantity=3, unit_price="30.00")
        assert Sale.from_dict(original.to_dict()) == original

    def test_from_dict_without_unit_price(self) -> None:
        sale = Sale.from_dict({
            "id": 1700000000000, "nombre": "Luis Ruiz", "categoria": "generales",
            "cantidad": 3, "total": 45, "fecha": "18/10/2026, 12:00:00",
        })
        assert sale.unit_price == Decimal("15.00")
        assert sale.total == Decimal("45.00")

    def test_from_dict_unknown_category(self) -> None:
        with pytest.raises(KeyError):
            Sale.from_dict({"id": 1, "nombre": "Jo", "categoria": "palco", "cantidad": 1, "total": 5})

    def test_from_dict_fractional_quantity(self) -> None:
        with pytest.raises(TypeError):
            Sale.from_dict({"id": 1, "nombre": "Jo", "categoria": "vip", "cantidad": 1.5, "total": 75})


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class TestSummary:
    def test_starts_at_zero(self) -> None:
        summary = Summary()
        for category in Category:
            assert summary.bucket(category) == CategoryTotals(0, Decimal("0"))
        assert summary.grand_total.count == 0
        assert summary.grand_total.revenue == Decimal("0.00")

    def test_on_append(self) -> None:
        summary = Summary()
        summary.on_append(make_sale(quantity=2))
        assert summary.bucket(Category.VIP).count == 2
        assert summary.bucket(Category.VIP).revenue == Decimal("100.00")
        assert summary.grand_total.count == 2
        assert summary.grand_total.revenue == Decimal("100.00")

    def test_on_remove(self) -> None:
        summary = Summary()
        sale = make_sale()
        summary.on_append(sale)
        summary.on_remove(sale)
        assert summary == Summary()

    def test_on_remove_unrecorded_sale_is_fatal(self) -> None:
        summary = Summary()
        with pytest.raises(SummaryConsistencyError):
            summary.on_remove(make_sale())
        assert summary == Summary()

    def test_on_remove_is_an_assertion_failure(self) -> None:
        with pytest.raises(AssertionError):
            Summary().on_remove(make_sale())

    def test_reset(self) -> None:
        summary = Summary()
        summary.on_append(make_sale())
        summary.reset()
        assert summary == Summary()

    def test_to_dict_shape(self) -> None:
        summary = Summary()
        summary.on_append(make_sale(quantity=2))
        assert summary.to_dict() == {
            "vip": {"cantidad": 2, "total": "100.00"},
            "butacas": {"cantidad": 0, "total": "0.00"},
            "generales": {"cantidad": 0, "total": "0.00"},
            "totalGeneral": {"cantidad": 2, "total": "100.00"},
        }

    def test_from_dict_missing_buckets(self) -> None:
        summary = Summary.from_dict({"vip": {"cantidad": 1, "total": 50}})
        assert summary.bucket("vip").count == 1
        assert summary.bucket("generales").count == 0
        assert summary.grand_total.count == 0

    def test_roundtrip(self) -> None:
        summary = Summary()
        summary.on_append(make_sale(quantity=2))
        summary.on_append(make_sale(sale_id=2, category=Category.GENERAL, quantity=3, unit_price="15.00"))
        assert Summary.from_dict(summary.to_dict()) == summary


class TestSummaryDrift:
    def test_incremental_matches_recompute(self) -> None:
        rng = random.Random(1234)
        prices = {Category.VIP: "50.00", Category.ORCHESTRA: "30.00", Category.GENERAL: "15.00"}
        ledger = SaleLedger()
        summary = Summary()
        next_id = 1
        for _ in range(200):
            if ledger.all() and rng.random() < 0.4:
                victim = rng.choice(ledger.all())
                summary.on_remove(ledger.remove(victim.id))
            else:
                category = rng.choice(list(Category))
                sale = make_sale(
                    sale_id=next_id, category=category,
                    quantity=rng.randint(1, 9), unit_price=prices[category],
                )
                next_id += 1
                ledger.append(sale)
                summary.on_append(sale)
            assert Summary.recompute_from_scratch(ledger) == summary


# ---------------------------------------------------------------------------
# SaleLedger
# ---------------------------------------------------------------------------


class TestSaleLedger:
    def test_append_preserves_order(self) -> None:
        ledger = SaleLedger()
        ledger.append(make_sale(sale_id=3))
        ledger.append(make_sale(sale_id=1))
        ledger.append(make_sale(sale_id=2))
        assert [s.id for s in ledger.all()] == [3, 1, 2]

    def test_append_duplicate_id(self) -> None:
        ledger = SaleLedger([make_sale(sale_id=1)])
        with pytest.raises(DuplicateSaleIdError):
            ledger.append(make_sale(sale_id=1, name="Otro Cliente"))
        assert len(ledger) == 1

    def test_remove_returns_sale(self) -> None:
        sale = make_sale(sale_id=5)
        ledger = SaleLedger([sale])
        assert ledger.remove(5) == sale
        assert len(ledger) == 0

    def test_remove_twice(self) -> None:
        ledger = SaleLedger([make_sale(sale_id=5)])
        ledger.remove(5)
        with pytest.raises(SaleNotFoundError):
            ledger.remove(5)

    def test_get(self) -> None:
        sale = make_sale(sale_id=5)
        ledger = SaleLedger([sale])
        assert ledger.get(5) is sale
        assert ledger.get(6) is None
        assert 5 in ledger

    def test_clear(self) -> None:
        ledger = SaleLedger([make_sale(sale_id=1), make_sale(sale_id=2)])
        ledger.clear()
        assert ledger.all() == ()

    def test_all_is_a_snapshot(self) -> None:
        ledger = SaleLedger([make_sale(sale_id=1)])
        snapshot = ledger.all()
        ledger.append(make_sale(sale_id=2))
        assert len(snapshot) == 1

    def test_next_id_strictly_increasing(self) -> None:
        ledger = SaleLedger()
        ids = []
        for _ in range(5):
            sale_id = ledger.next_id()
            ledger.append(make_sale(sale_id=sale_id))
            ids.append(sale_id)
        assert ids == sorted(set(ids))

    def test_next_id_past_future_ids(self) -> None:
        far_future = 10**15
        ledger = SaleLedger([make_sale(sale_id=far_future)])
        assert ledger.next_id() == far_future + 1
