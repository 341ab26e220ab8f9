import pytest
from pydantic import TypeAdapter, ValidationError

from mandi.invoice import schemas, surcharge
from mandi.invoice.schemas import InvoiceItemCreate


SurchargeAdapter = TypeAdapter(schemas.SurchargeConfig)


def items(*rows):
    return [InvoiceItemCreate(product_id=1, quantity=q, unit_price=p, bags=b) for q, p, b in rows]


def test_percent_of_subtotal():
    config = SurchargeAdapter.validate_python({"mode": "percent-of-subtotal", "rate": 2})
    result = surcharge.compute_surcharge(config, 1000, items((10, 100, None)))

    assert result.include is True
    assert result.amount == 20
    assert result.basis is None


def test_percent_rate_defaults_from_settings():
    config = SurchargeAdapter.validate_python({"mode": "percent-of-subtotal"})
    assert config.rate == 2.0


def test_per_kg_defaults_to_item_quantity():
    config = SurchargeAdapter.validate_python({"mode": "per-kg", "rate": 1.5})
    result = surcharge.compute_surcharge(config, 0, items((40, 10, None), (60, 12, None)))

    assert result.basis == 100
    assert result.amount == 150


def test_per_kg_uses_weighed_total_when_given():
    config = SurchargeAdapter.validate_python({"mode": "per-kg", "rate": 2, "total_kg_weight": 95})
    result = surcharge.compute_surcharge(config, 0, items((100, 10, None)))

    assert result.basis == 95
    assert result.amount == 190


def test_per_bag_sums_item_bags():
    config = SurchargeAdapter.validate_python({"mode": "per-bag", "rate": 10})
    result = surcharge.compute_surcharge(config, 0, items((50, 10, 2), (50, 10, 3), (5, 10, None)))

    assert result.basis == 5
    assert result.amount == 50


def test_no_surcharge():
    result = surcharge.compute_surcharge(None, 500, items((5, 100, None)))
    assert result == surcharge.NO_SURCHARGE
    assert result.amount == 0


def test_unknown_mode_rejected():
    with pytest.raises(ValidationError):
        SurchargeAdapter.validate_python({"mode": "per-crate", "rate": 1})


def test_negative_rate_rejected():
    with pytest.raises(ValidationError):
        SurchargeAdapter.validate_python({"mode": "per-kg", "rate": -1})


def test_per_bag_without_bags_is_no_surcharge():
    config = SurchargeAdapter.validate_python({"mode": "per-bag", "rate": 3})
    result = surcharge.compute_surcharge(config, 0, items((10, 5, None), (4, 5, None)))

    assert result == surcharge.NO_SURCHARGE
    assert result.include is False


def test_per_kg_with_zero_weight_is_no_surcharge():
    config = SurchargeAdapter.validate_python({"mode": "per-kg", "rate": 2, "total_kg_weight": 0})
    result = surcharge.compute_surcharge(config, 0, items((10, 5, None)))

    assert result.include is False
    assert result.amount == 0
