"""
Price engine tests.

Verifies:
- Unit price falls back to list price / homepage price below every tier
- Highest-discount tier wins among qualifiers (not highest threshold)
- Badge percent is additive while the charged price compounds
- Cart total, tax and the online-payment rule
- Invalid quantities are rejected
"""

from decimal import Decimal

import pytest

from storefront.errors import ValidationError
from storefront.models import CartLine
from storefront.services import pricing_service


pytestmark = pytest.mark.pricing


class TestEffectiveUnitPrice:

    @pytest.mark.parametrize("quantity", [1, 2, 7, 100])
    def test_plain_product_is_list_price(self, product_factory, quantity):
        product = product_factory(price="1000")
        assert pricing_service.effective_unit_price(product, quantity) == Decimal("1000")

    @pytest.mark.parametrize("quantity", [1, 2, 4])
    def test_below_every_tier_uses_homepage_price(self, product_factory, quantity):
        product = product_factory(price="1000", discounted="800", tiers=[(5, 10), (10, 20)])
        assert pricing_service.effective_unit_price(product, quantity) == Decimal("800")

    def test_below_every_tier_without_homepage_price_uses_list_price(self, product_factory):
        product = product_factory(price="1000", tiers=[(3, 5)])
        assert pricing_service.effective_unit_price(product, 2) == Decimal("1000")

    def test_homepage_and_bulk_compound(self, product_factory):
        product = product_factory(price="1000", discounted="800", tiers=[(3, 5)])
        assert pricing_service.effective_unit_price(product, 3) == Decimal("760")
        assert pricing_service.line_total(product, 3) == Decimal("2280")

    def test_highest_discount_wins_not_highest_threshold(self, product_factory):
        """At 10 units both tiers qualify; the 5% tier must win over the 3% tier."""
        product = product_factory(price="100", tiers=[(2, 5), (10, 3)])
        assert pricing_service.effective_unit_price(product, 10) == Decimal("95")
        assert pricing_service.select_bulk_tier(product, 10).min_quantity == 2

    def test_unordered_tiers_are_all_considered(self, product_factory):
        product = product_factory(price="200", tiers=[(10, 15), (2, 5), (5, 10)])
        assert pricing_service.effective_unit_price(product, 6) == Decimal("180")
        assert pricing_service.effective_unit_price(product, 12) == Decimal("170")

    def test_exact_tie_keeps_first_tier(self, product_factory):
        product = product_factory(price="100", tiers=[(3, 10), (5, 10)])
        tier = pricing_service.select_bulk_tier(product, 6)
        assert tier.min_quantity == 3
        assert pricing_service.effective_unit_price(product, 6) == Decimal("90")

    def test_duplicate_thresholds_are_legal(self, product_factory):
        product = product_factory(price="100", tiers=[(3, 5), (3, 8)])
        assert pricing_service.effective_unit_price(product, 3) == Decimal("92")

    def test_zero_discounted_price_means_no_homepage_discount(self, product_factory):
        product = product_factory(price="500", discounted="0")
        assert pricing_service.effective_unit_price(product, 1) == Decimal("500")
        assert pricing_service.homepage_discount_percent(product) == 0

    def test_full_discount_tier_is_not_clamped(self, product_factory):
        product = product_factory(price="100", tiers=[(1, 100)])
        assert pricing_service.effective_unit_price(product, 1) == 0

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True, None])
    def test_invalid_quantity_rejected(self, product_factory, quantity):
        product = product_factory()
        with pytest.raises(ValidationError, match="invalid quantity"):
            pricing_service.effective_unit_price(product, quantity)

    @pytest.mark.parametrize("quantity", [1, 3, 4, 11])
    def test_line_total_is_unit_times_quantity(self, product_factory, quantity):
        product = product_factory(price="999.99", discounted="749.49", tiers=[(3, 7.5), (10, 12)])
        unit = pricing_service.effective_unit_price(product, quantity)
        assert pricing_service.line_total(product, quantity) == unit * quantity


class TestDiscountDisplay:

    def test_badge_is_additive(self, product_factory):
        product = product_factory(price="1000", discounted="800", tiers=[(3, 5)])
        assert pricing_service.total_discount_percent(product, 3) == Decimal("25")

    def test_badge_is_not_the_compounded_saving(self, product_factory):
        # Charged: 1000 -> 800 -> 400 (60% off in truth); badge says 20 + 50 = 70
        product = product_factory(price="1000", discounted="800", tiers=[(2, 50)])
        assert pricing_service.total_discount_percent(product, 2) == Decimal("70")
        assert pricing_service.effective_unit_price(product, 2) == Decimal("400")

    def test_badge_without_tier_is_homepage_only(self, product_factory):
        product = product_factory(price="1000", discounted="800", tiers=[(3, 5)])
        assert pricing_service.total_discount_percent(product, 1) == Decimal("20")

    def test_zero_list_price_has_no_homepage_percent(self, product_factory):
        product = product_factory(price="0", discounted="5")
        assert pricing_service.homepage_discount_percent(product) == 0
        assert pricing_service.total_discount_percent(product, 1) == 0

    def test_badge_rounding(self):
        assert pricing_service.badge_percent(Decimal("33.5")) == 34
        assert pricing_service.badge_percent(Decimal("33.49")) == 33

    def test_price_line_bundles_everything(self, product_factory):
        product = product_factory(price="1000", discounted="800", tiers=[(3, 5)])
        line = pricing_service.price_line(product, 3)
        assert line.unit_price == Decimal("760")
        assert line.line_total == Decimal("2280")
        assert line.applied_tier.discount_percent == Decimal("5")
        assert line.savings == Decimal("720")
        assert line.to_dict()["total_discount_percent"] == 25
        assert line.to_dict()["unit_price"] == "760.00"

    def test_savings(self, product_factory):
        product = product_factory(price="1000", discounted="800")
        assert pricing_service.savings(product, 2) == Decimal("400")

    def test_display_tiers_sorted_by_threshold(self, product_factory):
        product = product_factory(tiers=[(10, 15), (2, 5), (5, 10)])
        assert [t.min_quantity for t in pricing_service.display_tiers(product)] == [2, 5, 10]


class TestCartTotals:

    def test_cart_total_sums_line_totals(self, product_factory):
        lamp = product_factory(price="1000", discounted="800", tiers=[(3, 5)], product_id="p1")
        bulb = product_factory(price="150", product_id="p2")
        lines = [CartLine(lamp, 3), CartLine(bulb, 2)]
        assert pricing_service.cart_total(lines) == Decimal("2580")

    def test_empty_cart_total_is_zero(self):
        assert pricing_service.cart_total([]) == 0

    def test_tax_uses_product_rate_else_default(self, product_factory):
        taxed = product_factory(price="200", tax="18", product_id="p1")
        untaxed = product_factory(price="100", product_id="p2")
        lines = [CartLine(taxed, 1), CartLine(untaxed, 2)]
        # 200 * 18% + 200 * 10%
        assert pricing_service.total_tax(lines) == Decimal("56")

    def test_tax_follows_bulk_price(self, product_factory):
        product = product_factory(price="1000", discounted="800", tiers=[(3, 5)])
        assert pricing_service.total_tax([CartLine(product, 3)]) == Decimal("228")

    def test_tax_free_catalog(self, product_factory):
        product = product_factory(price="100")
        assert pricing_service.total_tax([CartLine(product, 4)], default_tax_percent=0) == 0

    def test_explicit_zero_product_tax_wins_over_default(self, product_factory):
        product = product_factory(price="100", tax="0")
        assert pricing_service.total_tax([CartLine(product, 1)]) == 0


class TestOnlinePaymentTotal:

    @pytest.mark.parametrize(
        "grand_total,expected",
        [(60, 10), (50, 0), (40, 0), (Decimal("1234.56"), Decimal("1184.56"))],
    )
    def test_flat_online_discount(self, grand_total, expected):
        assert pricing_service.online_payment_total(grand_total) == expected

    def test_configurable_discount(self):
        assert pricing_service.online_payment_total(Decimal("500"), discount="100") == Decimal("400")


class TestQuantizeMoney:

    def test_half_up(self):
        assert str(pricing_service.quantize_money(Decimal("10.005"))) == "10.01"
        assert str(pricing_service.quantize_money(Decimal("760"))) == "760.00"
