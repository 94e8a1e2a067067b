from decimal import Decimal
from unittest.mock import Mock

import pytest

from marketplace.models import Service
from marketplace.ordering.domain.services.pricing_service import PriceQuote, PricingService, price, to_money


@pytest.mark.unit
class TestPricingServiceUnit:
    def setup_method(self):
        self.pricing = PricingService()

        self.service = Mock(spec=Service)
        self.service.pk = "service-uuid"
        self.service.base_price = Decimal("100.00")
        self.service.variants = [
            {"label": "Paper", "options": [{"name": "Glossy", "price_delta": "20.00"}, {"name": "Matte", "price_delta": 5}]},
            {"label": "Size", "options": [{"name": "A4", "price_delta": "0"}, {"name": "A3", "price_delta": "35.50"}]},
        ]

    def test_base_price_only(self):
        quote = self.pricing.price(self.service, [], 2)

        assert quote.unit_price == Decimal("100.00")
        assert quote.line_total == Decimal("200.00")
        assert quote.options == []

    def test_single_option_times_quantity(self):
        quote = self.pricing.price(self.service, [{"label": "Paper", "option_index": 0}], 3)

        assert quote.unit_price == Decimal("120.00")
        assert quote.line_total == Decimal("360.00")
        assert quote.options == [
            {"label": "Paper", "option_index": 0, "option_name": "Glossy", "price_delta": Decimal("20.00")}
        ]

    def test_deltas_are_summed(self):
        options = [{"label": "Paper", "option_index": 1}, {"label": "Size", "option_index": 1}]
        quote = self.pricing.price(self.service, options, 2)

        # 100 + 5 + 35.50
        assert quote.unit_price == Decimal("140.50")
        assert quote.line_total == Decimal("281.00")

    def test_client_price_delta_is_ignored(self):
        option = {"label": "Paper", "option_index": 0, "option_name": "Gold leaf", "price_delta": "-100"}
        quote = self.pricing.price(self.service, [option], 1)

        assert quote.unit_price == Decimal("120.00")
        assert quote.options[0]["option_name"] == "Glossy"

    def test_unknown_label_prices_at_zero_and_keeps_client_values(self):
        option = {"label": "Lamination", "option_index": 0, "option_name": "Heavy"}
        quote = self.pricing.price(self.service, [option], 1)

        assert quote.unit_price == Decimal("100.00")
        assert quote.options == [
            {"label": "Lamination", "option_index": 0, "option_name": "Heavy", "price_delta": Decimal("0.00")}
        ]

    def test_out_of_range_index_prices_at_zero(self):
        quote = self.pricing.price(self.service, [{"label": "Paper", "option_index": 7}], 1)

        assert quote.unit_price == Decimal("100.00")
        assert quote.options[0]["price_delta"] == Decimal("0.00")

    def test_numeric_string_index_is_accepted(self):
        quote = self.pricing.price(self.service, [{"label": "Size", "option_index": "1"}], 1)

        assert quote.unit_price == Decimal("135.50")
        assert quote.options[0]["option_index"] == 1

    def test_quantity_is_clamped_to_one(self):
        quote = self.pricing.price(self.service, [], 0)

        assert quote.quantity == 1
        assert quote.line_total == Decimal("100.00")

    def test_service_without_variants(self):
        self.service.variants = None
        quote = self.pricing.price(self.service, [{"label": "Paper", "option_index": 0}], 1)

        assert quote.unit_price == Decimal("100.00")

    def test_order_subtotal_sums_line_totals(self):
        quotes = [
            PriceQuote(unit_price=Decimal("10.00"), quantity=1, line_total=Decimal("10.00")),
            PriceQuote(unit_price=Decimal("2.25"), quantity=2, line_total=Decimal("4.50")),
        ]

        assert PricingService.order_subtotal(quotes) == Decimal("14.50")
        assert PricingService.order_subtotal([]) == Decimal("0.00")


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("20", Decimal("20.00")),
        (5, Decimal("5.00")),
        ("1.005", Decimal("1.01")),
        (None, Decimal("0.00")),
        ("", Decimal("0.00")),
        ("abc", Decimal("0.00")),
    ],
)
def test_to_money(value, expected):
    assert to_money(value) == expected


@pytest.mark.unit
def test_price_function_needs_no_service_instance():
    service = Mock(spec=Service)
    service.pk = "service-uuid"
    service.base_price = Decimal("100.00")
    service.variants = [{"label": "Paper", "options": [{"name": "Glossy", "price_delta": "20.00"}]}]
    options = [{"label": "Paper", "option_index": 0}]

    quote = price(service, options, 3)

    assert (quote.unit_price, quote.line_total) == (Decimal("120.00"), Decimal("360.00"))
    assert PricingService().price(service, options, 3) == quote
