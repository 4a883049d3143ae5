"""
Tests for amount, tax and currency extraction and the money utilities.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from decimal import Decimal

import pytest

from receipt_engine.services.parser import (
    extract_amount,
    extract_currency,
    extract_tax,
    find_amount_candidates,
    split_lines,
)
from receipt_engine.utils.money import format_money, is_plausible_amount, parse_money


class TestMoneyUtils:

    @pytest.mark.parametrize("token,expected", [
        ("$48.87", Decimal("48.87")),
        ("$ 3.20", Decimal("3.20")),
        ("12.5", Decimal("12.50")),
        ("1,234.56", Decimal("1234.56")),
    ])
    def test_parse_money(self, token, expected):
        assert parse_money(token) == expected

    @pytest.mark.parametrize("token", ["", "$", "abc", None])
    def test_parse_money_rejects_non_numbers(self, token):
        assert parse_money(token) is None

    def test_plausible_amount_bounds(self):
        assert is_plausible_amount(Decimal("0.01"))
        assert is_plausible_amount(Decimal("9999.99"))
        assert not is_plausible_amount(Decimal("0.00"))
        assert not is_plausible_amount(Decimal("10000.00"))

    def test_format_money(self):
        assert format_money(Decimal("1234.56")) == "$1,234.56"
        assert format_money(Decimal("12.50"), "EUR") == "€12.50"
        assert format_money(Decimal("3.00"), "CHF") == "CHF 3.00"
        assert format_money(None) == "N/A"


class TestAmountExtraction:

    def test_largest_amount_is_the_total(self):
        lines = split_lines("GAS  $45.67\nTAX  $3.20\nTOTAL $48.87")

        result = extract_amount(lines)

        assert result.value == Decimal("48.87")
        assert result.confidence == 0.75

    def test_candidates_record_line_position(self):
        candidates = find_amount_candidates(split_lines("ACME\n\nMILK 2.49 BREAD $ 3.10"))

        assert [(c.value, c.line_position) for c in candidates] == [
            (Decimal("2.49"), 2),
            (Decimal("3.10"), 2),
        ]
        assert candidates[1].raw_text == "$ 3.10"

    @pytest.mark.parametrize("text", [
        "TOTAL $0.00",
        "TOTAL $10000.00",
        "REF 123456.78",
        "(555) 123-4567",
        "14:32 STORE 0042",
    ])
    def test_no_plausible_amount(self, text):
        result = extract_amount(split_lines(text))

        assert result.value is None
        assert result.confidence == 0.0

    def test_out_of_bounds_amounts_do_not_win(self):
        result = extract_amount(split_lines("ORDER 25000.00\nTOTAL 9999.99"))

        assert result.value == Decimal("9999.99")

    def test_precomputed_candidates_are_used(self):
        lines = split_lines("TOTAL $48.87")
        candidates = find_amount_candidates(lines)

        assert extract_amount(lines, candidates=candidates).value == Decimal("48.87")
        assert extract_amount(lines, candidates=[]).value is None


class TestTaxExtraction:

    def test_tax_line_amount(self):
        result = extract_tax(split_lines("Subtotal 10.00\nTax 0.80\nTotal 10.80"))

        assert result.value == Decimal("0.80")
        assert result.confidence == 0.70

    def test_keyword_is_case_insensitive(self):
        result = extract_tax(split_lines("State tax: $1.25"))

        assert result.value == Decimal("1.25")

    def test_first_tax_line_wins_over_larger(self):
        result = extract_tax(split_lines("TAX 1.00\nTAX 2.00"))

        assert result.value == Decimal("1.00")

    def test_first_tax_line_without_amount_ends_search(self):
        result = extract_tax(split_lines("SALES TAX INCLUDED\nTAX $2.00"))

        assert result.value is None
        assert result.confidence == 0.0

    def test_no_tax_line(self):
        result = extract_tax(split_lines("TOTAL $5.00"))

        assert result.value is None


class TestCurrencyExtraction:

    @pytest.mark.parametrize("text,expected", [
        ("TOTAL 12.00 USD", "USD"),
        ("12.50 EUR", "EUR"),
        ("Total 8.00 GBP", "GBP"),
        ("Paid in euro", "EUR"),
        ("Dollar General", "USD"),
        ("Pound Shop", "GBP"),
    ])
    def test_keywords(self, text, expected):
        result = extract_currency(text, has_amounts=True)

        assert result.value == expected
        assert result.confidence == 0.90

    def test_keyword_beats_symbol(self):
        result = extract_currency("€5.00 charged in USD", has_amounts=True)

        assert result.value == "USD"
        assert result.confidence == 0.90

    @pytest.mark.parametrize("text,expected", [
        ("TOTAL $48.87", "USD"),
        ("TOTAL €12.00", "EUR"),
        ("TOTAL £3.50", "GBP"),
        ("TOTAL ¥500", "JPY"),
        ("R$ 20.00", "USD"),
        ("TOTAL C$12.00", "USD"),
        ("TOTAL A$5.00", "USD"),
    ])
    def test_symbols(self, text, expected):
        result = extract_currency(text, has_amounts=False)

        assert result.value == expected
        assert result.confidence == 0.85

    def test_bare_dollar_sign_is_checked_first(self):
        result = extract_currency("R$ 20.00", has_amounts=False)

        assert result.value == "USD"
        assert result.raw_text == "$"

    def test_defaults_to_usd_when_amounts_found(self):
        result = extract_currency("Total 12.00", has_amounts=True)

        assert result.value == "USD"
        assert result.confidence == 0.50

    def test_no_currency_without_amounts(self):
        result = extract_currency("Total 12.00", has_amounts=False)

        assert result.value is None
        assert result.confidence == 0.0
