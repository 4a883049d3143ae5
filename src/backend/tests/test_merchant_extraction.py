"""
Tests for merchant name extraction from the receipt header.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from receipt_engine.services.parser import extract_merchant, split_lines


def merchant_for(text):
    return extract_merchant(split_lines(text))


class TestLineSegmenter:

    def test_empty_text_has_no_lines(self):
        assert split_lines("") == []

    def test_lines_are_trimmed_and_blank_lines_kept(self):
        assert split_lines("  ACME  \n\n\tTOTAL 5.00 \n") == ["ACME", "", "TOTAL 5.00", ""]


class TestMerchantHeaderScan:

    def test_single_line_name_stops_at_address(self):
        result = merchant_for("SHELL GAS STATION\n123 MAIN ST\nTOTAL $48.87")

        assert result.value == "SHELL GAS STATION"
        assert result.confidence == 0.85

    def test_multi_line_name_is_joined(self):
        result = merchant_for("THE HOME\nDEPOT\n123 Elm Street\nTOTAL $5.00")

        assert result.value == "THE HOME DEPOT"
        assert result.confidence == 0.80

    def test_at_most_three_lines_are_joined(self):
        result = merchant_for("A1 CAFE\nAND\nBAKERY\nHOUSE")

        assert result.value == "A1 CAFE AND BAKERY"
        assert result.confidence == 0.80

    def test_metadata_lines_are_skipped(self):
        result = merchant_for("GRILL HOUSE\nRegister 2\nServer: Amy\nAND TAVERN\n05/12/2024")

        assert result.value == "GRILL HOUSE AND TAVERN"
        assert result.confidence == 0.80

    def test_cashier_line_is_skipped(self):
        result = merchant_for("DINER 66\nCashier: Dana\nBLUE PLATE\nTOTAL $9.00")

        assert result.value == "DINER 66 BLUE PLATE"

    def test_standalone_store_number_is_skipped(self):
        result = merchant_for("Store #123\nTARGET\n(555) 123-4567")

        assert result.value == "TARGET"
        assert result.confidence == 0.85

    def test_store_number_with_more_text_stops_scan(self):
        result = merchant_for("Store #123 Elm Plaza\nTARGET")

        assert result.value == "Store #123 Elm Plaza"
        assert result.confidence == 0.60

    @pytest.mark.parametrize("stop_line", [
        "456 Oak Avenue",
        "12/31/2024",
        "09:15 AM",
        "(555) 123-4567",
        "Call 555-123-4567",
        "SUBTOTAL $10.00",
        "Amount due",
        "$4.99",
        "#10442",
        "Loc 7 Downtown",
        "2 x $3.50",
        "www.example.com",
        "shop.example.net",
        "help@example.org",
    ])
    def test_stop_patterns_end_the_name(self, stop_line):
        result = merchant_for(f"CORNER MARKET\n{stop_line}\nSECOND NAME LINE")

        assert result.value == "CORNER MARKET"
        assert result.confidence == 0.85

    def test_long_lines_are_ignored(self):
        result = merchant_for("X" * 51 + "\nSHORT NAME\n123 MAIN ST")

        assert result.value == "SHORT NAME"
        assert all(len(part) <= 50 for part in result.raw_text.split("\n"))

    def test_numeric_lines_are_ignored(self):
        result = merchant_for("00123\nACME HARDWARE\n(555) 123-4567")

        assert result.value == "ACME HARDWARE"

    def test_leading_blank_lines_are_not_counted(self):
        result = merchant_for("\n\n\nACME HARDWARE\n123 MAIN ST")

        assert result.value == "ACME HARDWARE"

    def test_stars_and_hashes_are_removed(self):
        result = merchant_for("**STAR  MART**\nJOE'S #1 DELI\n123 MAIN ST")

        assert result.value == "STAR MART JOE'S 1 DELI"


class TestMerchantFallback:

    def test_first_line_used_when_nothing_accepted(self):
        result = merchant_for("TOTAL $5.00\nThanks")

        assert result.value == "TOTAL $5.00"
        assert result.confidence == 0.60

    def test_only_first_five_non_empty_lines_are_scanned(self):
        result = merchant_for("\n12345\n67890\n11111\n22222\n33333\nLATE NAME")

        assert result.value == "12345"
        assert result.confidence == 0.60

    @pytest.mark.parametrize("text", ["", "\n\n", "   \n\t"])
    def test_no_text_means_no_merchant(self, text):
        result = merchant_for(text)

        assert result.value is None
        assert result.confidence == 0.0

    def test_name_made_only_of_symbols_is_dropped(self):
        result = merchant_for("***\n###")

        assert result.value is None
        assert result.confidence == 0.0
