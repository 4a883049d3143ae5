"""
Debug script to see what the parser extracts from a receipt text file.

Usage:
    python scripts/debug_receipt.py path/to/receipt.txt
    python scripts/debug_receipt.py path/to/receipt.txt --json
"""

import argparse
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from receipt_engine.services.parser import (
    ReceiptParser,
    extract_currency,
    extract_date,
    extract_merchant,
    extract_tax,
    find_amount_candidates,
    split_lines,
)
from receipt_engine.utils.money import format_money


def main():
    arg_parser = argparse.ArgumentParser(description="Run the receipt parser over an OCR text file")
    arg_parser.add_argument("path", help="Receipt text file")
    arg_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = arg_parser.parse_args()

    with open(args.path, encoding="utf-8") as f:
        text = f.read()

    result = ReceiptParser().parse(text)

    if args.json:
        print(result.model_dump_json(by_alias=True, indent=2))
        return

    lines = split_lines(text)
    candidates = find_amount_candidates(lines)

    print("="*60)
    print(f"Receipt: {args.path} ({len(lines)} lines)")
    print("="*60)

    for label, field in (
        ("Merchant", extract_merchant(lines)),
        ("Date", extract_date(lines)),
        ("Tax", extract_tax(lines)),
        ("Currency", extract_currency(text, has_amounts=bool(candidates))),
    ):
        print(f"{label:<10} {field.value!s:<30} {field.confidence:.2f}  ({field.pattern_name or 'not found'})")

    print(f"{'Amount':<10} {format_money(result.amount, result.currency):<30} {result.confidence.amount:.2f}")
    print("\nAmount candidates:")
    for candidate in sorted(candidates, key=lambda c: c.value, reverse=True):
        print(f"  line {candidate.line_position:>3}: {candidate.value}  ({candidate.raw_text})")

    print(f"\nOverall confidence: {result.confidence.overall:.2f}")


if __name__ == "__main__":
    main()
