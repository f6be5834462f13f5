#!/usr/bin/env python
"""
Print an itemized quote and its trace for one session.

Usage:
    python scripts/quote_session.py BAR 2025-08-17T12:00:00+00:00 2025-08-17T13:35:00+00:00
    python scripts/quote_session.py VIP_A <start> <end> --room --nominations 1 --drinks 3000
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from session_pricing.engine import AddOns, DomainError, QuotationEngine, SessionInput


def main(argv=None):
    parser = argparse.ArgumentParser(description="Quote a seating session")
    parser.add_argument("plan")
    parser.add_argument("start_at", help="ISO-8601 start time")
    parser.add_argument("end_at", help="ISO-8601 end time")
    parser.add_argument("--room", action="store_true", help="use the private room")
    parser.add_argument("--nominations", type=int, default=0)
    parser.add_argument("--inhouse", type=int, default=0)
    parser.add_argument("--house-fee", action="store_true")
    parser.add_argument("--single-charge", action="store_true")
    parser.add_argument("--drinks", type=int, default=0, help="drink total in yen")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        session = SessionInput(
            plan=args.plan,
            start_at=args.start_at,
            end_at=args.end_at,
            add_ons=AddOns(
                use_room=args.room,
                nomination_count=args.nominations,
                inhouse_count=args.inhouse,
                apply_house_fee=args.house_fee,
                apply_single_charge=args.single_charge,
                drink_total=args.drinks,
            ),
        )
        quote = QuotationEngine().quote(session)
    except DomainError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"{quote.plan.value}: {quote.elapsed_minutes} min")
    print("-" * 60)
    for line in quote.lines:
        print(f"{line.code.value:<14} {line.label:<26} {line.quantity:>3} × ¥{line.unit_price:>7,} = ¥{line.amount:>8,}")
    print("-" * 60)
    print(f"{'Subtotal':<50} ¥{quote.subtotal:>8,}")
    print(f"{'Service':<50} ¥{quote.service_amount:>8,}")
    print(f"{'Tax':<50} ¥{quote.tax_amount:>8,}")
    print(f"{'Total':<50} ¥{quote.total:>8,}")
    for warning in quote.warnings:
        print(f"⚠ {warning}")
    print()
    print(quote.get_trace_text())


if __name__ == "__main__":
    main()
