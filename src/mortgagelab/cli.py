"""
Command-line interface for MortgageLab.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from datetime import date
from enum import Enum

from mortgagelab import __version__
from mortgagelab.calculators.affordability import (
    DsrThresholds,
    assess_banks,
    compute_affordability,
    compute_gap,
)
from mortgagelab.calculators.amortization import amortize, compute_installment
from mortgagelab.calculators.flexi import LoanType, PaymentMethod, simulate_flexi_loan
from mortgagelab.calculators.income import INCOME_TYPES, recognize_income
from mortgagelab.calculators.levy import entry_costs
from mortgagelab.calculators.reverse import reverse_affordability
from mortgagelab.core.errors import ConfigError
from mortgagelab.core.handbook import DEFAULT_HANDBOOK, load_handbook
from mortgagelab.core.specs import LoanTerms
from mortgagelab.core.utils import coerce_date, coerce_number


class ResultEncoder(json.JSONEncoder):
    """JSON encoder that handles dates, enums, dataclasses and pandas objects."""

    def default(self, obj):
        import numpy as np
        import pandas as pd

        if isinstance(obj, (date, pd.Timestamp)):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, np.datetime64):
            return str(obj)
        elif isinstance(obj, np.generic):
            return obj.item()
        elif isinstance(obj, pd.DataFrame):
            return json.loads(obj.to_json(orient="records", date_format="iso"))
        elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        elif hasattr(obj, "_asdict"):
            return obj._asdict()
        elif hasattr(obj, "items"):
            return dict(obj.items())
        return super().default(obj)


def _dump(data) -> None:
    json.dump(data, sys.stdout, indent=2, cls=ResultEncoder)
    sys.stdout.write("\n")


def _save_json(path: str, data) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=ResultEncoder)


def _terms(args) -> LoanTerms:
    terms = LoanTerms.from_raw(
        args.principal, args.rate, args.years, getattr(args, "start", None)
    )
    if not terms.is_valid:
        raise ConfigError(
            "Loan terms need principal > 0, rate >= 0, 0 < years <= 35 "
            "and a YYYY-MM-DD start date"
        )
    return terms


def _handbook(args):
    path = getattr(args, "handbook", None)
    return load_handbook(path) if path else DEFAULT_HANDBOOK


def _parse_advance(text: str) -> tuple[date, float]:
    """Parse ``YYYY-MM-DD:AMOUNT``."""
    when, sep, amount = text.partition(":")
    parsed = coerce_date(when)
    value = coerce_number(amount)
    if not sep or parsed is None or value <= 0:
        raise argparse.ArgumentTypeError(
            f"Advance must look like YYYY-MM-DD:AMOUNT, got {text!r}"
        )
    return parsed, value


def _parse_income(text: str) -> tuple[str, float]:
    """Parse ``TYPE=AMOUNT``."""
    key, sep, amount = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(
            f"Income must look like TYPE=AMOUNT, got {text!r}"
        )
    return key, coerce_number(amount)


def cmd_example(_) -> int:
    """Print the default policy handbook as JSON, ready to edit and pass back."""
    _dump(DEFAULT_HANDBOOK.to_dict())
    return 0


def cmd_installment(args) -> int:
    """Print the monthly installment."""
    try:
        payment = compute_installment(args.principal, args.rate, args.years)
        _dump({"installment": payment})
        return 0
    except Exception as e:
        print(f"Error computing installment: {e}", file=sys.stderr)
        return 1


def cmd_schedule(args) -> int:
    """Print or save the amortization schedule."""
    try:
        result = amortize(_terms(args))
        out = {
            "installment": result.installment,
            "totals": result.totals,
            "rows": result.annual() if args.annual else result.frame(),
        }
        if args.output:
            _save_json(args.output, out)
            print(f"Schedule saved to {args.output}")
        else:
            _dump(out)
        return 0
    except Exception as e:
        print(f"Error building schedule: {e}", file=sys.stderr)
        return 1


def cmd_entry_costs(args) -> int:
    """Print legal fee and stamp duties."""
    try:
        _dump(entry_costs(args.price, args.loan).to_dict())
        return 0
    except Exception as e:
        print(f"Error computing entry costs: {e}", file=sys.stderr)
        return 1


def cmd_dsr(args) -> int:
    """Print DSR, NDI, band, gap and per-bank decisions."""
    try:
        handbook = _handbook(args)
        result = compute_affordability(
            args.commitment,
            args.income,
            args.baseline,
            thresholds=DsrThresholds.from_handbook(handbook),
        )
        _dump(
            {
                **result.to_dict(),
                "gap": compute_gap(args.commitment, args.income),
                "banks": assess_banks(result.dsr_ratio, handbook),
            }
        )
        return 0
    except Exception as e:
        print(f"Error assessing affordability: {e}", file=sys.stderr)
        return 1


def cmd_income(args) -> int:
    """Print recognized income per type."""
    try:
        recognition = recognize_income(
            dict(args.income or ()), _handbook(args), children=args.children
        )
        _dump(recognition)
        return 0
    except Exception as e:
        print(f"Error recognizing income: {e}", file=sys.stderr)
        return 1


def cmd_reverse(args) -> int:
    """Print the largest loan and property price for a monthly budget."""
    try:
        _dump(reverse_affordability(args.payment, args.rate, args.years, args.margin))
        return 0
    except Exception as e:
        print(f"Error computing reverse affordability: {e}", file=sys.stderr)
        return 1


def cmd_flexi(args) -> int:
    """Simulate a flexi loan and print its summary."""
    try:
        result = simulate_flexi_loan(
            _terms(args),
            args.advance or (),
            LoanType(args.type),
            payment_method=PaymentMethod(args.method),
        )
        out = {"summary": result.summary.to_dict()}
        if args.events:
            out["events"] = result.events_frame()
        if args.points:
            out["points"] = result.points_frame()
        _dump(out)
        return 0
    except Exception as e:
        print(f"Error simulating flexi loan: {e}", file=sys.stderr)
        return 1


def _add_loan_arguments(parser: argparse.ArgumentParser, start: bool) -> None:
    parser.add_argument("--principal", type=float, required=True, help="Loan amount")
    parser.add_argument(
        "--rate", type=float, required=True, help="Annual rate in percent (4.1)"
    )
    parser.add_argument("--years", type=int, required=True, help="Tenure in years")
    if start:
        parser.add_argument(
            "--start", default=date.today().isoformat(), help="Start date (YYYY-MM-DD)"
        )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="mortgagelab", description="MortgageLab - Mortgage calculation toolkit"
    )

    parser.add_argument(
        "--version", action="version", version=f"MortgageLab {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example", help="Print the default policy handbook as JSON"
    )
    example_parser.set_defaults(func=cmd_example)

    # Installment command
    installment_parser = subparsers.add_parser(
        "installment", help="Monthly installment for a loan"
    )
    _add_loan_arguments(installment_parser, start=False)
    installment_parser.set_defaults(func=cmd_installment)

    # Schedule command
    schedule_parser = subparsers.add_parser(
        "schedule", help="Amortization schedule for a loan"
    )
    _add_loan_arguments(schedule_parser, start=True)
    schedule_parser.add_argument(
        "--annual", action="store_true", help="Roll the schedule up by year"
    )
    schedule_parser.add_argument("-o", "--output", help="Output JSON file")
    schedule_parser.set_defaults(func=cmd_schedule)

    # Entry costs command
    costs_parser = subparsers.add_parser(
        "entry-costs", help="Legal fee and stamp duties for a purchase"
    )
    costs_parser.add_argument("--price", type=float, required=True)
    costs_parser.add_argument("--loan", type=float, default=0.0)
    costs_parser.set_defaults(func=cmd_entry_costs)

    # DSR command
    dsr_parser = subparsers.add_parser("dsr", help="Debt-service ratio assessment")
    dsr_parser.add_argument(
        "--commitment", type=float, required=True, help="Total monthly commitments"
    )
    dsr_parser.add_argument(
        "--income", type=float, required=True, help="Net monthly income"
    )
    dsr_parser.add_argument(
        "--baseline", type=float, default=0.0, help="Cost-of-living baseline"
    )
    dsr_parser.add_argument("--handbook", help="Policy handbook (YAML or JSON)")
    dsr_parser.set_defaults(func=cmd_dsr)

    # Income command
    income_parser = subparsers.add_parser(
        "income", help="Recognized income after deductions and haircuts"
    )
    income_parser.add_argument(
        "--income",
        type=_parse_income,
        action="append",
        help=f"TYPE=AMOUNT, TYPE one of {', '.join(INCOME_TYPES)}",
    )
    income_parser.add_argument("--children", type=int, default=0)
    income_parser.add_argument("--handbook", help="Policy handbook (YAML or JSON)")
    income_parser.set_defaults(func=cmd_income)

    # Reverse command
    reverse_parser = subparsers.add_parser(
        "reverse", help="Largest loan and property price for a monthly budget"
    )
    reverse_parser.add_argument("--payment", type=float, required=True)
    reverse_parser.add_argument("--rate", type=float, required=True)
    reverse_parser.add_argument("--years", type=int, required=True)
    reverse_parser.add_argument(
        "--margin", type=float, default=0.9, help="Margin of finance (0.9 = 90%%)"
    )
    reverse_parser.set_defaults(func=cmd_reverse)

    # Flexi command
    flexi_parser = subparsers.add_parser(
        "flexi", help="Simulate a flexi loan against the plain schedule"
    )
    _add_loan_arguments(flexi_parser, start=True)
    flexi_parser.add_argument(
        "--type",
        choices=[t.value for t in LoanType],
        default=LoanType.SEMI_FLEXI.value,
    )
    flexi_parser.add_argument(
        "--method",
        choices=[m.value for m in PaymentMethod],
        default=PaymentMethod.AUTO_DEBIT.value,
        help="How installments are paid",
    )
    flexi_parser.add_argument(
        "--advance",
        type=_parse_advance,
        action="append",
        help="Advance payment as YYYY-MM-DD:AMOUNT (repeatable)",
    )
    flexi_parser.add_argument(
        "--events", action="store_true", help="Include the event log"
    )
    flexi_parser.add_argument(
        "--points", action="store_true", help="Include monthly balances"
    )
    flexi_parser.set_defaults(func=cmd_flexi)

    # Parse arguments and execute
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
