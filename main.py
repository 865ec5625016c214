"""
Main application entry point
Command-line bilirubin calculator
"""

import argparse
import logging
import sys
from datetime import date, datetime

from src.core.config import config
from src.core.bilirubin import EvaluationInput, evaluate
from src.core.bilirubin.age import birth_datetime, postnatal_age_hours
from src.utils.preprocessing import parse_numeric_input
from src.utils.report import format_age, format_evaluation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Neonatal hyperbilirubinemia thresholds (AAP 2022)"
    )
    parser.add_argument(
        "--ga", type=int,
        default=config.calculator_config['default_gestational_age'],
        help="Gestational age in completed weeks",
    )
    age = parser.add_mutually_exclusive_group(required=True)
    age.add_argument("--hours", type=float, help="Postnatal age in hours")
    age.add_argument(
        "--birth", type=datetime.fromisoformat,
        help="Birth time (ISO 8601, e.g. 2026-10-16T08:00)",
    )
    age.add_argument(
        "--birth-date", type=date.fromisoformat,
        help="Birth date (YYYY-MM-DD), combined with --birth-hour",
    )
    parser.add_argument(
        "--birth-hour",
        help="Whole hour of birth, 0-23 (any digit script); used with --birth-date",
    )
    parser.add_argument(
        "--lab", type=datetime.fromisoformat,
        help="Lab sample time (ISO 8601); defaults to now",
    )
    parser.add_argument("--tsb", help="Total serum bilirubin in mg/dL (any digit script)")
    parser.add_argument(
        "--risk", action=argparse.BooleanOptionalAction,
        default=config.calculator_config['default_risk_factors'],
        help="Neurotoxicity risk factors present",
    )
    parser.add_argument(
        "--kernicterus", action="store_true",
        help="Clinical signs of acute bilirubin encephalopathy",
    )
    parser.add_argument(
        "--localized", action=argparse.BooleanOptionalAction,
        default=config.input_config['localized_digits'],
        help="Render numbers with Persian digits",
    )
    return parser


def main(argv=None) -> int:
    """Main application workflow"""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.birth_hour is not None and args.birth_date is None:
        parser.error("--birth-hour requires --birth-date")

    logging.basicConfig(
        level=config.logging_config['level'],
        format=config.logging_config['format'],
    )

    if args.hours is not None:
        hours = args.hours
    elif args.birth_date is not None:
        hour_limits = config.input_config['hour']
        birth_hour = parse_numeric_input(
            args.birth_hour, minimum=hour_limits['min'], maximum=hour_limits['max']
        )
        if birth_hour is None:
            birth_hour = hour_limits['start_value']
        hours = postnatal_age_hours(birth_datetime(args.birth_date, birth_hour), args.lab)
    else:
        hours = postnatal_age_hours(args.birth, args.lab)

    limits = config.input_config['bilirubin']
    tsb = parse_numeric_input(
        args.tsb, minimum=limits['min'], maximum=limits['max'], is_float=True
    )
    if args.tsb is not None and tsb is None:
        logger.warning("Ignoring unreadable bilirubin value %r", args.tsb)

    evaluation = evaluate(
        EvaluationInput(
            gestational_age_weeks=args.ga,
            postnatal_age_hours=hours,
            risk_factors_present=args.risk,
            kernicterus_signs_present=args.kernicterus,
            total_bilirubin=tsb,
        )
    )

    print("=" * 60)
    print(f"Age: {format_age(int(hours), localized=args.localized)}")
    print("=" * 60)
    print(format_evaluation(evaluation, localized=args.localized))
    return 0


if __name__ == "__main__":
    sys.exit(main())
