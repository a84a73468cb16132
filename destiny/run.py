"""
CLI wrapper for calculate_bazi().

Usage:
    python3 destiny/run.py --birth-date YYYY-MM-DD --birth-time HH:MM --gender GENDER \
        [--name NAME] [--calendar lunar|swisseph] [--utc-offset OFFSET] \
        [--latitude LAT --longitude LON] [--prompt] [--output PATH]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from destiny import settings
from destiny.astro_calendar import get_calendar, utc_offset_for
from destiny.bazi import CalculationError, calculate_bazi
from destiny.context import generate_reading_context, render_user_prompt
from destiny.luck import Sex
from destiny.moment import InvalidBirthMomentError, parse_birth_moment, validate_birth_moment

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Calculate a BaZi chart and its first Luck Pillar.")
    parser.add_argument("--birth-date", required=True, dest="birth_date", help="YYYY-MM-DD")
    parser.add_argument("--birth-time", required=True, dest="birth_time", help="HH:MM, local clock time")
    parser.add_argument("--gender", required=True, choices=[s.value for s in Sex])
    parser.add_argument("--name")
    parser.add_argument("--calendar", choices=["lunar", "swisseph"], default=None,
                        help=f"Calendar backend (default: {settings.CALENDAR_BACKEND})")
    parser.add_argument("--utc-offset", dest="utc_offset", type=float, default=None,
                        help="Birth time zone offset in hours (swisseph only)")
    parser.add_argument("--latitude", type=float, default=None)
    parser.add_argument("--longitude", type=float, default=None)
    parser.add_argument("--prompt", action="store_true",
                        help="Print the LLM prompt instead of JSON")
    parser.add_argument("--output", help="Output file path (default: stdout)")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        moment = parse_birth_moment(args.birth_date, args.birth_time)
        validate_birth_moment(moment)
    except InvalidBirthMomentError as exc:
        parser.exit(1, f"error: {exc}\n")

    utc_offset = args.utc_offset
    if utc_offset is None and args.latitude is not None and args.longitude is not None:
        _clock, utc_offset, tz_name, dst = utc_offset_for(args.latitude, args.longitude, moment)
        logger.info("Birth place time zone %s, standard offset %+.1f%s",
                    tz_name, utc_offset, " (DST stripped)" if dst else "")

    sex = Sex(args.gender)
    try:
        bazi = calculate_bazi(moment, sex, get_calendar(args.calendar, utc_offset=utc_offset))
    except CalculationError as exc:
        parser.exit(1, f"error: {exc}\n")

    context = generate_reading_context(bazi, sex, name=args.name, birth_year=moment.year)

    if args.prompt:
        output = render_user_prompt(context)
    else:
        output = json.dumps({"bazi": bazi.to_dict(), "context": context},
                            indent=2, ensure_ascii=False)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(args.output)
    else:
        print(output)


if __name__ == "__main__":
    main()
