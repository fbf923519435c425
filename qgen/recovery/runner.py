import argparse
import dataclasses
import json
import sys
from pathlib import Path

from ..config import load_settings
from ..logging_setup import setup_logging
from .pipeline import QuestionRecovery


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Recover questions or lesson plans from raw model output")

    # Input
    parser.add_argument("input", nargs="?", default="-", help="File with raw model output ('-' reads stdin)")

    # Mode
    parser.add_argument("--lesson-plan", action="store_true", help="Parse a lesson plan instead of questions")
    parser.add_argument("--objectives", action="store_true", help="Parse an extracted-objectives response")
    parser.add_argument("--duration", type=int, default=None, help="Expected lesson duration in minutes")
    parser.add_argument("--raw", action="store_true", help="Skip display-text cleanup of recovered fields")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(verbose=args.verbose, level=settings.log_level)
    if args.raw:
        settings = dataclasses.replace(settings, protect_display_text=False)

    try:
        if args.input == "-":
            text = sys.stdin.read()
        else:
            text = Path(args.input).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    recovery = QuestionRecovery(settings)
    if args.lesson_plan:
        payload = recovery.recover_lesson_plan(text, args.duration).to_dict()
    elif args.objectives:
        payload = recovery.recover_objectives(text).to_dict()
    else:
        payload = [q.to_dict() for q in recovery.recover(text)]

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
