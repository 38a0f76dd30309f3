import argparse
import json
import sys
from pathlib import Path

from api.services.shift_report import ShiftReportInvalid, render_shift_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a shift report from a JSON observation file.")
    parser.add_argument("input", type=Path, help="JSON file with the form fields")
    parser.add_argument("-s", "--seed", type=int, help="Deterministic seed")
    parser.add_argument("--json", action="store_true", help="Print the full response as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    data = json.loads(args.input.read_text(encoding="utf-8"))
    if args.seed is not None:
        data["seed"] = args.seed
    try:
        result = render_shift_report(data)
    except ShiftReportInvalid as exc:
        for message in exc.errors:
            print(message, file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(result, ensure_ascii=False, indent=2))
    else:
        print(result["text"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
