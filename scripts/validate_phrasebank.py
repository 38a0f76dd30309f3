from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.narrative.phrasebank import PhrasebankError, parse_phrasebank
from src.narrative.settings import DEFAULT_PHRASEBANK_PATH

REQUIRED_SLOTS = {
    "lunch": ("weather", "opening", "customers", "peak", "crowd_summary", "best_sellers", "feel_detail", "event", "notice"),
    "dinner": ("opening", "customers", "peak", "crowd_summary", "best_sellers", "feel_detail", "tidy", "event", "notice"),
}
CROWD_LEVELS = ("busy", "normal", "quiet")


def _validate_clause(text: str) -> list[str]:
    issues: list[str] = []
    stripped = text.strip()
    if stripped.count("{") != stripped.count("}"):
        issues.append("template has mismatched braces")
    if "。。" in stripped or "、、" in stripped:
        issues.append("template has doubled punctuation")
    return issues


def validate(path: Path) -> list[str]:
    errors: list[str] = []
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    try:
        bank = parse_phrasebank(payload)
    except PhrasebankError as exc:
        return [str(exc)]
    for service, slots in REQUIRED_SLOTS.items():
        phrases = bank.periods.get(service)
        if phrases is None:
            errors.append(f"missing service period '{service}'")
            continue
        for slot in slots:
            if slot not in phrases.slots:
                errors.append(f"{service}: missing slot '{slot}'")
        summary = phrases.slots.get("crowd_summary")
        if summary is not None:
            for level in CROWD_LEVELS:
                if not any(level in variant.when for variant in summary.variants):
                    errors.append(f"{service}: crowd_summary has no '{level}' pool")
        if None not in phrases.extras:
            errors.append(f"{service}: extras must include the empty option")
        for slot in phrases.slots.values():
            for variant in slot.variants:
                for issue in _validate_clause(variant.text):
                    errors.append(f"{service}.{slot.name} issue: {issue}")
    tidy = bank.periods.get("dinner")
    if tidy is not None and "tidy" in tidy.slots:
        for variant in tidy.slots["tidy"].variants:
            if "quiet" not in variant.when:
                errors.append(f"dinner.tidy variant not gated on quiet: {variant.text}")
    return errors


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate shift report phrase pools.")
    parser.add_argument("--path", type=Path, default=DEFAULT_PHRASEBANK_PATH)
    args = parser.parse_args()
    errors = validate(args.path)
    if errors:
        for issue in errors:
            print(f"ERROR: {issue}")
        return 1
    print("Phrasebank validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
