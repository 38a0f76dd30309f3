#!/usr/bin/env python3
from __future__ import annotations

import argparse
import random
import sys
from collections import Counter
from pathlib import Path
from typing import Iterable

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.narrative.engine import generate_report
from src.narrative.models import ObservationRecord, ServicePeriod

FEELS = {"busy": "満席", "normal": "ふつう", "quiet": "空席あり"}


def _sample_range(seed: int, count: int) -> Iterable[int]:
    for offset in range(count):
        yield seed + offset


def summarize_variations(samples: int, seed: int) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for service in ServicePeriod:
        for crowd, feel in FEELS.items():
            record = ObservationRecord(
                service=service,
                weather="晴れ",
                customer_tags=("家族連れ", "学生"),
                peak_range="12-14",
                crowd_feel=feel,
                best_seller_tags=("親子丼", "から揚げ"),
                event_present=True,
                event_name="物産展",
            )
            texts: set[str] = set()
            sentence_counts: Counter[int] = Counter()
            for current in _sample_range(seed, samples):
                report = generate_report(record, random.Random(current))
                texts.add(report.text)
                sentence_counts[report.sentence_count] += 1
            rows.append(
                {
                    "service": service.value,
                    "crowd": crowd,
                    "unique_texts": len(texts),
                    "sentence_histogram": dict(sentence_counts),
                }
            )
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Report output variety per service period and crowd level.")
    parser.add_argument("--samples", type=int, default=30, help="Number of consecutive seeds to evaluate (default: 30)")
    parser.add_argument("--seed", type=int, default=10_000, help="Base seed for sampling (default: 10000)")
    args = parser.parse_args()

    rows = summarize_variations(args.samples, args.seed)
    header = "Service  Crowd   Unique  Sentences"
    print(header)
    print("-" * len(header))
    for row in rows:
        histogram = ", ".join(f"{count}x{freq}" for count, freq in sorted(row["sentence_histogram"].items()))
        print(f"{row['service']:<7}  {row['crowd']:<6}  {row['unique_texts']:<6}  {histogram}")


if __name__ == "__main__":  # pragma: no cover - CLI utility
    main()
