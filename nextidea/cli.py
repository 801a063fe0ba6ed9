# nextidea/cli.py
"""
Batch runner for the Next Business Idea generator.
Scores ideas for one profile without starting FastAPI.

- `generate`: filter + score for a profile, print a ranked summary or write a CSV
- `catalog`: dump the curated templates (one row per template)
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from nextidea.catalog_build import load_catalog
from nextidea.config import RESULT_DEFAULT_COUNT, RESULT_MAX_COUNT, configure_logging
from nextidea.integrations import get_idea_generator, get_scoring_service
from nextidea.mapping import attach_scores
from nextidea.models import IdeaWithScore, Location, UserInputs

LEVELS = ["LOW", "MEDIUM", "HIGH"]
BUSINESS_TYPES = ["SERVICE", "PRODUCT", "DIGITAL"]


def parse_interests(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def run_generate(user_inputs: UserInputs, count: int) -> List[IdeaWithScore]:
    ideas = get_idea_generator().generate_ideas(user_inputs, count)
    scores = get_scoring_service().score_ideas(ideas, user_inputs)
    return attach_scores(ideas, scores)


def ideas_to_frame(ideas: Sequence[IdeaWithScore]) -> pd.DataFrame:
    """
    Flatten scored ideas into one row each; list fields are joined with "; "
    so the CSV stays readable in a spreadsheet.
    """
    rows = []
    for rank, item in enumerate(ideas, 1):
        rows.append({
            "rank": rank,
            "title": item.title,
            "overall_score": item.score.overall_score,
            "demand_score": item.score.demand_score,
            "competition_score": item.score.competition_score,
            "feasibility_score": item.score.feasibility_score,
            "profitability_score": item.score.profitability_score,
            "reasons": "; ".join(item.score.reasons),
            "cost_min": item.cost_range.min,
            "cost_max": item.cost_range.max,
            "complexity": item.complexity,
            "tags": "; ".join(item.tags),
            "local_viability_notes": item.local_viability_notes,
        })
    return pd.DataFrame(rows)


def write_csv(df: pd.DataFrame, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)


def catalog_to_frame() -> pd.DataFrame:
    df = load_catalog().copy()
    for col in ("steps_to_start", "tags", "why_now_signals"):
        df[col] = df[col].apply("; ".join)
    return df


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="nextidea")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="generate and score ideas for a profile")
    gen.add_argument("--city", required=True)
    gen.add_argument("--state", required=True)
    gen.add_argument("--interests", default="", help="comma-separated, e.g. 'design, pets'")
    gen.add_argument("--budget", choices=LEVELS, default="MEDIUM")
    gen.add_argument("--hours", type=int, default=20, help="hours per week available")
    gen.add_argument("--type", dest="business_type", choices=BUSINESS_TYPES, default="SERVICE")
    gen.add_argument("--risk", choices=LEVELS, default="MEDIUM")
    gen.add_argument("--count", type=int, default=RESULT_DEFAULT_COUNT,
                     help=f"max ideas (1-{RESULT_MAX_COUNT})")
    gen.add_argument("--out", type=str, default=None, help="optional CSV output file")

    cat = sub.add_parser("catalog", help="dump the curated idea catalog")
    cat.add_argument("--out", type=str, default=None, help="optional CSV output file")

    ap.add_argument("--log-level", default=None)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)
    configure_logging(args.log_level or "WARNING")

    if args.command == "catalog":
        df = catalog_to_frame()
        if args.out:
            write_csv(df, Path(args.out))
            print(f"Wrote {len(df)} templates to {args.out}")
        else:
            for _, row in df.iterrows():
                print(f"{row['template_id']:>3}  {row['title']}  [{row['tags']}]")
        return 0

    count = max(1, min(args.count, RESULT_MAX_COUNT))
    try:
        user_inputs = UserInputs(
            location=Location(city=args.city, state=args.state),
            interests=parse_interests(args.interests),
            budget=args.budget,
            hours_per_week=args.hours,
            business_type=args.business_type,
            risk_tolerance=args.risk,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        ap.error(f"invalid profile: {problems}")

    try:
        ideas = run_generate(user_inputs, count)
    except Exception as e:
        logger.exception("Idea generation failed")
        print(f"[ERROR] {e}")
        return 1

    if args.out:
        write_csv(ideas_to_frame(ideas), Path(args.out))
        print(f"Wrote {len(ideas)} ideas to {args.out}")
        return 0

    print(f"{len(ideas)} ideas for {args.city}, {args.state}")
    for rank, item in enumerate(ideas, 1):
        print(f"{rank:>2}. [{item.score.overall_score:>3}] {item.title}  ({item.score.reasons[0]})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
