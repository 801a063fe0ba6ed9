from __future__ import annotations

"""
Mapping utilities between the catalog frame and the domain models.

Catalog rows are converted into strict :class:`~nextidea.models.IdeaTemplate`
objects here, and templates are turned into user-facing ideas with
localised notes.  Keeping this in one place lets ``retrieval`` stay a
pure DataFrame filter and ``api`` stay thin.
"""

from typing import List, Sequence

import pandas as pd
from loguru import logger

from .config import LOCAL_NOTES_TEMPLATE
from .models import CostRange, Idea, IdeaScore, IdeaTemplate, IdeaWithScore, create_idea


def _as_list(raw) -> List[str]:
    if isinstance(raw, (list, tuple)):
        return [str(x) for x in raw]
    return []


def to_template(row: pd.Series) -> IdeaTemplate:
    """Convert one normalised catalog row into an :class:`IdeaTemplate`."""
    try:
        return IdeaTemplate(
            title=str(row.get("title", "")).strip(),
            summary=str(row.get("summary", "")).strip(),
            target_customer=str(row.get("target_customer", "")).strip(),
            steps_to_start=_as_list(row.get("steps_to_start")),
            cost_range=CostRange(
                min=int(row.get("cost_min", 0) or 0),
                max=int(row.get("cost_max", 0) or 0),
                currency="USD",
            ),
            complexity=str(row.get("complexity", "")).strip().upper(),
            local_viability_notes=str(row.get("local_viability_notes", "")).strip(),
            tags=_as_list(row.get("tags")),
            why_now_signals=_as_list(row.get("why_now_signals")),
        )
    except Exception as e:
        logger.exception("Error mapping catalog row to template: {}", e)
        raise


def frame_to_templates(df: pd.DataFrame) -> List[IdeaTemplate]:
    return [to_template(row) for _, row in df.iterrows()]


def localise_notes(notes: str, city: str) -> str:
    return LOCAL_NOTES_TEMPLATE.format(notes=notes, city=city)


def personalise(template: IdeaTemplate, city: str) -> Idea:
    """Mint an idea from a template with notes localised to ``city``."""
    return create_idea(
        template,
        local_viability_notes=localise_notes(template.local_viability_notes, city),
    )


def attach_scores(ideas: Sequence[Idea], scores: Sequence[IdeaScore]) -> List[IdeaWithScore]:
    """Pair ideas with their scores positionally."""
    if len(ideas) != len(scores):
        raise ValueError(f"Got {len(scores)} scores for {len(ideas)} ideas")
    return [IdeaWithScore(**idea.model_dump(), score=score) for idea, score in zip(ideas, scores)]
