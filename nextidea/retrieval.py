from __future__ import annotations

"""
Catalog retrieval for the idea generator.

Candidates come straight from the curated catalog: an optional
business-type filter, then a relevance sort by how many of the user's
interests hit an idea's tags or summary, then a slice.  There is no
index to build; the catalog is small enough to scan every request.

Example::

    from nextidea.retrieval import filter_ideas
    for template in filter_ideas(["design", "pets"], "SERVICE", count=5):
        ...

"""

from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from .catalog_build import load_catalog
from .config import BUSINESS_TYPE_TAGS, DEFAULT_RESULT_COUNT
from .mapping import frame_to_templates
from .models import IdeaTemplate


def _matches_business_type(tags: Sequence[str], keywords: Sequence[str]) -> bool:
    lowered = [t.lower() for t in tags]
    return any(keyword in tag for keyword in keywords for tag in lowered)


def relevance(interests: Sequence[str], tags: Sequence[str], summary: str) -> int:
    """Number of interests that equal a tag or appear inside the summary."""
    lowered_tags = {t.lower() for t in tags}
    lowered_summary = summary.lower()
    hits = 0
    for interest in interests:
        needle = interest.lower()
        if needle in lowered_tags or needle in lowered_summary:
            hits += 1
    return hits


def rank_catalog(
    interests: Sequence[str],
    business_type: Optional[str] = None,
    count: int = DEFAULT_RESULT_COUNT,
    catalog_df: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """Filter and rank catalog rows, returning at most ``count`` of them.

    Rows tie-break on catalog order so the ranking is deterministic.  A
    ``relevance`` column is added to the returned frame.
    """
    if catalog_df is None:
        catalog_df = load_catalog()
    df = catalog_df

    if business_type:
        keywords = BUSINESS_TYPE_TAGS.get(business_type.upper(), [])
        mask = df["tags"].apply(lambda tags: _matches_business_type(tags, keywords))
        df = df[mask]
        logger.info("Business type {} kept {} of {} templates", business_type, len(df), len(catalog_df))

    if count <= 0 or df.empty:
        return df.iloc[0:0].assign(relevance=pd.Series(dtype="int64"))

    df = df.assign(
        relevance=[
            relevance(interests, tags, summary)
            for tags, summary in zip(df["tags"], df["summary"])
        ]
    )
    df = df.sort_values(["relevance", "template_id"], ascending=[False, True])
    return df.head(count)


def filter_ideas(
    interests: Sequence[str],
    business_type: Optional[str] = None,
    count: int = DEFAULT_RESULT_COUNT,
    catalog_df: Optional[pd.DataFrame] = None,
) -> List[IdeaTemplate]:
    """High-level catalog filter returning templates in relevance order."""
    ranked = rank_catalog(interests, business_type, count, catalog_df)
    logger.info("Retrieved {} templates for interests {}", len(ranked), list(interests))
    return frame_to_templates(ranked)


def get_idea_catalog(catalog_df: Optional[pd.DataFrame] = None) -> List[IdeaTemplate]:
    """Every catalog template, in catalog order."""
    if catalog_df is None:
        catalog_df = load_catalog()
    return frame_to_templates(catalog_df)
