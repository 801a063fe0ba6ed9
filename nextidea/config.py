from __future__ import annotations
"""
Configuration for the Next Business Idea service.
"""

import os
import sys
from pathlib import Path
from typing import Dict, List

from loguru import logger

# Paths
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent
DATA_DIR = PACKAGE_DIR / "data"
CATALOG_PATH = DATA_DIR / "idea_catalog.json"
LOG_DIR = PROJECT_ROOT / "logs"


def _int_env(name: str, fallback: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer {}={!r}; using {}", name, raw, fallback)
        return fallback


def _clamped_int_env(name: str, fallback: int, lo: int, hi: int) -> int:
    value = _int_env(name, fallback)
    clamped = max(lo, min(hi, value))
    if clamped != value:
        logger.warning("{}={} is outside [{}, {}]; using {}", name, value, lo, hi, clamped)
    return clamped


def _csv_env(name: str, fallback: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(fallback)
    items = [part.strip() for part in raw.split(",") if part.strip()]
    return items or list(fallback)


# Catalog override (JSON file with the same record layout as the bundled one)
CATALOG_PATH_OVERRIDE = os.getenv("NEXTIDEA_CATALOG_PATH") or None

# Result policy
DEFAULT_RESULT_COUNT = 10
RESULT_MAX_COUNT = 30
RESULT_DEFAULT_COUNT = _clamped_int_env("NEXTIDEA_RESULT_COUNT", DEFAULT_RESULT_COUNT, 1, RESULT_MAX_COUNT)
SAVED_LIST_MAX = 1000
SAVED_LIST_LIMIT = _clamped_int_env("NEXTIDEA_SAVED_LIMIT", 50, 1, SAVED_LIST_MAX)
RECENT_CACHE_SIZE = _clamped_int_env("NEXTIDEA_RECENT_CACHE_SIZE", 500, 1, 100_000)

# HTTP
CORS_ORIGINS: List[str] = _csv_env("NEXTIDEA_CORS_ORIGINS", ["*"])

# Logging
LOG_LEVEL = os.getenv("NEXTIDEA_LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("NEXTIDEA_LOG_TO_FILE", "").strip().lower() in {"1", "true", "yes", "on"}
LOG_ROTATION = "10 MB"

# Scoring bounds
SCORE_MIN = 0
SCORE_MAX = 100

# Overall blend (competition is inverted before weighting)
WEIGHT_DEMAND = 0.35
WEIGHT_COMPETITION = 0.20
WEIGHT_FEASIBILITY = 0.25
WEIGHT_PROFITABILITY = 0.20

# Demand
DEMAND_BASELINE = 50
DEMAND_TAG_MATCH_BONUS = 10
DEMAND_WHY_NOW_MIN_SIGNALS = 2
DEMAND_WHY_NOW_BONUS = 10
# no market data yet: every location gets the same nudge
DEMAND_LOCATION_BONUS = 5

# Competition (higher = more saturated)
COMPETITION_BASELINE = 55
COMPETITION_BY_TAG: Dict[str, int] = {
    "social-media": 85,
    "dropshipping": 80,
    "fitness": 75,
    "content": 70,
    "service": 60,
    "marketing": 65,
    "design": 70,
    "saas": 72,
    "ai": 75,
    "default": 55,
}
COMPETITION_NICHE_CUSTOMER_CHARS = 60
COMPETITION_NICHE_DISCOUNT = 5
COMPETITION_ONLINE_TAGS = ("digital", "online")
COMPETITION_ONLINE_DISCOUNT = 3

# Feasibility
FEASIBILITY_BASELINE = 50
BUDGET_MAX_COST: Dict[str, int] = {
    "LOW": 1000,
    "MEDIUM": 3000,
    "HIGH": 10000,
}
BUDGET_STRETCH_FACTOR = 1.5
COMPLEXITY_HOURS_NEEDED: Dict[str, int] = {
    "LOW": 5,
    "MEDIUM": 15,
    "HIGH": 30,
}
HOURS_TIGHT_FACTOR = 0.7
STEPS_SIMPLE_MAX = 3
STEPS_LONG_MIN = 6

# Profitability
PROFITABILITY_BASELINE = 50
PROFIT_MARGIN_DEFAULT = 45
PROFIT_MARGIN_BY_TAG: Dict[str, int] = {
    "service": 70,
    "digital": 85,
    "saas": 80,
    "product": 40,
    "ecommerce": 30,
    "coaching": 75,
    "affiliate": 20,
}
PROFIT_SCALABLE_TAGS = ("service", "digital")
PROFIT_SCALABLE_BONUS = 5

# Business type -> tag keywords used by the catalog filter
BUSINESS_TYPE_TAGS: Dict[str, List[str]] = {
    "SERVICE": ["service"],
    "PRODUCT": ["product"],
    "DIGITAL": ["digital"],
}

# Personalisation
LOCAL_NOTES_TEMPLATE = "{notes} (Localized for {city}: Consider local competition and demographics)."


def configure_logging(level: str | None = None) -> None:
    """Reset loguru sinks: stderr always, plus a rotating file when enabled."""
    level = (level or LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, level=level)
    if LOG_TO_FILE:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(LOG_DIR / "nextidea.log", level=level, rotation=LOG_ROTATION)
