from __future__ import annotations

"""
Service contracts and their default, in-process implementations.

The API only talks to three interfaces:

- :class:`IdeaGenerator` produces candidate ideas for a profile,
- :class:`ScoringService` scores them,
- :class:`IdeaRepository` keeps the user's favorites.

The defaults are backed by the curated catalog, the deterministic
scorer and a plain dict.  Swap any of them with the ``set_*`` hooks
(tests do this) without touching the routes.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import pandas as pd
from loguru import logger

from .config import DEFAULT_RESULT_COUNT
from .mapping import personalise
from .models import Idea, IdeaScore, ScoringWeights, UserInputs
from .retrieval import filter_ideas
from .scoring import score_idea as _score_idea
from .scoring import score_ideas as _score_ideas

SavedIdea = Tuple[Idea, IdeaScore]


# ---------------------------
# Contracts
# ---------------------------

class IdeaGenerator(ABC):
    @abstractmethod
    def generate_ideas(self, user_inputs: UserInputs, count: int = DEFAULT_RESULT_COUNT) -> List[Idea]:
        ...


class ScoringService(ABC):
    @abstractmethod
    def score_idea(self, idea: Idea, user_inputs: UserInputs) -> IdeaScore:
        ...

    @abstractmethod
    def score_ideas(self, ideas: List[Idea], user_inputs: UserInputs) -> List[IdeaScore]:
        ...


class IdeaRepository(ABC):
    @abstractmethod
    def save(self, idea: Idea, score: IdeaScore) -> None:
        ...

    @abstractmethod
    def find_by_id(self, idea_id: str) -> Optional[SavedIdea]:
        ...

    @abstractmethod
    def find_all(self, limit: Optional[int] = None) -> List[SavedIdea]:
        ...

    @abstractmethod
    def delete(self, idea_id: str) -> None:
        ...


# ---------------------------
# Default implementations
# ---------------------------

class CatalogIdeaGenerator(IdeaGenerator):
    """Picks templates from the curated catalog and localises them."""

    def __init__(self, catalog_df: Optional[pd.DataFrame] = None):
        self._catalog_df = catalog_df

    def generate_ideas(self, user_inputs: UserInputs, count: int = DEFAULT_RESULT_COUNT) -> List[Idea]:
        templates = filter_ideas(
            user_inputs.interests,
            user_inputs.business_type,
            count,
            catalog_df=self._catalog_df,
        )
        city = user_inputs.location.city
        ideas = [personalise(t, city) for t in templates]
        logger.info("Generated {} ideas for {}, {}", len(ideas), city, user_inputs.location.state)
        return ideas


class RuleBasedScoringService(ScoringService):
    """Deterministic scoring from :mod:`nextidea.scoring`."""

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights

    def score_idea(self, idea: Idea, user_inputs: UserInputs) -> IdeaScore:
        return _score_idea(idea, user_inputs, self.weights)

    def score_ideas(self, ideas: List[Idea], user_inputs: UserInputs) -> List[IdeaScore]:
        return _score_ideas(ideas, user_inputs, self.weights)


class InMemoryIdeaRepository(IdeaRepository):
    """Favorites kept in a dict; everything is lost on restart."""

    def __init__(self) -> None:
        self._store: Dict[str, SavedIdea] = {}

    def save(self, idea: Idea, score: IdeaScore) -> None:
        # re-saving an id replaces the entry but keeps its position
        self._store[idea.id] = (idea, score)

    def find_by_id(self, idea_id: str) -> Optional[SavedIdea]:
        return self._store.get(idea_id)

    def find_all(self, limit: Optional[int] = None) -> List[SavedIdea]:
        items = list(self._store.values())
        return items[:limit] if limit else items

    def delete(self, idea_id: str) -> None:
        self._store.pop(idea_id, None)

    def __len__(self) -> int:
        return len(self._store)


# ---------------------------
# Providers
# ---------------------------

_idea_generator: Optional[IdeaGenerator] = None
_scoring_service: Optional[ScoringService] = None
_idea_repository: Optional[IdeaRepository] = None


def get_idea_generator() -> IdeaGenerator:
    global _idea_generator
    if _idea_generator is None:
        _idea_generator = CatalogIdeaGenerator()
    return _idea_generator


def get_scoring_service() -> ScoringService:
    global _scoring_service
    if _scoring_service is None:
        _scoring_service = RuleBasedScoringService()
    return _scoring_service


def get_idea_repository() -> IdeaRepository:
    global _idea_repository
    if _idea_repository is None:
        _idea_repository = InMemoryIdeaRepository()
    return _idea_repository


def set_idea_generator(generator: IdeaGenerator) -> None:
    global _idea_generator
    _idea_generator = generator


def set_scoring_service(service: ScoringService) -> None:
    global _scoring_service
    _scoring_service = service


def set_idea_repository(repository: IdeaRepository) -> None:
    global _idea_repository
    _idea_repository = repository


def reset_providers() -> None:
    global _idea_generator, _scoring_service, _idea_repository
    _idea_generator = None
    _scoring_service = None
    _idea_repository = None
