"""Insert one new item into a ranked list by interactive binary search.

A session is an immutable value. Each transition takes the current session
plus exactly one user input and returns the next session, so the caller
owns the "ask the user" step and can suspend between transitions:

    AWAITING_SENTIMENT --choose_sentiment--> SEARCHING --advance--> ... --> RESOLVED
            \\                                    \\
             `--------------- cancel -------------`--> CANCELLED

Sessions only read the existing sorted list, so any number of them can run
against one snapshot of scores.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple
import logging

from movieranker_ranking_engine.models import ScoredItem

logger = logging.getLogger(__name__)


class Sentiment(str, Enum):
    """Coarse first impression of the new item relative to the catalog."""
    HIGH = "high"
    MID = "mid"
    LOW = "low"


class Judgment(str, Enum):
    """Outcome of comparing the new item against the current opponent."""
    BETTER = "better"
    WORSE = "worse"
    TIE = "tie"


class SessionStage(str, Enum):
    AWAITING_SENTIMENT = "awaiting_sentiment"
    SEARCHING = "searching"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class InvalidTransitionError(ValueError):
    """Raised when a transition is not allowed from the session's stage."""


@dataclass(frozen=True)
class RankInsertionSession:
    """State of one in-progress insertion."""

    sorted_scores: Tuple[ScoredItem, ...]
    stage: SessionStage = SessionStage.AWAITING_SENTIMENT
    lower_bound: int = 0
    upper_bound: int = -1
    current_index: int = 0
    score: Optional[int] = None
    tied: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.stage in (SessionStage.RESOLVED, SessionStage.CANCELLED)

    @property
    def opponent(self) -> Optional[ScoredItem]:
        """Existing entry the new item is currently compared against."""
        if self.stage is not SessionStage.SEARCHING:
            return None
        return self.sorted_scores[self.current_index]

    @property
    def insert_index(self) -> Optional[int]:
        """Final position in the sorted list, once resolved."""
        if self.stage is not SessionStage.RESOLVED:
            return None
        return self.current_index if self.tied else self.lower_bound


def _half(value: int) -> int:
    # Truncates toward zero, also for negative values
    return int(value / 2)


class RankInserter:
    """Transitions and score resolution for RankInsertionSession."""

    def __init__(
        self,
        default_score: int = 85,
        max_score: int = 99,
        min_score: int = 1,
        max_edge_gap: int = 8,
        small_catalog_threshold: int = 5
    ):
        """
        Initialize rank inserter.

        Args:
            default_score: Score for the first item in an empty list
            max_score: Highest score a new top item can receive
            min_score: Lowest score a new bottom item can receive
            max_edge_gap: Largest step above the best / below the worst score
            small_catalog_threshold: Below this many entries the sentiment
                                     bucket does not narrow the search
        """
        self.default_score = default_score
        self.max_score = max_score
        self.min_score = min_score
        self.max_edge_gap = max_edge_gap
        self.small_catalog_threshold = small_catalog_threshold

    def _require(self, session: RankInsertionSession, stage: SessionStage, action: str):
        if session.stage is not stage:
            raise InvalidTransitionError(
                f"Cannot {action} in stage {session.stage.value}"
            )

    def start(self, sorted_scores: Sequence[ScoredItem]) -> RankInsertionSession:
        """
        Begin a session against a snapshot of existing scores.

        Args:
            sorted_scores: Existing same-category entries, score descending

        Returns:
            Session awaiting a sentiment

        Raises:
            ValueError: If sorted_scores is not sorted descending
        """
        entries = tuple(sorted_scores)
        for above, below in zip(entries, entries[1:]):
            if above.score < below.score:
                raise ValueError(
                    f"sorted_scores must be sorted descending: "
                    f"{above.item_id}={above.score} precedes {below.item_id}={below.score}"
                )
        return RankInsertionSession(sorted_scores=entries)

    def search_bounds(self, total: int, sentiment: Sentiment) -> Tuple[int, int]:
        """
        Initial binary-search range for a sentiment bucket.

        Args:
            total: Number of existing entries (> 0)
            sentiment: Sentiment bucket

        Returns:
            (lower, upper) inclusive index range
        """
        if total < self.small_catalog_threshold:
            return 0, total - 1

        if sentiment is Sentiment.HIGH:
            lower, upper = 0, int(total * 0.35)
        elif sentiment is Sentiment.MID:
            lower, upper = int(total * 0.30), int(total * 0.70)
        else:
            lower, upper = int(total * 0.65), total - 1

        lower = max(0, lower)
        upper = min(total - 1, upper)
        if lower > upper:
            return 0, total - 1
        return lower, upper

    def choose_sentiment(
        self,
        session: RankInsertionSession,
        sentiment: Sentiment | str
    ) -> RankInsertionSession:
        """
        Narrow the search range using the user's sentiment.

        An empty list resolves immediately with the default score.

        Args:
            session: Session awaiting a sentiment
            sentiment: high, mid or low

        Returns:
            Searching session, or a resolved one when no search is needed
        """
        self._require(session, SessionStage.AWAITING_SENTIMENT, "choose a sentiment")
        sentiment = Sentiment(sentiment)

        total = len(session.sorted_scores)
        if total == 0:
            logger.debug("No existing scores, resolving with default score")
            return replace(session, stage=SessionStage.RESOLVED, score=self.default_score)

        lower, upper = self.search_bounds(total, sentiment)
        logger.debug(f"Sentiment {sentiment.value}: searching [{lower}, {upper}] of {total}")
        return self._next_step(
            replace(session, stage=SessionStage.SEARCHING, lower_bound=lower, upper_bound=upper)
        )

    def advance(
        self,
        session: RankInsertionSession,
        judgment: Judgment | str
    ) -> RankInsertionSession:
        """
        Apply one comparison against the current opponent.

        Args:
            session: Searching session
            judgment: Whether the new item is better, worse or tied

        Returns:
            Next session
        """
        self._require(session, SessionStage.SEARCHING, "advance")
        judgment = Judgment(judgment)

        if judgment is Judgment.TIE:
            # Stops the search at the midpoint and takes the opponent's score
            score = self.resolve_score(
                session.sorted_scores,
                session.current_index,
                tie_index=session.current_index
            )
            return self._finish(replace(session, stage=SessionStage.RESOLVED, score=score, tied=True))

        if judgment is Judgment.BETTER:
            session = replace(session, upper_bound=session.current_index - 1)
        else:
            session = replace(session, lower_bound=session.current_index + 1)
        return self._next_step(session)

    def cancel(self, session: RankInsertionSession) -> RankInsertionSession:
        """
        Abandon a session without producing a score.

        Raises:
            InvalidTransitionError: If the session already finished
        """
        if session.is_terminal:
            raise InvalidTransitionError(f"Cannot cancel in stage {session.stage.value}")
        return replace(session, stage=SessionStage.CANCELLED, score=None)

    def _next_step(self, session: RankInsertionSession) -> RankInsertionSession:
        if session.lower_bound > session.upper_bound:
            score = self.resolve_score(session.sorted_scores, session.lower_bound)
            return self._finish(replace(session, stage=SessionStage.RESOLVED, score=score))
        return replace(session, current_index=(session.lower_bound + session.upper_bound) // 2)

    def _finish(self, session: RankInsertionSession) -> RankInsertionSession:
        logger.debug(f"Resolved insertion at index {session.insert_index} with score {session.score}")
        return session

    def resolve_score(
        self,
        sorted_scores: Sequence[ScoredItem],
        insert_index: int,
        tie_index: Optional[int] = None
    ) -> int:
        """
        Compute the new item's score from its position in the sorted list.

        Args:
            sorted_scores: Existing entries, score descending
            insert_index: Position the new item is inserted at
            tie_index: Index of the opponent the user tied with, if any

        Returns:
            Integer display score
        """
        if not sorted_scores:
            return self.default_score

        if tie_index is not None and 0 <= tie_index < len(sorted_scores):
            return sorted_scores[tie_index].score

        if insert_index == 0:
            best = sorted_scores[0].score
            gap = min(self.max_edge_gap, _half(self.max_score - best))
            return min(best + gap, self.max_score)

        if insert_index >= len(sorted_scores):
            worst = sorted_scores[-1].score
            gap = min(self.max_edge_gap, _half(worst - self.min_score))
            return max(worst - gap, self.min_score)

        above = sorted_scores[insert_index - 1].score
        below = sorted_scores[insert_index].score
        gap = above - below

        if gap <= 1:
            return below
        if gap == 2:
            return below + 1
        return _half(above + below)

    def run(
        self,
        sorted_scores: Sequence[ScoredItem],
        sentiment: Sentiment | str,
        judge: Callable[[ScoredItem], Optional[Judgment | str]]
    ) -> Optional[int]:
        """
        Drive a whole session with a judging callable.

        Args:
            sorted_scores: Existing entries, score descending
            sentiment: Initial sentiment bucket
            judge: Called with each opponent; returns a Judgment, or None
                   to cancel

        Returns:
            Final score, or None if the session was cancelled
        """
        session = self.choose_sentiment(self.start(sorted_scores), sentiment)
        comparisons = 0
        while session.stage is SessionStage.SEARCHING:
            judgment = judge(session.opponent)
            if judgment is None:
                session = self.cancel(session)
                break
            session = self.advance(session, judgment)
            comparisons += 1

        logger.info(
            f"Insertion {session.stage.value} after {comparisons} comparisons"
            + (f", score {session.score}" if session.score is not None else "")
        )
        return session.score
