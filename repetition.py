#  repocards - Spaced Repetition
#
#  Three-tier review queue plus the per-card review state machine.
#
#  Queue order: unseen cards first (discovery), then seen-but-not-mastered
#  cards, least recently reviewed first (repair), then mastered cards, also
#  least recently reviewed first (reinforcement). No SM-2 intervals.
#
#  Both functions are pure: the caller owns the progress mapping and the clock.
#
#  Depends on: generate.py
#  Used by:    deck.py, server.py, pipeline.py

import time
from dataclasses import dataclass, replace
from enum import Enum

from generate import LearningCard

MASTERY_THRESHOLD = 3


class ReviewAction(str, Enum):
    CONFIRM = "confirm"
    REJECT = "reject"
    SKIP = "skip"


@dataclass(frozen=True)
class CardReviewState:
    """Persisted review state of one card.

    mastered is always (times_confirmed >= MASTERY_THRESHOLD).
    last_reviewed_at is epoch milliseconds.
    """

    card_id: str
    times_confirmed: int = 0
    mastered: bool = False
    last_reviewed_at: int = 0

    def to_dict(self) -> dict:
        return {
            "cardId": self.card_id,
            "timesConfirmed": self.times_confirmed,
            "mastered": self.mastered,
            "lastReviewedAt": self.last_reviewed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CardReviewState":
        times = int(data.get("timesConfirmed", 0))
        return cls(
            card_id=data["cardId"],
            times_confirmed=times,
            mastered=times >= MASTERY_THRESHOLD,
            last_reviewed_at=int(data.get("lastReviewedAt", 0)),
        )


Progress = dict[str, CardReviewState]


def now_ms() -> int:
    return int(time.time() * 1000)


def build_queue(
    cards: list[LearningCard],
    progress: Progress,
    last_acted_id: str | None = None,
) -> list[LearningCard]:
    """Order cards for review: unseen, then needs-work, then mastered.

    The card acted on last is left out of the seen tiers for one rebuild so
    it does not come straight back. Unseen cards are never excluded.
    """
    unseen = [c for c in cards if c.id not in progress]

    needs_work = sorted(
        (c for c in cards if c.id in progress and not progress[c.id].mastered and c.id != last_acted_id),
        key=lambda c: progress[c.id].last_reviewed_at,
    )

    mastered = sorted(
        (c for c in cards if c.id in progress and progress[c.id].mastered and c.id != last_acted_id),
        key=lambda c: progress[c.id].last_reviewed_at,
    )

    return unseen + needs_work + mastered


def current_and_next(queue: list[LearningCard]) -> tuple[LearningCard | None, LearningCard | None]:
    """The card to show now and the one to peek behind it."""
    current = queue[0] if queue else None
    upcoming = queue[1] if len(queue) > 1 else None
    return current, upcoming


def apply_review(
    action: ReviewAction | str,
    card_id: str,
    progress: Progress,
    now: int | None = None,
) -> tuple[Progress, bool]:
    """Apply one review action and return (new_progress, mastery_just_achieved).

    - confirm: one more consecutive confirmation; mastered at MASTERY_THRESHOLD.
    - reject:  consecutive count back to zero, mastery lost.
    - skip:    no change (the caller tracks the skipped card id).

    The input mapping is never mutated. Raises ValueError for an unknown action.
    """
    action = ReviewAction(action)
    if action is ReviewAction.SKIP:
        return dict(progress), False

    if now is None:
        now = now_ms()

    previous = progress.get(card_id) or CardReviewState(card_id=card_id)

    if action is ReviewAction.CONFIRM:
        times = previous.times_confirmed + 1
        mastered = times >= MASTERY_THRESHOLD
        just_mastered = mastered and not previous.mastered
    else:
        times = 0
        mastered = False
        just_mastered = False

    updated = replace(previous, times_confirmed=times, mastered=mastered, last_reviewed_at=now)
    return {**progress, card_id: updated}, just_mastered


def mastered_count(progress: Progress) -> int:
    return sum(1 for state in progress.values() if state.mastered)


def all_mastered(progress: Progress, total: int) -> bool:
    return total > 0 and mastered_count(progress) >= total


def seen_dots(state: CardReviewState | None) -> tuple[bool, bool, bool]:
    """Three progress dots: filled for each consecutive confirmation up to mastery."""
    if state is None:
        return (False, False, False)
    t = state.times_confirmed
    return (t >= 1, t >= 2, t >= 3)


def progress_to_json(progress: Progress) -> dict:
    return {card_id: state.to_dict() for card_id, state in progress.items()}


def progress_from_json(data: dict | None) -> Progress:
    if not data:
        return {}
    return {card_id: CardReviewState.from_dict(raw) for card_id, raw in data.items()}
