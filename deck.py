#  repocards - Card Deck
#
#  Review session state for one card set: loads the progress mapping once,
#  derives the queue from it, applies review actions through the reducer and
#  persists after every change.
#
#  Persistence is optimistic. A failed save is logged and the in-memory
#  mapping stays authoritative for the rest of the session; a failed load
#  starts from an empty mapping.
#
#  Depends on: repetition.py, generate.py, store.py
#  Used by:    server.py, pipeline.py

import logging
import threading
from collections.abc import Callable

from generate import LearningCard
from repetition import (
    Progress,
    ReviewAction,
    all_mastered,
    apply_review,
    build_queue,
    current_and_next,
    mastered_count,
    now_ms,
    progress_from_json,
    progress_to_json,
)
from store import KeyValueStore

log = logging.getLogger("pipeline")


class Deck:
    """A queue you review through; it reorders itself as progress changes.

    Review actions are serialized: concurrent callers can't interleave the
    read-modify-write of the progress mapping.
    """

    def __init__(
        self,
        cards: list[LearningCard],
        store: KeyValueStore,
        key: str,
        clock: Callable[[], int] = now_ms,
    ):
        self.cards = list(cards)
        self._store = store
        self._key = key
        self._clock = clock
        self._lock = threading.Lock()
        self.progress: Progress = self._load()
        self.last_acted_id: str | None = None
        self.just_mastered: LearningCard | None = None

    def _load(self) -> Progress:
        try:
            return progress_from_json(self._store.get(self._key))
        except Exception as e:
            log.warning(f"Could not load progress for {self._key}: {e}")
            return {}

    def _save(self):
        try:
            self._store.set(self._key, progress_to_json(self.progress))
        except Exception as e:
            log.warning(f"Could not save progress for {self._key}: {e}")

    @property
    def queue(self) -> list[LearningCard]:
        queue = build_queue(self.cards, self.progress, self.last_acted_id)
        # The excluded card is the only one left; show it again
        if not queue and self.last_acted_id is not None:
            queue = build_queue(self.cards, self.progress)
        return queue

    @property
    def current(self) -> LearningCard | None:
        return current_and_next(self.queue)[0]

    @property
    def next(self) -> LearningCard | None:
        return current_and_next(self.queue)[1]

    @property
    def total(self) -> int:
        return len(self.cards)

    @property
    def mastered(self) -> int:
        return mastered_count(self.progress)

    @property
    def all_mastered(self) -> bool:
        return all_mastered(self.progress, self.total)

    def review(self, action: ReviewAction | str) -> LearningCard | None:
        """Apply an action to the current card and return that card.

        Returns None when the queue is empty. Sets just_mastered when this
        action took the card to mastery.
        """
        action = ReviewAction(action)
        with self._lock:
            card = self.current
            if card is None:
                return None

            self.last_acted_id = card.id
            if action is ReviewAction.SKIP:
                return card

            self.progress, just_mastered = apply_review(action, card.id, self.progress, now=self._clock())
            if just_mastered:
                self.just_mastered = card
            self._save()
            return card

    def confirm(self) -> LearningCard | None:
        return self.review(ReviewAction.CONFIRM)

    def reject(self) -> LearningCard | None:
        return self.review(ReviewAction.REJECT)

    def skip(self) -> LearningCard | None:
        return self.review(ReviewAction.SKIP)

    def clear_just_mastered(self):
        self.just_mastered = None

    def restart(self):
        """Forget all progress for this card set."""
        with self._lock:
            self.progress = {}
            self.last_acted_id = None
            self.just_mastered = None
            try:
                self._store.delete(self._key)
            except Exception as e:
                log.warning(f"Could not clear progress for {self._key}: {e}")
