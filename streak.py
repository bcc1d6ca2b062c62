#  repocards - Streak Tracking
#
#  Cross-session aggregate counters: daily streak, activity log and totals.
#  Did you review at least one card today? Then the streak continues.
#
#  Stored as one JSON object under STREAK_KEY in an injected store.
#
#  Depends on: store.py
#  Used by:    server.py, pipeline.py

from dataclasses import asdict, dataclass, field
from datetime import date, timedelta

from store import STREAK_KEY, KeyValueStore

ACTIVITY_DAYS_KEPT = 60


@dataclass
class StreakData:
    current: int = 0
    longest: int = 0
    last_active_date: str = ""  # YYYY-MM-DD
    active_days: list[str] = field(default_factory=list)
    total_swipes: int = 0  # confirms and rejects, not skips
    total_mastered: int = 0
    total_repos: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "StreakData":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


def _today(today: date | None) -> date:
    return today or date.today()


def get_streak(store: KeyValueStore, today: date | None = None) -> StreakData:
    """Load counters; a streak not extended yesterday or today reads as 0."""
    raw = store.get(STREAK_KEY)
    if not raw:
        return StreakData()
    data = StreakData.from_dict(raw)

    t = _today(today)
    if data.last_active_date not in (t.isoformat(), (t - timedelta(days=1)).isoformat()):
        data.current = 0
    return data


def record_swipe(store: KeyValueStore, mastered: bool, today: date | None = None) -> StreakData:
    """Count one confirm/reject, extending the streak on the first one of the day."""
    t = _today(today)
    data = get_streak(store, t)

    data.total_swipes += 1
    if mastered:
        data.total_mastered += 1

    if data.last_active_date != t.isoformat():
        if data.last_active_date == (t - timedelta(days=1)).isoformat():
            data.current += 1
        else:
            data.current = 1
        data.last_active_date = t.isoformat()

        if t.isoformat() not in data.active_days:
            cutoff = (t - timedelta(days=ACTIVITY_DAYS_KEPT)).isoformat()
            data.active_days = [d for d in data.active_days + [t.isoformat()] if d >= cutoff]

    data.longest = max(data.longest, data.current)
    store.set(STREAK_KEY, asdict(data))
    return data


def record_repo(store: KeyValueStore, today: date | None = None) -> StreakData:
    data = get_streak(store, today)
    data.total_repos += 1
    store.set(STREAK_KEY, asdict(data))
    return data


def activity_days(data: StreakData, today: date | None = None, days: int = 30) -> list[tuple[str, bool]]:
    """(date, active) pairs for the last `days` days, oldest first."""
    t = _today(today)
    active = set(data.active_days)
    result = []
    for i in range(days - 1, -1, -1):
        d = (t - timedelta(days=i)).isoformat()
        result.append((d, d in active))
    return result
