from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Iterable, List, Optional, Protocol, TypeVar

SECONDS_PER_DAY = 24 * 60 * 60


class Purgeable(Protocol):
    """Anything that can be aged and tagged: movies and episode candidates."""

    @property
    def id(self) -> int: ...

    @property
    def title(self) -> str: ...

    @property
    def tags(self) -> frozenset[int]: ...

    @property
    def effective_date(self) -> datetime: ...


T = TypeVar("T", bound=Purgeable)


class Action(Enum):
    KEEP = "keep"
    PURGE = "purge"


class Reason(Enum):
    EXCLUDED = "excluded"
    TOO_YOUNG = "too young"
    EXPIRED = "expired"


@dataclass(frozen=True)
class PurgeDecision(Generic[T]):
    item: T
    action: Action
    reason: Reason
    # Not computed for excluded items
    age_days: Optional[int] = None

    @property
    def should_purge(self) -> bool:
        return self.action is Action.PURGE


@dataclass
class PurgePartition(Generic[T]):
    decisions: List[PurgeDecision[T]] = field(default_factory=list)

    @property
    def keep(self) -> List[T]:
        return [d.item for d in self.decisions if not d.should_purge]

    @property
    def purge(self) -> List[T]:
        return [d.item for d in self.decisions if d.should_purge]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def age_in_days(date: datetime, now: datetime) -> int:
    """
    Whole days elapsed between date and now, truncated toward zero.

    Naive datetimes are treated as UTC.
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    return int((now - date).total_seconds() / SECONDS_PER_DAY)


def classify(item: T, exclusion_tag_id: int, max_age_days: int, now: datetime) -> PurgeDecision[T]:
    """
    Decide whether a single item should be kept or purged.

    Items carrying the exclusion tag are always kept. Everything else is
    purged only when strictly older than max_age_days, so an item exactly
    max_age_days old is kept.
    """
    if exclusion_tag_id in item.tags:
        return PurgeDecision(item, Action.KEEP, Reason.EXCLUDED)

    age_days = age_in_days(item.effective_date, now)
    if age_days > max_age_days:
        return PurgeDecision(item, Action.PURGE, Reason.EXPIRED, age_days)
    return PurgeDecision(item, Action.KEEP, Reason.TOO_YOUNG, age_days)


def partition(
    items: Iterable[T],
    exclusion_tag_id: int,
    max_age_days: int,
    now: Optional[datetime] = None,
) -> PurgePartition[T]:
    """
    Split items into keep and purge sets, preserving input order in each.

    Args:
        items: Movies or episode candidates to evaluate
        exclusion_tag_id: ID of the tag that protects an item from the purge
        max_age_days: Items older than this many days are purged
        now: Reference time, defaults to the current UTC time

    Returns:
        PurgePartition with one decision per item
    """
    now = now or utc_now()
    return PurgePartition(
        [classify(item, exclusion_tag_id, max_age_days, now) for item in items]
    )
