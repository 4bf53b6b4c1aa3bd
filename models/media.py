from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from services.exceptions import DataConsistencyError


def parse_timestamp(value: Any, field_name: str) -> datetime:
    """Parse an ISO-8601 timestamp from the *arr APIs into an aware UTC datetime."""
    if not isinstance(value, str) or not value:
        raise DataConsistencyError(f"Expected a timestamp for '{field_name}', got {value!r}")

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DataConsistencyError(f"Invalid timestamp for '{field_name}': {value!r}") from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _require(data: dict, key: str, kind: type, entity: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise DataConsistencyError(f"{entity} payload is missing '{key}': {data!r}")

    value = data[key]
    # bool is an int subclass, reject it where an id or number is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DataConsistencyError(
            f"{entity} field '{key}' should be {kind.__name__}, got {value!r}"
        )
    return value


def _tag_ids(data: dict, entity: str) -> frozenset[int]:
    tags = _require(data, "tags", list, entity)
    if not all(isinstance(tag, int) and not isinstance(tag, bool) for tag in tags):
        raise DataConsistencyError(f"{entity} has non-integer tag ids: {tags!r}")
    return frozenset(tags)


@dataclass(frozen=True)
class Tag:
    id: int
    label: str

    @classmethod
    def from_api(cls, data: dict) -> "Tag":
        return cls(id=_require(data, "id", int, "Tag"), label=_require(data, "label", str, "Tag"))


@dataclass(frozen=True)
class Movie:
    id: int
    title: str
    added: datetime
    tags: frozenset[int]

    @property
    def effective_date(self) -> datetime:
        return self.added

    @classmethod
    def from_api(cls, data: dict) -> "Movie":
        return cls(
            id=_require(data, "id", int, "Movie"),
            title=_require(data, "title", str, "Movie"),
            added=parse_timestamp(_require(data, "added", str, "Movie"), "added"),
            tags=_tag_ids(data, "Movie"),
        )


@dataclass(frozen=True)
class Series:
    id: int
    title: str
    tags: frozenset[int]

    @classmethod
    def from_api(cls, data: dict) -> "Series":
        return cls(
            id=_require(data, "id", int, "Series"),
            title=_require(data, "title", str, "Series"),
            tags=_tag_ids(data, "Series"),
        )


@dataclass(frozen=True)
class Episode:
    """A catalog entry in Sonarr. Exists whether or not a file was downloaded."""

    id: int
    episode_file_id: Optional[int]
    season_number: int
    episode_number: int
    title: str

    @property
    def has_file(self) -> bool:
        return self.episode_file_id is not None

    @classmethod
    def from_api(cls, data: dict) -> "Episode":
        episode_file_id = data.get("episodeFileId") if isinstance(data, dict) else None
        if episode_file_id is not None:
            episode_file_id = _require(data, "episodeFileId", int, "Episode")

        return cls(
            id=_require(data, "id", int, "Episode"),
            # Sonarr reports 0 for episodes without a file
            episode_file_id=episode_file_id or None,
            season_number=_require(data, "seasonNumber", int, "Episode"),
            episode_number=_require(data, "episodeNumber", int, "Episode"),
            title=_require(data, "title", str, "Episode"),
        )


@dataclass(frozen=True)
class EpisodeFile:
    """The physical file on disk backing an Episode."""

    id: int
    date_added: datetime

    @classmethod
    def from_api(cls, data: dict) -> "EpisodeFile":
        return cls(
            id=_require(data, "id", int, "EpisodeFile"),
            date_added=parse_timestamp(
                _require(data, "dateAdded", str, "EpisodeFile"), "dateAdded"
            ),
        )


@dataclass(frozen=True)
class EpisodeCandidate:
    """An episode paired with its file, as seen by the purge policy."""

    series: Series
    episode: Episode
    episode_file: EpisodeFile

    @property
    def id(self) -> int:
        return self.episode.id

    @property
    def title(self) -> str:
        return self.episode.title

    @property
    def tags(self) -> frozenset[int]:
        # Series level exclusion is checked before episodes are evaluated
        return frozenset()

    @property
    def effective_date(self) -> datetime:
        return self.episode_file.date_added

    def describe(self) -> str:
        return (
            f'"{self.episode.title}" (id: {self.episode.id}) '
            f"(episodeFileId='{self.episode_file.id}') (series='{self.series.title}') "
            f"(seasonNumber='{self.episode.season_number}') "
            f"(episodeNumber='{self.episode.episode_number}')"
        )
