import logging
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional

from models.config import Config
from models.media import Episode, EpisodeCandidate, EpisodeFile, Series
from purge_policy import classify, utc_now
from services.exceptions import DataConsistencyError
from services.sonarr import SonarrService

logger = logging.getLogger(__name__)


class SeriesPurger:
    """Removes downloaded TV episodes from Sonarr once their files are too old."""

    def __init__(
        self,
        config: Config,
        sonarr: Optional[SonarrService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.sonarr = sonarr or SonarrService(config.sonarr, dry_run=config.dry_run)
        self.clock = clock

    def purge_series(self) -> int:
        """
        Run the purge against Sonarr.

        Episodes are judged by the date their file was added. Episodes are
        unmonitored before their files are deleted so Sonarr does not grab
        them again. Both bulk calls are always made, even with nothing to purge.

        Returns:
            Number of episodes purged (or that would have been, in dry run mode)

        Raises:
            NotFoundError: If the exclusion tag does not exist in Sonarr
            HttpError: If any request to Sonarr fails
            DataConsistencyError: If an episode points at a file Sonarr did not return
        """
        tag_name = self.config.sonarr.exclusion_tag_name
        exclusion_tag = self.sonarr.get_tag(tag_name)
        all_series = self.sonarr.get_series()
        now = self.clock()

        episode_ids: List[int] = []
        episode_file_ids: List[int] = []
        for series in all_series:
            logger.info(f'Processing TV series: "{series.title}"...')

            if exclusion_tag.id in series.tags:
                logger.info(f"Skipping TV series with tag '{tag_name}': \"{series.title}\"")
                continue

            for candidate in self._get_candidates(series):
                decision = classify(candidate, exclusion_tag.id, self.config.max_age_days, now)
                if decision.should_purge:
                    logger.info(
                        f"PURGING TV episode: {candidate.describe()} "
                        f"Age: {decision.age_days} days"
                    )
                    episode_ids.append(candidate.episode.id)
                    episode_file_ids.append(candidate.episode_file.id)
                else:
                    logger.info(
                        f"Keeping TV episode: {candidate.describe()} "
                        f"Age: {decision.age_days} days"
                    )

        logger.info(f"Deleted {len(episode_ids)} TV episodes")

        self.sonarr.set_episodes_monitored(episode_ids, False)
        self.sonarr.delete_episode_files(episode_file_ids)

        return len(episode_ids)

    def _get_candidates(self, series: Series) -> Iterator[EpisodeCandidate]:
        """Pair each downloaded episode of a series with its file."""
        episodes = self.sonarr.get_all_episodes(series.id)
        episode_files = self.sonarr.get_all_episode_files(series.id)
        files_by_id: Dict[int, EpisodeFile] = {f.id: f for f in episode_files}
        if len(files_by_id) != len(episode_files):
            raise DataConsistencyError(
                f"Sonarr returned duplicate episode file IDs for series '{series.title}'"
            )

        for episode in episodes:
            if not episode.has_file:
                continue

            episode_file = files_by_id.get(episode.episode_file_id)
            if episode_file is None:
                raise DataConsistencyError(self._missing_file_message(series, episode))

            yield EpisodeCandidate(series, episode, episode_file)

    @staticmethod
    def _missing_file_message(series: Series, episode: Episode) -> str:
        return (
            f"Could not find matching episode file with ID: {episode.episode_file_id}. "
            f"(series='{series.title}') (title='{episode.title}') "
            f"(seasonNumber='{episode.season_number}') "
            f"(episodeNumber='{episode.episode_number}')"
        )
