import logging
from datetime import datetime
from typing import Callable, Optional

from models.config import Config
from purge_policy import PurgeDecision, Reason, partition, utc_now
from services.radarr import RadarrService

logger = logging.getLogger(__name__)


class MoviePurger:
    """Removes movies from Radarr once they are older than the configured max age."""

    def __init__(
        self,
        config: Config,
        radarr: Optional[RadarrService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.radarr = radarr or RadarrService(config.radarr, dry_run=config.dry_run)
        self.clock = clock

    def purge_movies(self) -> int:
        """
        Run the purge against Radarr.

        Returns:
            Number of movies purged (or that would have been, in dry run mode)

        Raises:
            NotFoundError: If the exclusion tag does not exist in Radarr
            HttpError: If any request to Radarr fails
        """
        tag_name = self.config.radarr.exclusion_tag_name
        exclusion_tag = self.radarr.get_tag(tag_name)
        movies = self.radarr.get_movies()
        logger.info(f"Found {len(movies)} movies to review from Radarr.")

        result = partition(movies, exclusion_tag.id, self.config.max_age_days, self.clock())

        delete_count = 0
        for decision in result.decisions:
            self._log_decision(decision, tag_name)
            if decision.should_purge:
                self.radarr.delete_movie(decision.item.id)
                delete_count += 1

        logger.info(f"Deleted {delete_count} movies")
        return delete_count

    def _log_decision(self, decision: PurgeDecision, tag_name: str) -> None:
        movie = decision.item
        if decision.reason is Reason.EXCLUDED:
            logger.info(f"Skipping movie with tag '{tag_name}': \"{movie.title}\"")
        elif decision.should_purge:
            logger.info(
                f'PURGING Movie: "{movie.title}" (id: {movie.id}) Age: {decision.age_days} days'
            )
        else:
            logger.info(
                f'Keeping Movie: "{movie.title}" (id: {movie.id}) Age: {decision.age_days} days'
            )
