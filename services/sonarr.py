import logging
from typing import List

from models.media import Episode, EpisodeFile, Series
from services.arr import ArrService

logger = logging.getLogger(__name__)


class SonarrService(ArrService):
    name = "Sonarr"

    def get_series(self) -> List[Series]:
        data = self._get_list("/api/v3/series", "Failed to fetch TV series from Sonarr")
        return [Series.from_api(series) for series in data]

    def get_all_episodes(self, series_id: int) -> List[Episode]:
        """Get every episode of a series, downloaded or not."""
        data = self._get_list(
            "/api/v3/episode",
            f"Failed to get all episodes for series (id='{series_id}') from Sonarr",
            params={"seriesId": series_id},
        )
        return [Episode.from_api(episode) for episode in data]

    def get_all_episode_files(self, series_id: int) -> List[EpisodeFile]:
        data = self._get_list(
            "/api/v3/episodefile",
            f"Failed to get all episode files for series (id='{series_id}') from Sonarr",
            params={"seriesId": series_id},
        )
        return [EpisodeFile.from_api(episode_file) for episode_file in data]

    def set_episodes_monitored(self, episode_ids: List[int], monitored: bool) -> None:
        """
        Mark a batch of episodes as monitored or unmonitored.

        Does nothing in dry run mode or when there are no episodes.
        """
        if not episode_ids:
            logger.debug("No episodes to update monitored status for")
            return

        if self._skip_mutation(f"set monitored={monitored} on {len(episode_ids)} episodes"):
            return

        self._request(
            "PUT",
            "/api/v3/episode/monitor",
            "Failed to set monitored status for episodes",
            json={"episodeIds": list(episode_ids), "monitored": monitored},
        )

    def delete_episode_files(self, episode_file_ids: List[int]) -> None:
        """
        Delete a batch of episode files from disk.

        Does nothing in dry run mode or when there are no files.
        """
        if not episode_file_ids:
            logger.debug("No episode files to delete")
            return

        if self._skip_mutation(f"delete {len(episode_file_ids)} episode files"):
            return

        self._request(
            "DELETE",
            "/api/v3/episodefile/bulk",
            "Failed to delete episode files",
            json={"episodeFileIds": list(episode_file_ids)},
        )
