from typing import List

from models.media import Movie
from services.arr import ArrService


class RadarrService(ArrService):
    name = "Radarr"

    def get_movies(self) -> List[Movie]:
        data = self._get_list("/api/v3/movie", "Failed to fetch movies from Radarr")
        return [Movie.from_api(movie) for movie in data]

    def delete_movie(self, movie_id: int) -> None:
        """Delete a movie and its files without adding an import exclusion."""
        if self._skip_mutation(f"delete movie {movie_id}"):
            return

        self._request(
            "DELETE",
            f"/api/v3/movie/{movie_id}",
            f"Failed to delete movie (id='{movie_id}')",
            params={"deleteFiles": "true", "addImportExclusion": "false"},
        )
