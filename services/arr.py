import logging
from typing import Any, List, Optional

import requests
import urllib3

from models.config import ArrConfig
from models.media import Tag
from services.exceptions import DataConsistencyError, NotFoundError
from services.http import raise_for_status

logger = logging.getLogger(__name__)


class ArrService:
    """Shared plumbing for the Radarr and Sonarr v3 APIs."""

    name = "arr"

    def __init__(self, config: ArrConfig, dry_run: bool = True):
        self.config = config
        self.dry_run = dry_run
        self.base_url = config.base_uri.rstrip("/")

        self.session = requests.Session()
        self.session.headers.update(self._get_headers())
        self.session.verify = config.verify_ssl

        if not config.verify_ssl:
            # Self-signed certificates are common on home servers
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _get_headers(self) -> dict:
        return {"X-Api-Key": self.config.api_key}

    def _request(
        self,
        method: str,
        path: str,
        error_message: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> requests.Response:
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            timeout=self.config.request_timeout,
        )
        raise_for_status(response, error_message)
        return response

    def _get_json(self, path: str, error_message: str, params: Optional[dict] = None) -> Any:
        response = self._request("GET", path, error_message, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise DataConsistencyError(f"{error_message}: response was not valid JSON") from e

    def _get_list(self, path: str, error_message: str, params: Optional[dict] = None) -> list:
        data = self._get_json(path, error_message, params=params)
        if not isinstance(data, list):
            raise DataConsistencyError(
                f"{error_message}: expected a list, got {type(data).__name__}"
            )
        return data

    def _skip_mutation(self, description: str) -> bool:
        """Return True if a mutating call should not reach the server."""
        if self.dry_run:
            logger.debug(f"DRY RUN: not sending request to {self.name} to {description}")
            return True
        return False

    def get_tags(self) -> List[Tag]:
        data = self._get_list("/api/v3/tag", f"Failed to fetch tags from {self.name}")
        return [Tag.from_api(tag) for tag in data]

    def get_tag(self, label: str) -> Tag:
        """
        Fetch a tag by its label.

        If the server holds several tags with the same label, the first one wins.

        Raises:
            NotFoundError: If no tag has exactly this label
        """
        tag = next((tag for tag in self.get_tags() if tag.label == label), None)
        if tag is None:
            raise NotFoundError(f"Could not find tag with name: '{label}' in {self.name}")
        return tag
