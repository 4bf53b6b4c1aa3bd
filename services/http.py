import requests

from services.exceptions import HttpError


def raise_for_status(response: requests.Response, message: str) -> None:
    """
    Raise an HttpError if the response was not successful.

    The response body is only read on the failure path so that it can be
    included in the error.

    Args:
        response: Response returned by requests
        message: Context for the error, e.g. "Failed to fetch tags from Radarr"

    Raises:
        HttpError: If the response status indicates a failure
    """
    if response.ok:
        return

    raise HttpError(message, response.status_code, response.reason, response.text)
