from typing import Optional


class PurgeError(Exception):
    """Base class for every failure that aborts a purge run."""


class ConfigurationError(PurgeError):
    """A required setting is missing, blank, or invalid."""


class NotFoundError(PurgeError):
    """A named entity, such as the exclusion tag, does not exist on the server."""


class DataConsistencyError(PurgeError):
    """The server returned data that contradicts itself or is malformed."""


class HttpError(PurgeError):
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        body: str = "",
    ):
        self.message = message
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"{message}: {status_code} {reason}\n{body}")
