"""Custom exceptions for the configuration refresher"""
from typing import Optional


class ConfigRefreshError(Exception):
    """Base exception for every failed refresh stage"""


class RequestFailedError(ConfigRefreshError):
    """Raised when the config server answers with a status other than 200 or 304"""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Could not get configuration file: {url} returned HTTP {status_code}")


class ConfigUnchangedError(ConfigRefreshError):
    """Raised when there is nothing new to apply.

    Either the server answered 304 Not Modified or the downloaded document is
    identical to the live configuration. Not a failure.
    """

    def __init__(self, reason: str = "Configuration remains unchanged"):
        self.reason = reason
        super().__init__(reason)


class ParseFailedError(ConfigRefreshError):
    """Raised when the configuration document cannot be parsed"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Unable to parse configuration file: {detail}")


class InvalidConfigurationError(ConfigRefreshError):
    """Raised when the document parses but holds no chained servers"""

    def __init__(self, message: str = "Invalid configuration file: no chained servers"):
        super().__init__(message)


class DecompressionError(ConfigRefreshError):
    """Raised when the response body is not a complete gzip stream"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Unable to decompress configuration file: {detail}")


class TrustPoolError(ConfigRefreshError):
    """Raised when trusted CA material cannot be loaded into a pool"""

    def __init__(self, detail: str, index: Optional[int] = None):
        self.detail = detail
        self.index = index
        where = f" (trusted CA #{index})" if index is not None else ""
        super().__init__(f"Unable to build trusted cert pool{where}: {detail}")
