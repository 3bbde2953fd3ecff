"""
Custom Exception Classes for s2a-autoconfig

Hierarchical exception structure. None of these escape the public
getters: the fetch boundary maps them to the empty address.
"""


class S2AError(Exception):
    """Base exception for all s2a-autoconfig errors"""

    def __init__(self, message: str, recoverable: bool = True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class ConfigError(S2AError):
    """Settings file or environment errors"""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(f"Config Error: {message}", recoverable)


class MetadataError(S2AError):
    """Metadata server request failed or answered with an error status"""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Metadata Error: {message}", recoverable=True)


class MtlsConfigParseError(MetadataError):
    """mTLS auto-config response body could not be parsed"""

    def __init__(self, url: str | None = None, detail: str | None = None):
        self.detail = detail
        message = "Error parsing Mtls Auto Config response."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, url=url)
