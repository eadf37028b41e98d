# exceptions.py
#
# Description:
# Custom exceptions raised by the image finder. Provider errors never leave
# their adapter, so only the failures a caller has to handle live here.


class DownloadError(Exception):
    """Raised when an image cannot be downloaded after all retry attempts."""

    def __init__(self, url: str, attempts: int, reason: str = ""):
        self.url = url
        self.attempts = attempts
        self.reason = reason
        message = f"Download failed after {attempts} attempts: {url}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class LLMJsonError(ValueError):
    """Raised when no parsing strategy could recover JSON from LLM output."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Could not parse JSON from LLM response: {text[:200]}...")
