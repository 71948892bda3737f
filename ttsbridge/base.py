"""Base TTS adapter interface and errors."""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ttsbridge.capabilities import TTSCapabilities


@runtime_checkable
class TTSAdapter(Protocol):
    """
    Base protocol for all TTS adapters.

    Adapters are independent implementations of the same call shape; they
    share no base class and are matched structurally.
    """

    async def synthesize(
        self,
        text: str,
        language_hint: Optional[str] = "",
        config: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        """
        Synthesize text to speech audio.

        Args:
            text: The text to synthesize
            language_hint: Language/locale hint (e.g., 'zh_CN'), may be empty
            config: Sparse per-call options; unset keys fall back to defaults

        Returns:
            Raw audio bytes (MP3)

        Raises:
            RequestFailed: If the remote service answers with a failure status
        """
        ...

    def get_capabilities(self) -> TTSCapabilities:
        """
        Get the capabilities supported by this adapter.

        Returns:
            TTSCapabilities object describing what this adapter supports
        """
        ...

    def configure(self, **kwargs) -> None:
        """
        Update the adapter's default options.

        Args:
            **kwargs: Adapter-specific configuration options
        """
        ...

    @property
    def name(self) -> str:
        """
        Get the adapter name.

        Returns:
            Adapter name (e.g., 'json', 'edge')
        """
        ...


class TTSAdapterError(Exception):
    """Base exception for TTS adapter errors."""
    pass


class TTSConfigurationError(TTSAdapterError):
    """Exception raised for configuration errors."""
    pass


class TransportError(TTSAdapterError):
    """Exception raised when the HTTP transport cannot complete a request."""
    pass


class RequestFailed(TTSAdapterError):
    """
    Exception raised when the TTS service answers with a non-success status.

    Attributes:
        status: HTTP status code of the response
        body: Raw response body as received from the transport
    """

    def __init__(self, message: str, status: int, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body
