"""Optional feature interfaces for TTS adapters.

These protocols define optional capabilities that adapters may implement.
Code can use isinstance() checks to determine if an adapter supports
them at runtime.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SSMLCapable(Protocol):
    """
    Protocol for adapters that accept caller-built SSML.

    The document is sent as-is, so voice, locale and prosody come from
    the markup rather than from adapter configuration.
    """

    async def synthesize_ssml(self, ssml: str) -> bytes:
        """
        Synthesize SSML markup to speech audio.

        Args:
            ssml: SSML markup string (must include <speak> root element)

        Returns:
            Raw audio bytes

        Raises:
            RequestFailed: If the service rejects the request
            ValueError: If SSML is malformed
        """
        ...

    def validate_ssml(self, ssml: str) -> bool:
        """
        Validate SSML markup before synthesis.

        Args:
            ssml: SSML markup string to validate

        Returns:
            True if valid, False otherwise
        """
        ...


def has_feature(adapter, feature_protocol) -> bool:
    """
    Check if an adapter implements a specific feature protocol.

    Example:
        if has_feature(adapter, SSMLCapable):
            audio = await adapter.synthesize_ssml(ssml)
    """
    return isinstance(adapter, feature_protocol)
