"""Microsoft Edge "read aloud" text-to-speech adapter."""

import json
import logging
from typing import Any, Mapping, Optional

from ttsbridge.base import RequestFailed
from ttsbridge.capabilities import TTSCapabilities
from ttsbridge.transport import Body, RequestsTransport, ResponseType, Transport

logger = logging.getLogger(__name__)

EDGE_TTS_ENDPOINT = (
    "https://speech.platform.bing.com/consumer/speech/synthesize/readaloud/edge/v1"
    "?TrustedClientToken=6A5AA1D4EAFF4E9FB37E23D68491D6F4"
)
OUTPUT_FORMAT = "audio-24khz-48kbitrate-mono-mp3"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0"
)

DEFAULT_VOICE_NAME = "en-US-AriaNeural"

REQUEST_HEADERS = {
    "Content-Type": "application/ssml+xml",
    "X-Microsoft-OutputFormat": OUTPUT_FORMAT,
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
    "Origin": "https://edge.microsoft.com",
    "Referer": "https://edge.microsoft.com/",
}

# Ampersand first so later entities are not escaped twice
_SSML_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_ssml(text: str) -> str:
    """Escape text for embedding in an SSML element."""
    for char, entity in _SSML_ENTITIES:
        text = text.replace(char, entity)
    return text


def resolve_locale(language_hint: Optional[str]) -> str:
    """
    Turn a language hint like ``zh_CN`` into an xml:lang value.

    Only the first underscore is replaced. An empty hint yields ``"en"``;
    the ``"en-US"`` fallback only applies if that somehow ends up empty.
    """
    return (language_hint or "en").replace("_", "-", 1) or "en-US"


def build_ssml(text: str, voice_name: str, locale: str) -> str:
    """Wrap escaped text in a single-voice SSML document."""
    return (
        "<?xml version='1.0' encoding='UTF-8'?>"
        f"<speak version='1.0' xml:lang='{locale}'>"
        f"<voice name='{voice_name}'>{escape_ssml(text)}</voice>"
        "</speak>"
    )


def _serialize_body(data: Any) -> str:
    """Render a response body as a compact JSON array of byte values."""
    try:
        return json.dumps(list(bytes(data)), separators=(",", ":"))
    except (TypeError, ValueError):
        return json.dumps(data, default=str)


async def _post_ssml(ssml: str, transport: Transport) -> bytes:
    response = await transport.fetch(
        EDGE_TTS_ENDPOINT,
        method="POST",
        headers=REQUEST_HEADERS,
        body=Body.text(ssml),
        response_type=ResponseType.BINARY,
    )

    if not response.ok:
        message = (
            f"Edge TTS request failed with status {response.status}: "
            f"{_serialize_body(response.data)}"
        )
        logger.warning("Edge TTS request failed with status %s", response.status)
        raise RequestFailed(message, status=response.status, body=response.data)

    return bytes(response.data)


async def synthesize_edge(
    text: str,
    language_hint: Optional[str] = "",
    *,
    transport: Transport,
    config: Optional[Mapping[str, Any]] = None
) -> bytes:
    """
    Synthesize text through the Edge read-aloud endpoint.

    Args:
        text: Text to synthesize
        language_hint: Locale hint such as 'zh_CN' or 'en-US'
        transport: HTTP transport to send the request with
        config: Sparse options (voice_name)

    Returns:
        Raw MP3 bytes (24kHz mono)

    Raises:
        RequestFailed: If the service answers with a non-2xx status
    """
    voice_name = (config or {}).get("voice_name") or DEFAULT_VOICE_NAME
    locale = resolve_locale(language_hint)
    logger.debug("Edge TTS voice=%s locale=%s chars=%d", voice_name, locale, len(text))
    return await _post_ssml(build_ssml(text, voice_name, locale), transport)


class EdgeTTSAdapter:
    """
    Adapter for the Microsoft Edge read-aloud service.

    Needs no credentials; the request impersonates the Edge browser.
    Output is always 24kHz 48kbit mono MP3.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        voice_name: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize the Edge TTS adapter.

        Args:
            transport: HTTP transport (a RequestsTransport if None)
            voice_name: Default voice (e.g., 'en-US-AriaNeural')
            **kwargs: Additional configuration (ignored)
        """
        self._owns_transport = transport is None
        self.transport = transport or RequestsTransport()
        self.voice_name = voice_name

        self._capabilities = TTSCapabilities(
            supports_ssml=True,
            supported_audio_formats=["mp3"],
            output_format=OUTPUT_FORMAT,
            supports_pitch_control=False,
            supports_rate_control=False,
            supports_custom_endpoint=False,
            requires_api_key=False,
        )

    @property
    def name(self) -> str:
        """Get adapter name."""
        return "edge"

    def get_capabilities(self) -> TTSCapabilities:
        """Get adapter capabilities."""
        return self._capabilities

    def close(self) -> None:
        """Release the HTTP transport if this adapter created it."""
        if self._owns_transport:
            self.transport.close()

    def configure(self, **kwargs) -> None:
        if kwargs.get('voice_name') is not None:
            self.voice_name = kwargs['voice_name']

    async def synthesize(
        self,
        text: str,
        language_hint: Optional[str] = "",
        config: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        """Synthesize text; ``config['voice_name']`` overrides the default voice."""
        options = {"voice_name": self.voice_name}
        options.update({k: v for k, v in (config or {}).items() if v is not None})
        return await synthesize_edge(
            text, language_hint, transport=self.transport, config=options
        )

    async def synthesize_ssml(self, ssml: str) -> bytes:
        """
        Send a caller-built SSML document as-is.

        Args:
            ssml: SSML markup string with a <speak> root

        Returns:
            Raw MP3 bytes

        Raises:
            ValueError: If the markup has no <speak> root
            RequestFailed: If the service answers with a non-2xx status
        """
        if not self.validate_ssml(ssml):
            raise ValueError("SSML must contain a <speak> root element")
        return await _post_ssml(ssml, self.transport)

    def validate_ssml(self, ssml: str) -> bool:
        """Basic check for a <speak> root element."""
        return '<speak' in ssml and '</speak>' in ssml
