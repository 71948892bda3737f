"""JSON REST text-to-speech adapter.

Posts ``{input, voice, speed, pitch, style}`` to an OpenAI-style
``/v1/audio/speech`` endpoint and returns the MP3 body.
"""

import logging
import math
import numbers
import re
from decimal import Decimal
from typing import Any, Mapping, Optional

from ttsbridge.base import RequestFailed
from ttsbridge.capabilities import TTSCapabilities
from ttsbridge.transport import Body, RequestsTransport, ResponseType, Transport

logger = logging.getLogger(__name__)

DEFAULT_TTS_ENDPOINT = "https://tts.wangwangit.com/v1/audio/speech"
DEFAULT_VOICE = "zh-CN-XiaoxiaoNeural"
DEFAULT_STYLE = "general"
DEFAULT_SPEED = 1.0
DEFAULT_PITCH = "0"

CONFIG_KEYS = ("request_path", "voice", "speed", "pitch", "style")

# Longest numeric prefix, the way parseFloat reads a string
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def normalize_number(value: Any, fallback: float) -> float:
    """
    Coerce a number or numeric string to a finite float.

    Strings are read up to the first character that can't continue a
    number, so ``"1.5x"`` gives 1.5. Anything unparseable, infinite or NaN
    gives ``fallback``.
    """
    if _is_number(value):
        try:
            parsed = float(value)
        except OverflowError:
            return fallback
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return fallback
        parsed = float(match.group(1))
    else:
        return fallback
    return parsed if math.isfinite(parsed) else fallback


def number_to_string(value: Any) -> str:
    """
    Render a number the way JavaScript's ``String(number)`` does.

    Integral values drop the ``.0``, magnitudes outside [1e-7, 1e21) use
    ``1e+21`` style exponents, and non-finite values read ``NaN`` or
    ``Infinity``.
    """
    if isinstance(value, int) and abs(value) < 10 ** 21:
        return str(value)
    try:
        value = float(value)
    except OverflowError:
        return "Infinity" if value > 0 else "-Infinity"
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k
    prefix = "-" if sign else ""

    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * (-n) + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{prefix}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _format_pitch(value: Any) -> str:
    if isinstance(value, str):
        return value
    if _is_number(value):
        return number_to_string(value)
    return DEFAULT_PITCH


def escape_json_text(text: str) -> str:
    """
    Prepare text for the ``input`` field.

    Only backslashes are doubled and CRLF is folded to LF. Quotes and
    other control characters are left alone.
    """
    return re.sub(r"\r?\n", "\n", text.replace("\\", "\\\\"))


def build_payload(text: str, config: Optional[Mapping[str, Any]] = None) -> dict:
    """
    Build the JSON request payload from text and sparse options.

    Args:
        text: Text to synthesize
        config: Options with optional voice, speed, pitch and style keys

    Returns:
        Payload dict with input, voice, speed, pitch and style
    """
    config = config or {}
    return {
        "input": escape_json_text(text),
        "voice": config.get("voice") or DEFAULT_VOICE,
        "speed": normalize_number(config.get("speed"), DEFAULT_SPEED),
        "pitch": _format_pitch(config.get("pitch")),
        "style": config.get("style") or DEFAULT_STYLE,
    }


def resolve_endpoint(config: Optional[Mapping[str, Any]] = None) -> str:
    """Return the configured request path, or the default when blank."""
    request_path = (config or {}).get("request_path") or DEFAULT_TTS_ENDPOINT
    return str(request_path).strip() or DEFAULT_TTS_ENDPOINT


async def synthesize_json(
    text: str,
    language_hint: Optional[str] = "",
    *,
    transport: Transport,
    config: Optional[Mapping[str, Any]] = None
) -> bytes:
    """
    Synthesize text through a JSON TTS endpoint.

    Args:
        text: Text to synthesize
        language_hint: Accepted for interface parity; the service infers
            language from the voice
        transport: HTTP transport to send the request with
        config: Sparse options (request_path, voice, speed, pitch, style)

    Returns:
        Raw MP3 bytes

    Raises:
        RequestFailed: If the service answers with a non-2xx status
    """
    endpoint = resolve_endpoint(config)
    payload = build_payload(text, config)
    logger.debug(
        "POST %s voice=%s speed=%s chars=%d",
        endpoint, payload["voice"], payload["speed"], len(text)
    )

    response = await transport.fetch(
        endpoint,
        method="POST",
        headers={"Content-Type": "application/json"},
        body=Body.json(payload),
        response_type=ResponseType.BINARY,
    )

    if not response.ok:
        message = f"TTS request failed with status {response.status}"
        try:
            message += f": {bytes(response.data).decode('utf-8', errors='replace')}"
        except TypeError:
            pass
        logger.warning("%s", message)
        raise RequestFailed(message, status=response.status, body=response.data)

    return bytes(response.data)


class JsonTTSAdapter:
    """
    Adapter for JSON text-to-speech REST endpoints.

    Instance options act as defaults; per-call config overrides them key
    by key.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        request_path: Optional[str] = None,
        voice: Optional[str] = None,
        speed: Any = None,
        pitch: Any = None,
        style: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize the JSON TTS adapter.

        Args:
            transport: HTTP transport (a RequestsTransport if None)
            request_path: Endpoint URL override
            voice: Default voice identifier
            speed: Default speaking speed (number or numeric string)
            pitch: Default pitch (string or number)
            style: Default speaking style
            **kwargs: Additional configuration (ignored)
        """
        self._owns_transport = transport is None
        self.transport = transport or RequestsTransport()
        self.options = {}
        self.configure(
            request_path=request_path,
            voice=voice,
            speed=speed,
            pitch=pitch,
            style=style,
        )

        self._capabilities = TTSCapabilities(
            supports_ssml=False,
            supported_audio_formats=["mp3"],
            supports_pitch_control=True,
            supports_rate_control=True,
            supports_style_control=True,
            supports_custom_endpoint=True,
            requires_api_key=False,
        )

    @property
    def name(self) -> str:
        """Get adapter name."""
        return "json"

    def get_capabilities(self) -> TTSCapabilities:
        """Get adapter capabilities."""
        return self._capabilities

    def close(self) -> None:
        """Release the HTTP transport if this adapter created it."""
        if self._owns_transport:
            self.transport.close()

    def configure(self, **kwargs) -> None:
        """
        Update default options. None leaves the current value untouched.

        Args:
            **kwargs: request_path, voice, speed, pitch, style
        """
        for key in CONFIG_KEYS:
            if kwargs.get(key) is not None:
                self.options[key] = kwargs[key]

    async def synthesize(
        self,
        text: str,
        language_hint: Optional[str] = "",
        config: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        """Synthesize text with instance defaults overlaid by ``config``."""
        merged = dict(self.options)
        merged.update({k: v for k, v in (config or {}).items() if v is not None})
        return await synthesize_json(
            text, language_hint, transport=self.transport, config=merged
        )
