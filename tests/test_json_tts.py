"""Tests for the JSON REST TTS adapter."""

import json

import pytest

from ttsbridge import RequestFailed, TTSAdapter, TTSCapabilities
from ttsbridge.adapters.json_tts import (
    DEFAULT_TTS_ENDPOINT,
    JsonTTSAdapter,
    build_payload,
    escape_json_text,
    normalize_number,
    resolve_endpoint,
    synthesize_json,
)
from ttsbridge.transport import Body, RequestsTransport, ResponseType, TransportResponse


class TestEscapeJsonText:
    """Test the input-field text sanitizer."""

    def test_doubles_backslashes_and_folds_crlf(self):
        """Backslashes are doubled and CRLF becomes a single LF."""
        assert escape_json_text("a\\b\r\nc") == "a\\\\b\nc"

    def test_plain_newlines_unchanged(self):
        """A bare LF stays a single LF."""
        assert escape_json_text("one\ntwo") == "one\ntwo"

    def test_quotes_and_lone_cr_untouched(self):
        """Quotes and lone carriage returns are not escaped."""
        assert escape_json_text('say "hi"\r') == 'say "hi"\r'


class TestNormalizeNumber:
    """Test numeric coercion of the speed option."""

    @pytest.mark.parametrize("value,expected", [
        (1.5, 1.5),
        (2, 2.0),
        ("0.8", 0.8),
        ("  1.25", 1.25),
        ("1.5x", 1.5),
        ("-.5", -0.5),
        ("3e-1", 0.3),
    ])
    def test_parses_finite_values(self, value, expected):
        """Numbers and numeric strings are parsed like parseFloat."""
        assert normalize_number(value, 1.0) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [
        None, "", "fast", "x1", float("nan"), float("inf"), "1e999", 10 ** 400, True, [1.2],
    ])
    def test_falls_back_when_not_finite(self, value):
        """Unparseable or non-finite input gives the fallback."""
        assert normalize_number(value, 1.0) == 1.0


class TestBuildPayload:
    """Test payload construction."""

    def test_defaults_for_empty_config(self):
        """An empty config yields every documented default."""
        payload = build_payload("hello", {})
        assert payload == {
            "input": "hello",
            "voice": "zh-CN-XiaoxiaoNeural",
            "speed": 1.0,
            "pitch": "0",
            "style": "general",
        }

    def test_all_fields_set(self):
        """Configured values are carried through."""
        payload = build_payload("hi", {
            "voice": "en-US-GuyNeural",
            "speed": "1.3",
            "pitch": "+5Hz",
            "style": "cheerful",
        })
        assert payload["voice"] == "en-US-GuyNeural"
        assert payload["speed"] == pytest.approx(1.3)
        assert payload["pitch"] == "+5Hz"
        assert payload["style"] == "cheerful"

    @pytest.mark.parametrize("pitch,expected", [
        ("10", "10"),
        (5, "5"),
        (-2.5, "-2.5"),
        (3.0, "3"),
        (1e21, "1e+21"),
        (10 ** 22, "1e+22"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (0.000001, "0.000001"),
        (123.456, "123.456"),
        (-0.0, "0"),
        (float("nan"), "NaN"),
        (float("-inf"), "-Infinity"),
        (None, "0"),
        (True, "0"),
        ({"value": 1}, "0"),
    ])
    def test_pitch_stringified_only_for_str_or_number(self, pitch, expected):
        """Strings and numbers are stringified; anything else is '0'."""
        assert build_payload("x", {"pitch": pitch})["pitch"] == expected

    def test_text_is_escaped(self):
        """The input field goes through the text sanitizer."""
        assert build_payload("a\\b\r\nc")["input"] == "a\\\\b\nc"


class TestResolveEndpoint:
    """Test endpoint selection."""

    def test_default_when_unset(self):
        assert resolve_endpoint({}) == DEFAULT_TTS_ENDPOINT

    def test_whitespace_only_falls_back(self):
        """A whitespace-only request path uses the default endpoint."""
        assert resolve_endpoint({"request_path": "   "}) == DEFAULT_TTS_ENDPOINT

    def test_override_is_trimmed(self):
        assert resolve_endpoint({"request_path": " https://tts.local/speech \n"}) == "https://tts.local/speech"


class TestSynthesizeJson:
    """Test the request/response cycle against a fake transport."""

    @pytest.mark.asyncio
    async def test_posts_json_payload(self, transport):
        """The request is a JSON POST expecting a binary body."""
        await synthesize_json("hello", "en", transport=transport, config={"voice": "v1"})

        call = transport.last_call
        assert call["url"] == DEFAULT_TTS_ENDPOINT
        assert call["method"] == "POST"
        assert call["headers"] == {"Content-Type": "application/json"}
        assert call["response_type"] is ResponseType.BINARY
        assert isinstance(call["body"], Body)
        assert call["body"].kind == "json"
        assert call["body"].payload["voice"] == "v1"
        assert json.loads(call["body"].encode()) == call["body"].payload

    @pytest.mark.asyncio
    async def test_blank_request_path_uses_default(self, transport):
        """Whitespace request_path is not sent as an empty URL."""
        await synthesize_json("hi", "", transport=transport, config={"request_path": "  "})
        assert transport.last_call["url"] == DEFAULT_TTS_ENDPOINT

    @pytest.mark.asyncio
    async def test_returns_body_unchanged(self, transport):
        """A successful response body is returned as-is."""
        audio = await synthesize_json("hello", "", transport=transport)
        assert audio == b"ID3audio"
        assert isinstance(audio, bytes)

    @pytest.mark.asyncio
    async def test_bytearray_body_returned_as_bytes(self, transport):
        transport.response = TransportResponse(ok=True, status=200, data=bytearray(b"\x01\x02"))
        assert await synthesize_json("x", "", transport=transport) == b"\x01\x02"

    @pytest.mark.asyncio
    async def test_failure_includes_decoded_body(self, failing_transport):
        """A failed status raises with the decoded body appended."""
        transport = failing_transport(500, b"server error")

        with pytest.raises(RequestFailed) as exc_info:
            await synthesize_json("hello", "", transport=transport)

        assert str(exc_info.value) == "TTS request failed with status 500: server error"
        assert exc_info.value.status == 500
        assert exc_info.value.body == b"server error"

    @pytest.mark.asyncio
    async def test_failure_with_invalid_utf8_body(self, failing_transport):
        """Invalid UTF-8 bytes become replacement characters in the message."""
        transport = failing_transport(502, b"bad \xff gateway")

        with pytest.raises(RequestFailed) as exc_info:
            await synthesize_json("hello", "", transport=transport)

        assert str(exc_info.value) == "TTS request failed with status 502: bad \ufffd gateway"
        assert exc_info.value.body == b"bad \xff gateway"

    @pytest.mark.asyncio
    async def test_failure_with_missing_body(self, failing_transport):
        transport = failing_transport(404, None)

        with pytest.raises(RequestFailed, match=r"^TTS request failed with status 404$"):
            await synthesize_json("hello", "", transport=transport)


class TestJsonTTSAdapter:
    """Test the JsonTTSAdapter class."""

    def test_satisfies_adapter_protocol(self, transport):
        adapter = JsonTTSAdapter(transport=transport)
        assert isinstance(adapter, TTSAdapter)
        assert adapter.name == "json"

    def test_get_capabilities(self, transport):
        caps = JsonTTSAdapter(transport=transport).get_capabilities()
        assert isinstance(caps, TTSCapabilities)
        assert caps.supports_ssml is False
        assert caps.has_feature("pitch_control") is True
        assert caps.has_feature("custom_endpoint") is True
        assert caps.supported_audio_formats == ["mp3"]

    def test_unknown_kwargs_ignored(self, transport):
        adapter = JsonTTSAdapter(transport=transport, voice="v", voice_name="ignored")
        assert adapter.options == {"voice": "v"}

    def test_configure_updates_defaults(self, transport):
        """configure() sets known keys and skips None."""
        adapter = JsonTTSAdapter(transport=transport, voice="a")
        adapter.configure(voice="b", speed=None, style="calm", unknown=1)
        assert adapter.options == {"voice": "b", "style": "calm"}

    @pytest.mark.asyncio
    async def test_call_config_overrides_instance_defaults(self, transport):
        """Per-call options win over instance defaults, key by key."""
        adapter = JsonTTSAdapter(
            transport=transport,
            request_path="https://tts.local/v1/audio/speech",
            voice="instance-voice",
            speed=0.9,
        )

        await adapter.synthesize("hi", "", {"voice": "call-voice", "pitch": None})

        call = transport.last_call
        assert call["url"] == "https://tts.local/v1/audio/speech"
        assert call["body"].payload["voice"] == "call-voice"
        assert call["body"].payload["speed"] == 0.9
        assert call["body"].payload["pitch"] == "0"

    @pytest.mark.asyncio
    async def test_does_not_mutate_call_config(self, transport):
        adapter = JsonTTSAdapter(transport=transport, voice="x")
        config = {"speed": "2"}
        await adapter.synthesize("hi", "", config)
        assert config == {"speed": "2"}
        assert adapter.options == {"voice": "x"}

    def test_default_transport_is_requests(self):
        assert isinstance(JsonTTSAdapter().transport, RequestsTransport)

    def test_close_releases_owned_transport(self, mocker):
        """An adapter closes the transport it created, never an injected one."""
        adapter = JsonTTSAdapter()
        close = mocker.patch.object(adapter.transport.session, "close")
        adapter.close()
        close.assert_called_once_with()

    def test_close_leaves_injected_transport(self, transport):
        transport.close = lambda: pytest.fail("injected transport must stay open")
        JsonTTSAdapter(transport=transport).close()

    @pytest.mark.asyncio
    async def test_oversized_integer_speed_uses_default(self, transport):
        adapter = JsonTTSAdapter(transport=transport, speed=10 ** 400)
        await adapter.synthesize("hi")
        assert transport.last_call["body"].payload["speed"] == 1.0
