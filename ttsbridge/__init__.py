"""Text-to-speech HTTP adapters.

Two interchangeable adapters turn text into MP3 bytes by calling a remote
TTS service:

- json: a generic JSON REST endpoint (``{input, voice, speed, pitch, style}``)
- edge: the Microsoft Edge read-aloud SSML endpoint

Basic usage:
    from ttsbridge import create_tts_adapter

    adapter = create_tts_adapter('edge')
    audio = await adapter.synthesize("Hello world", "en_US")

Calling an adapter function directly with your own transport:
    from ttsbridge import RequestsTransport
    from ttsbridge.adapters import synthesize_json

    audio = await synthesize_json(
        "你好",
        "zh_CN",
        transport=RequestsTransport(timeout=10),
        config={"voice": "zh-CN-YunxiNeural", "speed": "1.2"},
    )
"""

from ttsbridge.base import (
    TTSAdapter,
    TTSAdapterError,
    TTSConfigurationError,
    TransportError,
    RequestFailed,
)
from ttsbridge.capabilities import TTSCapabilities
from ttsbridge.config import TTSConfig, get_config, reset_config
from ttsbridge.features import SSMLCapable, has_feature
from ttsbridge.transport import (
    Body,
    RequestsTransport,
    ResponseType,
    Transport,
    TransportResponse,
)
from ttsbridge.adapters import (
    EdgeTTSAdapter,
    JsonTTSAdapter,
    synthesize_edge,
    synthesize_json,
)
from ttsbridge.factory import TTSFactory, create_tts_adapter

__all__ = [
    # Base classes
    'TTSAdapter',
    'TTSAdapterError',
    'TTSConfigurationError',
    'TransportError',
    'RequestFailed',
    # Capabilities
    'TTSCapabilities',
    # Configuration
    'TTSConfig',
    'get_config',
    'reset_config',
    # Features
    'SSMLCapable',
    'has_feature',
    # Transport
    'Body',
    'RequestsTransport',
    'ResponseType',
    'Transport',
    'TransportResponse',
    # Adapters
    'EdgeTTSAdapter',
    'JsonTTSAdapter',
    'synthesize_edge',
    'synthesize_json',
    # Factory
    'TTSFactory',
    'create_tts_adapter',
]

__version__ = '0.1.0'
