"""TTS adapter implementations.

Each module holds one self-contained adapter; they share no code with
each other and only meet at the TTSAdapter protocol.
"""

from ttsbridge.adapters.edge_tts import EdgeTTSAdapter, synthesize_edge
from ttsbridge.adapters.json_tts import JsonTTSAdapter, synthesize_json

__all__ = [
    'EdgeTTSAdapter',
    'JsonTTSAdapter',
    'synthesize_edge',
    'synthesize_json',
]
