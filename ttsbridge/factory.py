"""Factory for creating TTS adapter instances.

The factory allows runtime selection of an adapter by name, with options
drawn from TTSConfig.
"""

import logging
from typing import Dict, Optional

from ttsbridge.adapters.edge_tts import EdgeTTSAdapter
from ttsbridge.adapters.json_tts import JsonTTSAdapter
from ttsbridge.base import TTSAdapter, TTSConfigurationError
from ttsbridge.config import TTSConfig
from ttsbridge.transport import Transport

logger = logging.getLogger(__name__)


class TTSFactory:
    """
    Factory for creating TTS adapter instances.

    Supports multiple configuration sources with precedence:
    1. Explicit keyword arguments
    2. Environment variables
    3. Configuration file
    4. Built-in defaults
    """

    _adapters: Dict[str, type] = {}

    @classmethod
    def register_adapter(cls, name: str, adapter_class: type) -> None:
        """
        Register a TTS adapter class.

        Args:
            name: Adapter name (e.g., 'json', 'edge')
            adapter_class: Class whose instances satisfy TTSAdapter

        Raises:
            ValueError: If the name is already registered
        """
        if name in cls._adapters:
            raise ValueError(f"Adapter '{name}' is already registered")

        cls._adapters[name] = adapter_class

    @classmethod
    def unregister_adapter(cls, name: str) -> None:
        cls._adapters.pop(name, None)

    @classmethod
    def list_adapters(cls) -> list[str]:
        """
        List all registered adapter names.

        Returns:
            List of adapter names
        """
        return list(cls._adapters.keys())

    @classmethod
    def create_adapter(
        cls,
        adapter: Optional[str] = None,
        config_file: Optional[str] = None,
        transport: Optional[Transport] = None,
        **kwargs
    ) -> TTSAdapter:
        """
        Create a TTS adapter instance.

        Args:
            adapter: Adapter name ('json' or 'edge'). If None, uses the
                     TTS_ADAPTER env var or config file, defaults to 'json'
            config_file: Path to YAML configuration file (optional)
            transport: HTTP transport shared with the adapter (optional)
            **kwargs: Configuration overrides; plain keys such as
                      voice='...' go straight to the adapter

        Returns:
            Configured TTS adapter instance

        Raises:
            TTSConfigurationError: If the adapter is not registered or
                                   cannot be constructed

        Examples:
            adapter = TTSFactory.create_adapter('edge', voice_name='zh-CN-XiaoxiaoNeural')

            adapter = TTSFactory.create_adapter(config_file='tts_config.yaml')
        """
        config = TTSConfig(config_file=config_file, **kwargs)

        if adapter is None:
            adapter = config.get('adapter', 'json')

        if adapter not in cls._adapters:
            available = ', '.join(cls.list_adapters())
            raise TTSConfigurationError(
                f"TTS adapter '{adapter}' is not registered. "
                f"Available adapters: {available}"
            )

        adapter_config = config.get_provider_config(adapter)

        # Plain (non-section) kwargs are adapter options
        for key, value in kwargs.items():
            if key != 'adapter' and '.' not in key and not isinstance(value, dict):
                adapter_config[key] = value

        adapter_class = cls._adapters[adapter]
        logger.debug("Creating TTS adapter %s with options %s", adapter, sorted(adapter_config))
        try:
            return adapter_class(transport=transport, **adapter_config)
        except Exception as e:
            raise TTSConfigurationError(
                f"Failed to create TTS adapter '{adapter}': {e}"
            ) from e

    @classmethod
    def create_json_adapter(cls, **kwargs) -> TTSAdapter:
        """Convenience method to create the JSON REST adapter."""
        return cls.create_adapter('json', **kwargs)

    @classmethod
    def create_edge_adapter(cls, **kwargs) -> TTSAdapter:
        """Convenience method to create the Edge read-aloud adapter."""
        return cls.create_adapter('edge', **kwargs)


def create_tts_adapter(
    adapter: Optional[str] = None,
    config_file: Optional[str] = None,
    transport: Optional[Transport] = None,
    **kwargs
) -> TTSAdapter:
    """
    Module-level convenience function to create a TTS adapter.

    Example:
        from ttsbridge import create_tts_adapter

        adapter = create_tts_adapter('edge')
        audio = await adapter.synthesize("Hello", "en_US")
    """
    return TTSFactory.create_adapter(adapter, config_file, transport, **kwargs)


def _register_builtin_adapters():
    TTSFactory.register_adapter('json', JsonTTSAdapter)
    TTSFactory.register_adapter('edge', EdgeTTSAdapter)


_register_builtin_adapters()
