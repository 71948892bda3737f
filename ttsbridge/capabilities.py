"""TTS adapter capabilities system."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class TTSCapabilities:
    """
    Describes the capabilities supported by a TTS adapter.

    This allows runtime feature detection so host code can pick an adapter
    that fits what it needs.
    """

    supports_ssml: bool = False
    """Whether the adapter accepts caller-built SSML"""

    supported_audio_formats: List[str] = field(default_factory=lambda: ["mp3"])
    """Audio formats the remote service returns"""

    output_format: Optional[str] = None
    """Service-specific output format identifier, if one is requested"""

    supports_pitch_control: bool = False
    """Whether the adapter forwards a pitch adjustment"""

    supports_rate_control: bool = False
    """Whether the adapter forwards a speaking rate"""

    supports_style_control: bool = False
    """Whether the adapter forwards a speaking style"""

    supports_custom_endpoint: bool = False
    """Whether the request URL can be overridden through configuration"""

    requires_api_key: bool = False
    """Whether the adapter needs credentials"""

    def __repr__(self) -> str:
        """Return a human-readable representation of capabilities."""
        features = []
        if self.supports_ssml:
            features.append("SSML")
        if self.supports_rate_control:
            features.append("rate")
        if self.supports_pitch_control:
            features.append("pitch")
        if self.supports_style_control:
            features.append("style")
        if self.supports_custom_endpoint:
            features.append("custom endpoint")

        feature_str = ", ".join(features) if features else "basic synthesis only"
        return f"TTSCapabilities({feature_str})"

    def has_feature(self, feature: str) -> bool:
        """
        Check if a specific feature is supported.

        Args:
            feature: Feature name (e.g., 'ssml', 'pitch_control')

        Returns:
            True if the feature is supported, False otherwise
        """
        feature_map = {
            "ssml": self.supports_ssml,
            "pitch_control": self.supports_pitch_control,
            "rate_control": self.supports_rate_control,
            "style_control": self.supports_style_control,
            "custom_endpoint": self.supports_custom_endpoint,
        }
        return feature_map.get(feature.lower(), False)
