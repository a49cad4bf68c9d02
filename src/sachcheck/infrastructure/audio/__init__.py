"""Audio device and PCM helpers."""

from .pcm import (
    PLAYBACK_SAMPLE_RATE,
    decode_audio,
    encode_frame,
    float_to_pcm16,
    pcm16_to_float,
    pcm16_to_wav,
)

__all__ = [
    "PLAYBACK_SAMPLE_RATE",
    "decode_audio",
    "encode_frame",
    "float_to_pcm16",
    "pcm16_to_float",
    "pcm16_to_wav",
]
