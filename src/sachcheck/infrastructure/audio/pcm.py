"""16-bit PCM conversions for microphone upload and speech playback."""

import base64
import io
import wave
from typing import Sequence, Union

import numpy as np

PCM_SCALE = 32768.0
PLAYBACK_SAMPLE_RATE = 24000

Samples = Union[np.ndarray, Sequence[float]]


def float_to_pcm16(samples: Samples) -> bytes:
    """Convert float samples in [-1.0, 1.0] to little-endian 16-bit PCM.

    Values outside the range are clipped instead of wrapping around.
    """
    arr = np.asarray(samples, dtype=np.float32).reshape(-1)
    scaled = np.clip(arr * PCM_SCALE, -PCM_SCALE, PCM_SCALE - 1)
    return scaled.astype("<i2").tobytes()


def encode_frame(samples: Samples) -> str:
    """Convert a captured float frame to base64-encoded 16-bit PCM."""
    return base64.b64encode(float_to_pcm16(samples)).decode("ascii")


def decode_audio(data: str) -> bytes:
    """Decode a base64 audio payload to raw bytes."""
    return base64.b64decode(data)


def pcm16_to_float(data: bytes, channels: int = 1) -> np.ndarray:
    """Decode 16-bit PCM into a playable float32 buffer of shape (frames, channels).

    A trailing partial sample or frame is ignored.
    """
    usable = len(data) - (len(data) % (2 * channels))
    ints = np.frombuffer(data[:usable], dtype="<i2")
    return (ints.astype(np.float32) / PCM_SCALE).reshape(-1, channels)


def pcm16_to_wav(data: bytes, sample_rate: int = PLAYBACK_SAMPLE_RATE, channels: int = 1) -> bytes:
    """Wrap raw 16-bit PCM in a WAV container for browser playback."""
    usable = len(data) - (len(data) % (2 * channels))
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(data[:usable])
    return buffer.getvalue()
