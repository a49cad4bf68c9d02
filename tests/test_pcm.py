"""Tests for PCM conversions."""

import base64
import io
import wave

import numpy as np

from sachcheck.infrastructure.audio.pcm import (
    decode_audio,
    encode_frame,
    float_to_pcm16,
    pcm16_to_float,
    pcm16_to_wav,
)


def test_float_to_pcm16_scales_and_clips() -> None:
    pcm = float_to_pcm16([0.0, 0.5, 1.0, -1.0, 2.0, -2.0])
    values = np.frombuffer(pcm, dtype="<i2").tolist()

    assert values == [0, 16384, 32767, -32768, 32767, -32768]


def test_encode_frame_is_base64_pcm() -> None:
    frame = encode_frame(np.array([0.25], dtype=np.float32))
    assert base64.b64decode(frame) == (8192).to_bytes(2, "little", signed=True)


def test_pcm16_to_float_shapes_channels_and_drops_partial_frames() -> None:
    data = np.array([16384, -16384, 0], dtype="<i2").tobytes() + b"\x01"

    mono = pcm16_to_float(data)
    stereo = pcm16_to_float(data, channels=2)

    assert mono.shape == (3, 1)
    assert mono[:, 0].tolist() == [0.5, -0.5, 0.0]
    assert stereo.shape == (1, 2)


def test_pcm16_to_wav_header() -> None:
    pcm = decode_audio(base64.b64encode(b"\x00\x00" * 240).decode("ascii"))

    with wave.open(io.BytesIO(pcm16_to_wav(pcm, 24000)), "rb") as wav:
        assert wav.getframerate() == 24000
        assert wav.getsampwidth() == 2
        assert wav.getnchannels() == 1
        assert wav.getnframes() == 240
