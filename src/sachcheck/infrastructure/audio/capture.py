"""Microphone capture through PortAudio."""

import logging
from typing import Any, Callable, Optional

import numpy as np
import sounddevice as sd

from ...domain.errors import DeviceUnavailableError

logger = logging.getLogger(__name__)

FrameHandler = Callable[[np.ndarray], None]


class MicrophoneCapture:
    """Exclusive handle on the default input device.

    Frames are delivered on the audio driver's thread as mono float32 arrays
    of ``frame_size`` samples.
    """

    def __init__(
        self,
        sample_rate: int = 24000,
        frame_size: int = 4096,
        device: Optional[Any] = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.device = device
        self._stream: Optional[sd.InputStream] = None
        self._on_frame: Optional[FrameHandler] = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        """Acquire the input device without starting capture.

        Raises:
            DeviceUnavailableError: No input device exists or access was denied.
        """
        try:
            sd.query_devices(self.device, kind="input")
            self._stream = sd.InputStream(
                samplerate=self.sample_rate,
                blocksize=self.frame_size,
                channels=1,
                dtype="float32",
                device=self.device,
                callback=self._callback,
            )
        except (sd.PortAudioError, ValueError) as e:
            self._stream = None
            raise DeviceUnavailableError(
                "Microphone access is required for voice search."
            ) from e

    def start(self, on_frame: FrameHandler) -> None:
        """Begin delivering frames to ``on_frame``."""
        if self._stream is None:
            raise DeviceUnavailableError("Microphone is not open.")
        self._on_frame = on_frame
        self._stream.start()

    def detach(self) -> None:
        """Stop frame delivery; the device stays held until ``close``."""
        self._on_frame = None
        if self._stream is not None and self._stream.active:
            self._stream.stop()

    def close(self) -> None:
        """Release the input device."""
        stream, self._stream = self._stream, None
        self._on_frame = None
        if stream is not None:
            stream.close()

    def _callback(self, indata: np.ndarray, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("Input stream status: %s", status)
        handler = self._on_frame
        if handler is not None:
            handler(indata[:, 0].copy())
