"""
Webcam access and frame payload encoding.

``CameraSource`` keeps the latest raw frame read by the preview loop so the
sampler can grab it from another thread.  ``FrameSampler`` turns that
frame into the compact JPEG data URL the analysis service expects.
"""

from __future__ import annotations

import base64
import threading

import cv2
import numpy as np

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def encode_frame(
    frame: np.ndarray, width: int = 640, height: int = 480, quality: int = 60,
) -> str | None:
    """Resize *frame* and encode it as a base64 JPEG data URL."""
    resized = cv2.resize(frame, (width, height), interpolation=cv2.INTER_AREA)
    ok, buffer = cv2.imencode(".jpg", resized, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok:
        return None
    return DATA_URL_PREFIX + base64.b64encode(buffer).decode("utf-8")


class CameraSource:
    """Wraps ``cv2.VideoCapture`` and remembers the most recent frame."""

    def __init__(self, index: int = 0, width: int = 640, height: int = 480) -> None:
        self._cap = cv2.VideoCapture(index)
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self._lock = threading.Lock()
        self._latest: np.ndarray | None = None

    @property
    def opened(self) -> bool:
        return self._cap.isOpened()

    def read(self) -> np.ndarray | None:
        """Read the next frame from the camera (preview loop only)."""
        ret, frame = self._cap.read()
        if not ret:
            return None
        with self._lock:
            self._latest = frame
        return frame

    def current_frame(self) -> np.ndarray | None:
        """Latest un-mirrored frame, or None before the camera warms up."""
        with self._lock:
            return None if self._latest is None else self._latest.copy()

    def release(self) -> None:
        self._cap.release()


class FrameSampler:
    """Produces one encoded payload per tick, or None when no frame is ready.

    *source* is anything with ``current_frame()``.
    """

    def __init__(self, source, width: int = 640, height: int = 480, quality: int = 60) -> None:
        self._source = source
        self.width = width
        self.height = height
        self.quality = quality

    def sample(self) -> str | None:
        if self._source is None:
            return None
        frame = self._source.current_frame()
        if frame is None or frame.size == 0:
            return None
        return encode_frame(frame, self.width, self.height, self.quality)
