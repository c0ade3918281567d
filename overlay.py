"""
Skeleton overlay drawn on a transparent canvas above the mirrored preview.

The canvas is a BGRA numpy array the size of the preview.  Landmarks are
normalized to the un-mirrored camera frame, so x is flipped when mapped to
pixels to line up with the mirrored video.
"""

from __future__ import annotations

import threading

import cv2
import numpy as np

COLOR_JOINT = (123, 255, 0, 255)
COLOR_BONE = (123, 255, 0, 255)
JOINT_RADIUS = 5
BONE_THICKNESS = 3

# Shoulders, elbows, wrists, hips.
SKELETON_CONNECTIONS = [
    (11, 13), (13, 15),
    (12, 14), (14, 16),
    (11, 12),
    (11, 23), (12, 24),
    (23, 24),
]


def new_canvas(width: int, height: int) -> np.ndarray:
    return np.zeros((height, width, 4), dtype=np.uint8)


def clear_canvas(canvas: np.ndarray) -> None:
    canvas[:] = 0


def _to_pixel(lm, w: int, h: int) -> tuple[int, int]:
    x = min(max(lm.x, 0.0), 1.0)
    y = min(max(lm.y, 0.0), 1.0)
    return int(round(w - x * w)), int(round(y * h))


def _point(landmarks, idx: int):
    if 0 <= idx < len(landmarks):
        return landmarks[idx]
    return None


def draw_skeleton(canvas: np.ndarray, landmarks) -> list[tuple[int, int]]:
    """Clear *canvas* and draw joints plus the fixed upper-body connections.

    Connections whose endpoints are missing from *landmarks* (out of range
    or ``None``) are skipped.  Coordinates outside [0, 1] are pinned to
    the canvas edge.  Returns the connections actually drawn.
    """
    h, w = canvas.shape[:2]
    clear_canvas(canvas)

    for lm in landmarks:
        if lm is None:
            continue
        cv2.circle(canvas, _to_pixel(lm, w, h), JOINT_RADIUS, COLOR_JOINT, -1, cv2.LINE_AA)

    drawn = []
    for (a, b) in SKELETON_CONNECTIONS:
        pa, pb = _point(landmarks, a), _point(landmarks, b)
        if pa is None or pb is None:
            continue
        cv2.line(
            canvas, _to_pixel(pa, w, h), _to_pixel(pb, w, h),
            COLOR_BONE, BONE_THICKNESS, cv2.LINE_AA,
        )
        drawn.append((a, b))
    return drawn


def composite(frame: np.ndarray, canvas: np.ndarray) -> None:
    """Blend the overlay onto a BGR *frame* of the same size, in place."""
    if canvas.shape[:2] != frame.shape[:2]:
        canvas = cv2.resize(canvas, (frame.shape[1], frame.shape[0]))
    alpha = canvas[:, :, 3:4].astype(np.float32) / 255.0
    blended = frame.astype(np.float32) * (1.0 - alpha) + canvas[:, :, :3] * alpha
    frame[:] = blended.astype(np.uint8)


class SkeletonOverlay:
    """Thread-safe holder for the overlay canvas.

    Analysis workers draw into it; the preview loop composites a copy.
    """

    def __init__(self, width: int, height: int) -> None:
        self._lock = threading.Lock()
        self._canvas = new_canvas(width, height)

    def draw(self, landmarks) -> list[tuple[int, int]]:
        with self._lock:
            return draw_skeleton(self._canvas, landmarks)

    def clear(self) -> None:
        with self._lock:
            clear_canvas(self._canvas)

    def snapshot(self) -> np.ndarray:
        with self._lock:
            return self._canvas.copy()

    def is_blank(self) -> bool:
        with self._lock:
            return not self._canvas.any()
