"""
On-screen HUD for the live tracker.

Colors and drawing helpers shared by the rep-counter panel, the status bar
and the LIVE badge.  Everything draws straight onto the BGR preview frame.
"""

import cv2
import numpy as np

COLOR_GOOD = (0, 220, 0)
COLOR_WARN = (0, 180, 255)
COLOR_BAD = (0, 0, 255)
COLOR_TEXT = (255, 255, 255)
COLOR_MUTED = (150, 150, 150)
COLOR_HUD = (40, 40, 40)


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def validity_color(is_valid: bool | None) -> tuple[int, int, int]:
    if is_valid is None:
        return COLOR_TEXT
    return COLOR_GOOD if is_valid else COLOR_BAD


def draw_progress_bar(
    frame: np.ndarray, x: int, y: int, w: int, h: int,
    progress: float, color: tuple[int, int, int],
) -> None:
    cv2.rectangle(frame, (x, y), (x + w, y + h), (80, 80, 80), -1)
    fill_w = int(w * np.clip(progress, 0, 1))
    if fill_w > 0:
        cv2.rectangle(frame, (x, y), (x + fill_w, y + h), color, -1)
    cv2.rectangle(frame, (x, y), (x + w, y + h), (160, 160, 160), 1)


def _wrap(text: str, width: int = 34) -> list[str]:
    lines, line = [], ""
    for word in text.split():
        if line and len(line) + 1 + len(word) > width:
            lines.append(line)
            line = word
        else:
            line = f"{line} {word}".strip()
    if line:
        lines.append(line)
    return lines


def draw_counter_panel(frame: np.ndarray, session) -> None:
    """Rep counter, stage, angle, feedback and coach guidance (left side)."""
    state = session.state
    overlay = frame.copy()

    pad = 14
    line_h = 26
    box_w = 330

    entries: list[tuple] = []

    def text(msg, color=COLOR_TEXT, scale=0.55, bold=False):
        entries.append(("text", msg, color, scale, bold))

    target = session.target_reps
    if target > 0:
        text(f"REPS  {state.reps} / {target}", COLOR_TEXT, 0.8, True)
        entries.append(("bar", "", COLOR_GOOD, state.reps / target, False))
    else:
        text(f"REPS  {state.reps}", COLOR_TEXT, 0.8, True)

    text(f"Stage: {state.stage}")
    text(f"Angle: {state.angle:.0f} deg")
    for line in _wrap(state.feedback):
        text(line, validity_color(state.is_valid), 0.55, True)

    if state.guidance:
        text("Coach:", COLOR_WARN, 0.55, True)
        for line in _wrap(state.guidance):
            text(f"  {line}", COLOR_MUTED)

    total_h = pad * 2
    for kind, *_ in entries:
        total_h += 20 if kind == "bar" else line_h

    cv2.rectangle(overlay, (0, 0), (box_w, total_h), COLOR_HUD, -1)
    cv2.addWeighted(overlay, 0.7, frame, 0.3, 0, frame)

    y = pad
    for kind, msg, color, extra, bold in entries:
        if kind == "bar":
            draw_progress_bar(frame, pad, y + 6, box_w - 2 * pad, 12, extra, color)
            y += 20
            continue
        y += line_h
        cv2.putText(
            frame, msg, (pad, y),
            cv2.FONT_HERSHEY_SIMPLEX, extra, color,
            2 if bold else 1, cv2.LINE_AA,
        )


def draw_live_badge(frame: np.ndarray, active: bool, seconds: int) -> None:
    """LIVE badge and session clock in the top-right corner."""
    fh, fw = frame.shape[:2]
    dot = COLOR_BAD if active else COLOR_MUTED
    cv2.circle(frame, (fw - 150, 24), 7, dot, -1, cv2.LINE_AA)
    cv2.putText(
        frame, "LIVE", (fw - 136, 30),
        cv2.FONT_HERSHEY_SIMPLEX, 0.6, COLOR_TEXT, 2, cv2.LINE_AA,
    )
    cv2.putText(
        frame, f"Time: {format_time(seconds)}", (fw - 150, 58),
        cv2.FONT_HERSHEY_SIMPLEX, 0.5, COLOR_TEXT, 1, cv2.LINE_AA,
    )


def draw_error_banner(frame: np.ndarray, message: str) -> None:
    if not message:
        return
    fh, fw = frame.shape[:2]
    overlay = frame.copy()
    cv2.rectangle(overlay, (0, fh - 88), (fw, fh - 48), (0, 0, 120), -1)
    cv2.addWeighted(overlay, 0.7, frame, 0.3, 0, frame)
    sz = cv2.getTextSize(message, cv2.FONT_HERSHEY_SIMPLEX, 0.6, 2)[0]
    cv2.putText(
        frame, message, ((fw - sz[0]) // 2, fh - 61),
        cv2.FONT_HERSHEY_SIMPLEX, 0.6, COLOR_TEXT, 2, cv2.LINE_AA,
    )


def draw_status_bar(frame: np.ndarray, active: bool, waiting: bool) -> None:
    """Bottom bar listing the controls that are currently enabled."""
    fh, fw = frame.shape[:2]
    bar_h = 44
    overlay = frame.copy()
    cv2.rectangle(overlay, (0, fh - bar_h), (fw, fh), COLOR_HUD, -1)
    cv2.addWeighted(overlay, 0.75, frame, 0.25, 0, frame)

    label = "ACTIVE - press 'e' to end" if active else "Press 's' to start a session"
    cv2.putText(
        frame, f"{label}  |  'q' to quit", (14, fh - 14),
        cv2.FONT_HERSHEY_SIMPLEX, 0.6, COLOR_TEXT, 2, cv2.LINE_AA,
    )

    if waiting:
        indicator = "Analyzing..."
        sz = cv2.getTextSize(indicator, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)[0]
        cv2.putText(
            frame, indicator, (fw - sz[0] - 14, fh - 16),
            cv2.FONT_HERSHEY_SIMPLEX, 0.5, COLOR_WARN, 1, cv2.LINE_AA,
        )


def dim(frame: np.ndarray, amount: float = 0.45) -> None:
    """Darken the preview while no session is running."""
    frame[:] = (frame.astype(np.float32) * (1.0 - amount)).astype(np.uint8)
