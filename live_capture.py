"""
Live rep tracker – webcam preview, remote pose analysis and voice cues.

Main container that owns the camera, the preview window and the keyboard
controls, and delegates everything with state or timing to
``SessionController``.
"""

import argparse

import cv2

from analysis_client import AnalysisClient
from config import TrackerConfig
from frame_sampler import CameraSource, FrameSampler
from hud import (
    dim, draw_counter_panel, draw_error_banner, draw_live_badge,
    draw_status_bar,
)
from overlay import SkeletonOverlay, composite
from session_controller import SessionController
from session_store import SessionStore

WINDOW_NAME = "Live Rep Tracker"


def main(config: TrackerConfig) -> None:
    from tts import VoiceCoach

    camera = CameraSource(config.camera_index, config.frame_width, config.frame_height)
    if not camera.opened:
        print("Error: cannot open webcam.")
        return

    voice = VoiceCoach()
    overlay = SkeletonOverlay(config.frame_width, config.frame_height)
    gateway = AnalysisClient(config.analysis_url, timeout=config.request_timeout)
    controller = SessionController(
        gateway=gateway,
        sampler=FrameSampler(
            camera, config.frame_width, config.frame_height, config.jpeg_quality,
        ),
        speaker=voice,
        store=SessionStore(),
        overlay=overlay,
        config=config,
    )

    print(f"Analysis service: {gateway.url}")
    print("Press 's' to start, 'e' to end, 'q' to quit.")

    try:
        while camera.opened:
            frame = camera.read()
            if frame is None:
                break

            frame = cv2.flip(frame, 1)
            session = controller.snapshot()

            if session.active:
                composite(frame, overlay.snapshot())
            else:
                dim(frame)

            draw_counter_panel(frame, session)
            draw_live_badge(frame, session.active, session.elapsed_seconds)
            draw_error_banner(frame, session.state.error)
            draw_status_bar(frame, session.active, controller.in_flight)
            cv2.imshow(WINDOW_NAME, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            elif key == ord("s") and not session.active:
                controller.start(config.target_reps)
            elif key == ord("e") and session.active:
                controller.end()
    finally:
        controller.close()
        voice.close()
        gateway.close()
        camera.release()
        cv2.destroyAllWindows()


def parse_args(argv=None) -> TrackerConfig:
    config = TrackerConfig.from_env()
    parser = argparse.ArgumentParser(description="Live Rep Tracker")
    parser.add_argument(
        "--target-reps", type=int, default=config.target_reps,
        help="Auto-stop once this many reps are counted (0 = never)",
    )
    parser.add_argument(
        "--url", type=str, default=config.analysis_url,
        help=f"Analysis service base URL (default: {config.analysis_url})",
    )
    parser.add_argument(
        "--camera", type=int, default=config.camera_index,
        help="Webcam index for cv2.VideoCapture",
    )
    args = parser.parse_args(argv)
    config.target_reps = max(0, args.target_reps)
    config.analysis_url = args.url.rstrip("/")
    config.camera_index = args.camera
    return config


def cli() -> None:
    main(parse_args())


if __name__ == "__main__":
    cli()
