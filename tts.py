"""
Spoken coaching cues via ElevenLabs, fire-and-forget.

``say`` returns immediately; a worker thread converts and plays the text.
Only the newest pending cue is kept so the coach never lags behind the
workout.  Without ELEVENLABS_API_KEY the cues are printed instead.
"""

import os
import threading

from dotenv import load_dotenv

load_dotenv()

_VOICE_ID = os.getenv("ELEVENLABS_VOICE_ID") or "dtSEyYGNJqjrtBArPCVZ"
_MODEL_ID = os.getenv("ELEVENLABS_VOICE_MODEL") or "eleven_turbo_v2_5"
_OUTPUT_FMT = os.getenv("ELEVENLABS_OUTPUT_FORMAT") or "mp3_22050_32"


class VoiceCoach:
    """Speaker used by the session controller.

    Usage::

        coach = VoiceCoach()
        coach.say("Rep 3 completed")
        # returns immediately; speech happens in background
        coach.close()
    """

    def __init__(self) -> None:
        api_key = os.getenv("ELEVENLABS_API_KEY")
        if api_key:
            from elevenlabs.client import ElevenLabs
            self._client = ElevenLabs(api_key=api_key)
        else:
            print("Warning: ELEVENLABS_API_KEY not set – cues will be printed, not spoken.")
            self._client = None

        self._lock = threading.Lock()
        self._wake = threading.Event()
        self._closed = False
        self._pending: str | None = None
        self._busy = False

        self._thread = threading.Thread(target=self._worker, name="voice", daemon=True)
        self._thread.start()

    @property
    def is_busy(self) -> bool:
        return self._busy

    def say(self, text: str) -> None:
        """Queue *text*, replacing any cue that has not started playing."""
        if not text or self._closed:
            return
        with self._lock:
            self._pending = text
        self._wake.set()

    def close(self) -> None:
        self._closed = True
        self._wake.set()
        self._thread.join(timeout=2.0)

    def _worker(self) -> None:
        while not self._closed:
            self._wake.wait()
            self._wake.clear()
            with self._lock:
                text, self._pending = self._pending, None
            if text is None or self._closed:
                continue

            self._busy = True
            try:
                self._speak(text)
            except Exception as exc:
                print(f"[voice] Error: {exc}")
            finally:
                self._busy = False

    def _speak(self, text: str) -> None:
        if self._client is None:
            print(f"[voice] {text}")
            return
        from elevenlabs.play import play

        audio = self._client.text_to_speech.convert(
            voice_id=_VOICE_ID,
            text=text,
            model_id=_MODEL_ID,
            output_format=_OUTPUT_FMT,
        )
        play(audio)
