"""
Supabase bookkeeping for workout sessions.

Expects SUPABASE_URL and SUPABASE_KEY in .env.  Falls back gracefully
(prints a warning) when credentials are missing, and every write failure
is printed and swallowed: the local session keeps running either way.

Table schema (create in Supabase SQL editor):

    create table workout_sessions (
        id uuid primary key,
        started_at timestamptz not null,
        ended_at timestamptz,
        target_reps int not null,
        reps_completed int,
        duration_seconds int,
        auto_stopped boolean default false
    );
"""

from __future__ import annotations

import os
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from dotenv import load_dotenv

load_dotenv()

TABLE = "workout_sessions"


@dataclass
class SessionSummary:
    """Final numbers sent when a session ends."""
    reps_completed: int = 0
    duration_seconds: int = 0
    auto_stopped: bool = False

    def to_row(self) -> dict:
        return {
            "ended_at": datetime.now(timezone.utc).isoformat(),
            "reps_completed": self.reps_completed,
            "duration_seconds": self.duration_seconds,
            "auto_stopped": self.auto_stopped,
        }


class SessionStore:
    """Non-blocking Supabase writer for session start/end notifications."""

    def __init__(self, client=None) -> None:
        self._session_id: str | None = None
        if client is not None:
            self._client = client
            return

        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        if not url or not key:
            print(
                "Warning: SUPABASE_URL / SUPABASE_KEY not set – "
                "session logging disabled."
            )
            self._client = None
            return

        from supabase import create_client
        self._client = create_client(url, key)
        print("Supabase session store ready.")

    @property
    def available(self) -> bool:
        return self._client is not None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def start_session(self, target_reps: int) -> None:
        row = self._start_row(target_reps)
        if row is None:
            return
        threading.Thread(target=self._insert, args=(row,), daemon=True).start()

    def end_session(self, summary: SessionSummary | None = None) -> None:
        args = self._end_args(summary)
        if args is None:
            return
        threading.Thread(target=self._update, args=args, daemon=True).start()

    def start_session_sync(self, target_reps: int) -> None:
        """Synchronous start for testing. Blocks until the insert completes."""
        row = self._start_row(target_reps)
        if row is not None:
            self._insert(row)

    def end_session_sync(self, summary: SessionSummary | None = None) -> None:
        """Synchronous end for testing. Blocks until the update completes."""
        args = self._end_args(summary)
        if args is not None:
            self._update(*args)

    def _start_row(self, target_reps: int) -> dict | None:
        if not self._client:
            return None
        self._session_id = str(uuid.uuid4())
        return {
            "id": self._session_id,
            "started_at": datetime.now(timezone.utc).isoformat(),
            "target_reps": int(target_reps or 0),
        }

    def _end_args(self, summary: SessionSummary | None) -> tuple[str, dict] | None:
        if not self._client or not self._session_id:
            return None
        session_id, self._session_id = self._session_id, None
        return session_id, (summary or SessionSummary()).to_row()

    def _insert(self, row: dict) -> None:
        try:
            self._client.table(TABLE).insert(row).execute()
            print(f"[store] Session {row['id']} started (target {row['target_reps']})")
        except Exception as exc:
            print(f"[store] start_session failed: {exc}")

    def _update(self, session_id: str, row: dict) -> None:
        try:
            self._client.table(TABLE).update(row).eq("id", session_id).execute()
            print(f"[store] Session {session_id} ended – {row['reps_completed']} reps")
        except Exception as exc:
            print(f"[store] end_session failed: {exc}")
