from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ..script import ScriptProvider
from ..session import Studio


@dataclass
class PlayerSession:
    id: str
    studio: Studio
    worker: Optional[threading.Thread] = field(default=None, repr=False)

    @property
    def busy(self) -> bool:
        return self.worker is not None and self.worker.is_alive()


class SessionManager:
    def __init__(self) -> None:
        self.sessions: Dict[str, PlayerSession] = {}
        self._lock = threading.Lock()

    def create(self, provider_factory: Callable[[], ScriptProvider], tick_rate: int = 24) -> PlayerSession:
        session_id = uuid.uuid4().hex[:12]
        session = PlayerSession(id=session_id, studio=Studio(provider_factory, tick_rate=tick_rate))
        with self._lock:
            self.sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[PlayerSession]:
        with self._lock:
            return self.sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            session = self.sessions.pop(session_id, None)
        if session is None:
            return False
        session.studio.close()
        return True

    def run_generation(self, session: PlayerSession, topic: str) -> bool:
        """Generate in the background; False if a generation is already running."""
        with self._lock:
            if session.busy:
                return False
            session.studio.loading = True
            session.worker = threading.Thread(target=session.studio.generate, args=(topic,), daemon=True)
            session.worker.start()
            return True


session_manager = SessionManager()
