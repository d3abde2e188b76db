from __future__ import annotations

import uuid

from army_forge.config import ForgeConfig, load_config
from army_forge.rules.catalog import load_army_book
from army_forge.sim.state import ArmyList
from army_forge.web.models import WebSession

_sessions: dict[str, WebSession] = {}
_config: ForgeConfig | None = None


def get_config() -> ForgeConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def configure(config: ForgeConfig | None) -> None:
    global _config
    _config = config
    _sessions.clear()


def _load_initial_state() -> ArmyList:
    config = get_config()
    book = load_army_book(config.army_book_path())
    return ArmyList(army_book=book, points_limit=config.points_limit)


def reset_session(session: WebSession) -> None:
    session.reset(_load_initial_state())


def get_or_create_session(session_id: str | None) -> tuple[str, WebSession]:
    if session_id and session_id in _sessions:
        return session_id, _sessions[session_id]

    new_id = str(uuid.uuid4())
    session = WebSession(state=_load_initial_state())
    _sessions[new_id] = session
    return new_id, session
