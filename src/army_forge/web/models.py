from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from army_forge.sim.state import ArmyList


@dataclass
class WebSession:
    state: ArmyList
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def reset(self, state: ArmyList) -> None:
        self.state = state
