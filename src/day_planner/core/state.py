# src/day_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.planner import Planner


@dataclass
class AppState:
    # Settings are kept on the state so connectors/commands can read them.
    settings: Any
    planner: Planner
