from __future__ import annotations

from chiya.application.ports.repositories import FloorStateRepository
from chiya.domain.floor.state import FloorState
from chiya.infrastructure.memory.sample_floor import sample_floor_state


class InMemoryFloorStateRepository(FloorStateRepository):
    """Process-local floor. State is lost on restart."""

    def __init__(self, initial: FloorState | None = None) -> None:
        self._state = initial if initial is not None else sample_floor_state()

    def load(self) -> FloorState:
        return self._state

    def save(self, state: FloorState) -> None:
        self._state = state
