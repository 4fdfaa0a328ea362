from .island import IslandWorld, Outcome
from .objects import ACTIONS, Move
from .snapshot import Nearest, Position, WorldSnapshot

__all__ = ["IslandWorld", "Outcome", "ACTIONS", "Move", "Nearest", "Position", "WorldSnapshot"]
