# config.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class TriangulationConfig:
    # Randomizer: None draws a fresh permutation per call, an int makes it reproducible
    seed: Optional[int] = None

    # Arena sizing: slots per segment plus slack. A split sink becomes one new
    # trapezoid but two new nodes, so the node arena gets twice the room.
    trapezoid_factor: int = 8
    node_factor: int = 16
    capacity_slack: int = 32

    # Input contract
    validate_input: bool = True
    # Reorient contours with the wrong winding instead of rejecting them
    fix_winding: bool = False

    def with_overrides(self, **kwargs) -> "TriangulationConfig":
        """Copy with every non-None keyword applied."""
        changes = {k: v for k, v in kwargs.items() if v is not None}
        return replace(self, **changes) if changes else self


DEFAULT_CONFIG = TriangulationConfig()
