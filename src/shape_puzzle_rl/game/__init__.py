"""Game module for Shape Puzzle RL.

Exports the compose-and-place engine:
- matrix transforms (rotate, flip, trim, orientations)
- Shape / ShapeFactory: shape values and random shape growth
- OccupancyGrid: the per-phase board
- placement, clearing and reachability helpers
- ScoringRules: line score and combo bonus
- BuildPhase, MainPhase, GameSession: phase state machine and orchestration
"""

from .matrix import (
    as_matrix,
    flip_horizontal,
    format_matrix,
    orientations,
    rotate_ccw,
    rotate_cw,
    trim_composition,
    trim_shape,
)
from .shapes import Shape, ShapeFactory
from .grid import Coordinate, OccupancyGrid
from .placement import Preview, can_place, commit, preview, projected_cells
from .rules import ScoringRules
from .clearing import (
    ClearEvent,
    FullLines,
    apply_clear,
    compute_score_delta,
    find_full_lines,
    resolve,
    resolve_lines,
)
from .reachability import can_be_placed_anywhere, find_placement, valid_anchors
from .core import (
    DEFAULT_SEED_MATRIX,
    BuildPhase,
    GameConfig,
    GameSession,
    MainPhase,
    PhaseKind,
    PhaseState,
    PlacementOutcome,
)

__all__ = [
    "as_matrix",
    "flip_horizontal",
    "format_matrix",
    "orientations",
    "rotate_ccw",
    "rotate_cw",
    "trim_composition",
    "trim_shape",
    "Shape",
    "ShapeFactory",
    "Coordinate",
    "OccupancyGrid",
    "Preview",
    "can_place",
    "commit",
    "preview",
    "projected_cells",
    "ScoringRules",
    "ClearEvent",
    "FullLines",
    "apply_clear",
    "compute_score_delta",
    "find_full_lines",
    "resolve",
    "resolve_lines",
    "can_be_placed_anywhere",
    "find_placement",
    "valid_anchors",
    "DEFAULT_SEED_MATRIX",
    "BuildPhase",
    "GameConfig",
    "GameSession",
    "MainPhase",
    "PhaseKind",
    "PhaseState",
    "PlacementOutcome",
]
