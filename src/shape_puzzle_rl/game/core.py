from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, FrozenSet, List, Mapping, Optional, Union

import numpy as np

from .clearing import resolve_lines
from .grid import Coordinate, OccupancyGrid
from .matrix import Matrix, MatrixLike, format_matrix, trim_composition
from .placement import Preview, commit, preview
from .reachability import can_be_placed_anywhere
from .rules import ScoringRules
from .shapes import Shape, ShapeFactory


logger = logging.getLogger(__name__)

# Main-phase shape used when nothing has been composed yet.
DEFAULT_SEED_MATRIX = ((1,),)

Handles = Optional[Mapping[Coordinate, Any]]


class PhaseKind(IntEnum):
    BUILD = 0
    MAIN = 1


class PhaseState(IntEnum):
    AWAITING_PLACEMENT = 0
    RESOLVING = 1
    PHASE_COMPLETE = 2
    GAME_OVER = 3


@dataclass
class GameConfig:
    build_width: int = 7
    build_height: int = 7
    main_width: int = 11
    main_height: int = 11
    source_shape_count: int = 3
    source_min_cells: int = 2
    source_max_cells: int = 6
    scratch_size: int = 3
    random_seed: Optional[int] = None
    max_episode_steps: int = 10000


@dataclass
class PlacementOutcome:
    placed: bool
    cells: List[Coordinate] = field(default_factory=list)
    score_delta: int = 0
    rows: FrozenSet[int] = frozenset()
    columns: FrozenSet[int] = frozenset()
    released: List[Any] = field(default_factory=list)

    @property
    def lines_cleared(self) -> int:
        return len(self.rows) + len(self.columns)


def _rejected() -> PlacementOutcome:
    return PlacementOutcome(placed=False)


class BuildPhase:
    """Compose a shape by dropping the generated source shapes onto the build grid."""

    kind = PhaseKind.BUILD

    def __init__(self, config: GameConfig, factory: ShapeFactory):
        if config.source_shape_count < 1:
            raise ValueError(f"source_shape_count must be at least 1, got {config.source_shape_count}")
        self.grid = OccupancyGrid(config.build_width, config.build_height)
        self.shapes: List[Shape] = [
            factory.make_shape(config.source_min_cells, config.source_max_cells, config.scratch_size)
            for _ in range(config.source_shape_count)
        ]
        self.state = PhaseState.AWAITING_PLACEMENT

    @property
    def is_complete(self) -> bool:
        return all(shape.placed for shape in self.shapes)

    def _shape(self, slot: int) -> Optional[Shape]:
        if slot < 0 or slot >= len(self.shapes):
            return None
        shape = self.shapes[slot]
        return None if shape.placed else shape

    def preview(self, slot: int, col: int, row: int) -> Optional[Preview]:
        shape = self._shape(slot)
        if shape is None:
            return None
        return preview(self.grid, shape.matrix, col, row)

    def drop(self, slot: int, col: int, row: int, handles: Handles = None) -> PlacementOutcome:
        if self.state != PhaseState.AWAITING_PLACEMENT:
            return _rejected()
        shape = self._shape(slot)
        if shape is None:
            return _rejected()
        cells = shape.cells_at(col, row)
        if not commit(self.grid, cells, handles):
            return _rejected()
        shape.place()
        logger.debug(f"build: placed shape {slot} at ({col}, {row})")
        if self.is_complete:
            self.state = PhaseState.PHASE_COMPLETE
        return PlacementOutcome(placed=True, cells=cells)

    def compose(self) -> Matrix:
        """Trim the build board into the matrix handed to the main phase."""
        return trim_composition(self.grid.grid)


class MainPhase:
    """Place the composed shape on the persistent main grid and clear full lines."""

    kind = PhaseKind.MAIN

    def __init__(self, config: GameConfig, rules: Optional[ScoringRules] = None):
        self.grid = OccupancyGrid(config.main_width, config.main_height)
        self.rules = rules or ScoringRules()
        self.active_shape: Optional[Shape] = None
        self.state = PhaseState.AWAITING_PLACEMENT

    @property
    def shapes(self) -> List[Shape]:
        return [] if self.active_shape is None else [self.active_shape]

    def reset(self) -> None:
        self.grid.reset()
        self.active_shape = None
        self.state = PhaseState.AWAITING_PLACEMENT

    def present(self, matrix: Optional[MatrixLike] = None) -> bool:
        """Make `matrix` the active shape; False (and GAME_OVER) if it fits nowhere in any orientation."""
        if self.state == PhaseState.GAME_OVER:
            return False
        self.active_shape = Shape(DEFAULT_SEED_MATRIX if matrix is None else matrix)
        if not can_be_placed_anywhere(self.grid, self.active_shape.matrix):
            self.state = PhaseState.GAME_OVER
            logger.info(f"game over: no room for\n{format_matrix(self.active_shape.matrix)}")
            return False
        self.state = PhaseState.AWAITING_PLACEMENT
        return True

    def preview(self, col: int, row: int) -> Optional[Preview]:
        if self.active_shape is None or self.active_shape.placed:
            return None
        return preview(self.grid, self.active_shape.matrix, col, row)

    def drop(self, col: int, row: int, handles: Handles = None) -> PlacementOutcome:
        shape = self.active_shape
        if self.state != PhaseState.AWAITING_PLACEMENT or shape is None or shape.placed:
            return _rejected()
        cells = shape.cells_at(col, row)
        if not commit(self.grid, cells, handles):
            return _rejected()
        shape.place()
        self.state = PhaseState.RESOLVING
        event = resolve_lines(self.grid, self.rules)
        if event.total:
            logger.debug(f"main: cleared rows={sorted(event.rows)} columns={sorted(event.columns)} "
                         f"(+{event.score_delta})")
        self.state = PhaseState.PHASE_COMPLETE
        return PlacementOutcome(
            placed=True,
            cells=cells,
            score_delta=event.score_delta,
            rows=event.rows,
            columns=event.columns,
            released=event.released,
        )


class GameSession:
    """Alternates build and main phases and owns the score and the composed hand-off."""

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.factory = ShapeFactory(self.rng)
        self.main = MainPhase(self.config, self.rules)
        self.build = BuildPhase(self.config, self.factory)
        self.phase = PhaseKind.BUILD
        self.handoff: Optional[Matrix] = None
        self.score = 0
        self.total_lines_cleared = 0
        self.total_placements = 0
        self.cycles_completed = 0

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.main.reset()
        self.build = BuildPhase(self.config, self.factory)
        self.phase = PhaseKind.BUILD
        self.handoff = None
        self.score = 0
        self.total_lines_cleared = 0
        self.total_placements = 0
        self.cycles_completed = 0

    @property
    def current(self) -> Union[BuildPhase, MainPhase]:
        return self.build if self.phase == PhaseKind.BUILD else self.main

    @property
    def state(self) -> PhaseState:
        return self.current.state

    @property
    def game_over(self) -> bool:
        return self.main.state == PhaseState.GAME_OVER

    def drop(self, slot: int, col: int, row: int, handles: Handles = None) -> PlacementOutcome:
        if self.phase == PhaseKind.BUILD:
            outcome = self.build.drop(slot, col, row, handles)
        elif slot != 0:
            return _rejected()
        else:
            outcome = self.main.drop(col, row, handles)
        if outcome.placed:
            self.score += outcome.score_delta
            self.total_lines_cleared += outcome.lines_cleared
            self.total_placements += 1
        return outcome

    def advance(self) -> bool:
        """Move past a completed phase; False when the current phase is not complete."""
        if self.current.state != PhaseState.PHASE_COMPLETE:
            return False
        if self.phase == PhaseKind.BUILD:
            self.handoff = self.build.compose()
            self.phase = PhaseKind.MAIN
            logger.info(f"composition confirmed:\n{format_matrix(self.handoff)}")
            self.main.present(self.handoff)
        else:
            self.build = BuildPhase(self.config, self.factory)
            self.phase = PhaseKind.BUILD
            self.cycles_completed += 1
            logger.info(f"phase complete, score={self.score}; returning to build")
        return True

    def hint_snapshot(self) -> np.ndarray:
        """Copy of the main board for the build-phase hint overlay."""
        return self.main.grid.clone_state()

    def get_state(self) -> dict:
        return {
            "phase": self.phase,
            "state": self.state,
            "grid": self.current.grid.clone_state(),
            "shapes": [shape.matrix for shape in self.current.shapes if not shape.placed],
            "score": self.score,
            "total_lines_cleared": self.total_lines_cleared,
            "total_placements": self.total_placements,
            "cycles_completed": self.cycles_completed,
            "game_over": self.game_over,
        }
