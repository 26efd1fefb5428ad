from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from maze_weaver.algo.registry import GENERATORS
from maze_weaver.core.errors import ConfigurationError


@dataclass(frozen=True)
class GenerationConfig:
    rows: int = 20
    cols: int = 20
    algo: str = "dfs"
    seed: Optional[int] = None
    # None leaves the choice to the generator (origin or random)
    start_row: Optional[int] = None
    start_col: Optional[int] = None
    # 0 = run to completion without pausing
    delay_ms: float = 0.0
    merge_probability: float = 0.5
    down_probability: float = 0.25

    @property
    def start(self) -> Optional[Tuple[int, int]]:
        if self.start_row is None or self.start_col is None:
            return None
        return (self.start_row, self.start_col)

    @classmethod
    def from_args(cls, args) -> "GenerationConfig":
        config = cls(
            rows=args.rows,
            cols=args.cols,
            algo=args.algo,
            seed=args.seed,
            start_row=args.start_row,
            start_col=args.start_col,
            delay_ms=args.delay,
            merge_probability=args.merge_probability,
            down_probability=args.down_probability,
        )
        config.validate()
        return config

    def validate(self):
        if self.rows < 1 or self.cols < 1:
            raise ConfigurationError(f"Grid dimensions must be at least 1x1, got {self.rows}x{self.cols}")
        if (self.start_row is None) != (self.start_col is None):
            raise ConfigurationError(
                f"Start cell needs both row and column, got row={self.start_row} col={self.start_col}")
        start = self.start
        if start is not None and not (0 <= start[0] < self.rows and 0 <= start[1] < self.cols):
            raise ConfigurationError(f"Start cell {start} outside {self.rows}x{self.cols} grid")
        if self.delay_ms < 0:
            raise ConfigurationError(f"Delay must not be negative, got {self.delay_ms}")
        if self.algo not in GENERATORS:
            raise ConfigurationError(f"Unknown algorithm '{self.algo}', expected one of {', '.join(GENERATORS)}")
        for label in ("merge_probability", "down_probability"):
            value = getattr(self, label)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{label} must be within [0, 1], got {value}")

    def generator_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"seed": self.seed}
        cls = GENERATORS[self.algo]
        if cls.uses_start and self.start is not None:
            kwargs["start"] = self.start
        if self.algo == "eller":
            kwargs["merge_probability"] = self.merge_probability
            kwargs["down_probability"] = self.down_probability
        return kwargs
