class MazeError(Exception):
    """Base class for every error raised by the maze engine."""


class ConfigurationError(MazeError, ValueError):
    """Invalid dimensions, start cell or tuning values. Raised before any generation starts."""


class OutOfBounds(ConfigurationError, IndexError):
    def __init__(self, row: int, col: int, rows: int, cols: int):
        super().__init__(f"Cell ({row}, {col}) out of bounds for {rows}x{cols} grid")
        self.row = row
        self.col = col


class DimensionMismatch(ConfigurationError):
    def __init__(self, expected: int, got: int, axis: str):
        super().__init__(f"{axis} length must be {expected}, got {got}")
        self.expected = expected
        self.got = got


class ContractViolation(MazeError, RuntimeError):
    """Misuse of the engine by a caller or generator. Not recoverable."""


class NotAdjacent(ContractViolation):
    def __init__(self, a, b):
        super().__init__(f"Cells ({a.row}, {a.col}) and ({b.row}, {b.col}) are not adjacent")


class GenerationInProgress(ContractViolation):
    pass
