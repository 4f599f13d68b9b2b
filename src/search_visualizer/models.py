# models.py
# Data contracts for the binary search visualizer.
# No business logic lives here — pure schema and validation.

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Comparison(str, Enum):
    """Verdict of comparing the element at `mid` against the target."""

    UNSET = "unset"
    EQUAL = "equal"
    SMALLER = "smaller"
    LARGER = "larger"


class SearchState(str, Enum):
    """Lifecycle of a single search run, as tracked by the caller."""

    IDLE = "idle"
    VALIDATING = "validating"
    STEPPING = "stepping"
    FOUND = "found"
    EXHAUSTED = "exhausted"


class SearchStep(BaseModel):
    """One beat of the algorithm. Immutable once emitted."""

    model_config = ConfigDict(frozen=True)

    left: int = Field(..., ge=-1, description="Inclusive lower bound of the window.")
    right: int = Field(..., ge=-1, description="Inclusive upper bound of the window.")
    mid: int = Field(..., ge=-1, description="floor((left + right) / 2).")
    found: bool = Field(default=False)
    comparison: Comparison = Field(default=Comparison.UNSET)

    @classmethod
    def not_found(cls) -> "SearchStep":
        return cls(left=-1, right=-1, mid=-1, found=False)

    @property
    def is_sentinel(self) -> bool:
        return self.left == -1 and self.right == -1 and self.mid == -1

    @property
    def is_terminal(self) -> bool:
        return self.found or self.is_sentinel


class StepEvent(BaseModel):
    """A step paired with its human-readable description."""

    model_config = ConfigDict(frozen=True)

    step: SearchStep
    description: str


# ---------------------------------------------------------------------------
# Validation outcomes — returned as values, never raised.
# ---------------------------------------------------------------------------


class EmptyInput(BaseModel):
    """No valid numbers were supplied."""

    model_config = ConfigDict(frozen=True)

    @property
    def message(self) -> str:
        return "Please enter valid numbers separated by commas"


class OutOfRange(BaseModel):
    """Target lies outside [min(sequence), max(sequence)]."""

    model_config = ConfigDict(frozen=True)

    target: int
    minimum: int
    maximum: int

    @property
    def message(self) -> str:
        return (
            f"Target {self.target} is outside the range of the array "
            f"({self.minimum} to {self.maximum})"
        )


ValidationError = EmptyInput | OutOfRange


# ---------------------------------------------------------------------------
# Pacing
# ---------------------------------------------------------------------------


class PacingPolicy(BaseModel):
    """Pause, in seconds, that follows each kind of step."""

    model_config = ConfigDict(frozen=True)

    inspect: float = Field(default=7.0, ge=0)
    smaller: float = Field(default=7.0, ge=0)
    larger: float = Field(default=5.0, ge=0)
    terminal: float = Field(default=0.0, ge=0)
    speed: float = Field(default=1.0, gt=0, description="Delays are divided by this.")

    @classmethod
    def immediate(cls) -> "PacingPolicy":
        return cls(inspect=0, smaller=0, larger=0, terminal=0)

    def delay_for(self, step: SearchStep) -> float:
        if step.is_terminal:
            base = self.terminal
        elif step.comparison is Comparison.SMALLER:
            base = self.smaller
        elif step.comparison is Comparison.LARGER:
            base = self.larger
        else:
            base = self.inspect
        return base / self.speed
