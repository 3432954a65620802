from dataclasses import dataclass
from typing import Optional

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.relationships import DEFAULT_MEAN_RELATIONSHIP, DEFAULT_STD_RELATIONSHIP
from seating_sim.solver.seating import check_agent_count
from seating_sim.solver.table import NUM_SEATS

DEFAULT_MAX_ITERATIONS = 100


@dataclass(frozen=True)
class DesireParams:
    """Pragnienia wspólne dla wszystkich agentów: bliskość (close) i poznawanie nowych osób (explore)."""

    close: float
    explore: float

    def __post_init__(self):
        for name in ("close", "explore"):
            value = float(getattr(self, name))
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must be in [0.0, 1.0], got {value}")
            object.__setattr__(self, name, value)


@dataclass(frozen=True)
class SimulationConfig:
    desires: DesireParams
    num_agents: int = 9
    num_seats: int = NUM_SEATS
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    random_seed: Optional[int] = None
    mean_relationship: float = DEFAULT_MEAN_RELATIONSHIP
    std_relationship: float = DEFAULT_STD_RELATIONSHIP

    def __post_init__(self):
        check_agent_count(self.num_agents, self.num_seats)
        if self.max_iterations <= 0:
            raise InvalidConfiguration(f"max_iterations must be positive, got {self.max_iterations}")
        if self.random_seed is not None and self.random_seed < 0:
            raise InvalidConfiguration(f"random_seed must be non-negative, got {self.random_seed}")
        if not 0.0 <= self.mean_relationship <= 1.0:
            raise InvalidConfiguration(
                f"mean_relationship must be in [0.0, 1.0], got {self.mean_relationship}"
            )
        if self.std_relationship <= 0.0:
            raise InvalidConfiguration(f"std_relationship must be positive, got {self.std_relationship}")
