import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.objectives import check_dimensions, total_utility, utility_change
from seating_sim.solver.params import DesireParams
from seating_sim.solver.relationships import RelationshipMatrix
from seating_sim.solver.seating import SeatingState, apply_move

logger = logging.getLogger(__name__)

# Zysk <= tolerancji traktujemy jako brak poprawy (szum numeryczny)
IMPROVEMENT_TOLERANCE = 1e-10


class SimulationStatus(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class MoveRecord:
    iteration: int
    agent: int
    from_seat: int
    to_seat: int
    gain: float
    utility: float


@dataclass(frozen=True)
class SimulationResult:
    initial_state: SeatingState
    final_state: SeatingState
    iterations: int
    utility_history: Tuple[float, ...]
    converged: bool
    status: SimulationStatus = SimulationStatus.CONVERGED
    moves: Tuple[MoveRecord, ...] = ()
    relationships: Optional[RelationshipMatrix] = field(default=None, compare=False)
    desires: Optional[DesireParams] = None

    def __post_init__(self):
        if self.iterations < 0:
            raise InvalidConfiguration("iterations must be non-negative")
        if len(self.utility_history) == 0:
            raise InvalidConfiguration("utility_history must not be empty")
        if self.converged != (self.status == SimulationStatus.CONVERGED):
            raise InvalidConfiguration(
                f"converged={self.converged} contradicts status={self.status.value}"
            )

    @property
    def initial_utility(self) -> float:
        return self.utility_history[0]

    @property
    def final_utility(self) -> float:
        return self.utility_history[-1]

    @property
    def improvement(self) -> float:
        return self.final_utility - self.initial_utility


def find_best_move(
    state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> Tuple[Optional[int], float]:
    """
    Szuka agenta, którego przesadzenie na wolne miejsce najbardziej podnosi
    całkowitą użyteczność. Przy remisie wygrywa agent o najniższym ID.
    Zwraca (None, zysk), gdy żaden ruch nie poprawia wyniku.
    """
    check_dimensions(state, relationships)

    best_agent = None
    best_gain = 0.0
    for agent_id in range(1, state.num_agents + 1):
        gain = utility_change(state, agent_id, relationships, desires)
        if gain > best_gain:
            best_gain = gain
            best_agent = agent_id

    if best_agent is None or best_gain <= IMPROVEMENT_TOLERANCE:
        return None, best_gain
    return best_agent, best_gain


def run_optimization(
    initial_state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
    max_iterations: int = 100,
) -> SimulationResult:
    if max_iterations <= 0:
        raise InvalidConfiguration(f"max_iterations must be positive, got {max_iterations}")
    check_dimensions(initial_state, relationships)

    current_state = initial_state
    current_utility = total_utility(current_state, relationships, desires)
    history: List[float] = [current_utility]
    moves: List[MoveRecord] = []
    status = SimulationStatus.RUNNING

    logger.info(
        f"Start: agents={initial_state.num_agents}, close={desires.close}, "
        f"explore={desires.explore}, max_iterations={max_iterations}, utility={current_utility:.3f}"
    )

    iterations = max_iterations
    for iteration in range(1, max_iterations + 1):
        best_agent, best_gain = find_best_move(current_state, relationships, desires)

        if best_agent is None:
            status = SimulationStatus.CONVERGED
            iterations = iteration
            break

        from_seat = current_state.seat_of(best_agent)
        to_seat = current_state.empty_seat
        current_state = apply_move(current_state, best_agent)
        current_utility = total_utility(current_state, relationships, desires)
        history.append(current_utility)
        moves.append(MoveRecord(iteration, best_agent, from_seat, to_seat, best_gain, current_utility))

        logger.debug(
            f"Iter {iteration}: agent {best_agent} {from_seat}->{to_seat}, "
            f"gain={best_gain:.4f}, utility={current_utility:.4f}"
        )
    else:
        status = SimulationStatus.EXHAUSTED

    if status == SimulationStatus.CONVERGED:
        logger.info(f"Converged at iteration {iterations}: utility={history[-1]:.3f}, moves={len(moves)}")
    else:
        logger.info(f"Max iterations ({max_iterations}) reached without convergence: utility={history[-1]:.3f}")

    return SimulationResult(
        initial_state=initial_state,
        final_state=current_state,
        iterations=iterations,
        utility_history=tuple(history),
        converged=status == SimulationStatus.CONVERGED,
        status=status,
        moves=tuple(moves),
        relationships=relationships,
        desires=desires,
    )
