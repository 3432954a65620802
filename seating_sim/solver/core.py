import logging
import time
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.greedy import SimulationResult, run_optimization
from seating_sim.solver.params import SimulationConfig
from seating_sim.solver.relationships import RelationshipMatrix, generate_relationship_matrix, sample_std
from seating_sim.solver.seating import SeatingState, generate_random_seating

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchSummary:
    num_runs: int
    convergence_rate: float
    mean_final_utility: float
    std_final_utility: float
    min_final_utility: float
    max_final_utility: float
    mean_iterations: float


def initialize_simulation(config: SimulationConfig) -> Tuple[RelationshipMatrix, SeatingState]:
    # Obie części dostają to samo ziarno, każda z własnym generatorem
    relationships = generate_relationship_matrix(
        config.num_agents,
        random_seed=config.random_seed,
        mean_relationship=config.mean_relationship,
        std_relationship=config.std_relationship,
    )
    initial_state = generate_random_seating(
        config.num_agents, config.num_seats, random_seed=config.random_seed
    )
    return relationships, initial_state


def run_simulation(
    config: SimulationConfig,
    relationships: Optional[RelationshipMatrix] = None,
) -> SimulationResult:
    start_time = time.time()

    if relationships is None:
        relationships, initial_state = initialize_simulation(config)
    else:
        initial_state = generate_random_seating(
            config.num_agents, config.num_seats, random_seed=config.random_seed
        )

    result = run_optimization(initial_state, relationships, config.desires, config.max_iterations)

    logger.info(
        f"Simulation seed={config.random_seed} finished in {time.time() - start_time:.3f}s "
        f"(converged={result.converged}, iterations={result.iterations})"
    )
    return result


def run_multiple_simulations(
    config: SimulationConfig,
    num_runs: int,
    seed_offset: int = 0,
) -> List[SimulationResult]:
    if num_runs <= 0:
        raise InvalidConfiguration(f"num_runs must be positive, got {num_runs}")
    if config.random_seed is not None and config.random_seed + seed_offset < 0:
        raise InvalidConfiguration(
            f"random_seed + seed_offset must be non-negative, got {config.random_seed + seed_offset}"
        )

    results = []
    for run in range(1, num_runs + 1):
        if config.random_seed is None:
            run_config = config
        else:
            run_config = replace(config, random_seed=config.random_seed + seed_offset + run - 1)

        result = run_simulation(run_config)
        results.append(result)
        logger.info(
            f"Run {run}/{num_runs}: converged={result.converged}, "
            f"iterations={result.iterations}, final utility={result.final_utility:.2f}"
        )

    return results


def summarize_runs(results: Sequence[SimulationResult]) -> BatchSummary:
    if not results:
        raise InvalidConfiguration("results must not be empty")

    final_utilities = np.array([r.final_utility for r in results])
    return BatchSummary(
        num_runs=len(results),
        convergence_rate=sum(1 for r in results if r.converged) / len(results),
        mean_final_utility=float(np.mean(final_utilities)),
        std_final_utility=sample_std(final_utilities),
        min_final_utility=float(np.min(final_utilities)),
        max_final_utility=float(np.max(final_utilities)),
        mean_iterations=float(np.mean([r.iterations for r in results])),
    )
