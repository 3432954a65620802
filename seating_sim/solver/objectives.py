from typing import Dict, List, Tuple

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.relationships import RelationshipMatrix, sample_std
from seating_sim.solver.seating import SeatingState, apply_move
from seating_sim.solver.table import adjacent_agents
from seating_sim.solver.params import DesireParams

# Relacja >= progu zaspokaja potrzebę bliskości, poniżej progu potrzebę poznawania nowych osób
CLOSE_THRESHOLD = 0.5


def check_dimensions(state: SeatingState, relationships: RelationshipMatrix) -> None:
    if relationships.num_agents != state.num_agents:
        raise InvalidConfiguration(
            f"relationships must be {state.num_agents}x{state.num_agents}, "
            f"got {relationships.num_agents}x{relationships.num_agents}"
        )


def _satisfaction(
    agent_id: int,
    state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> Tuple[float, float, int]:
    neighbors = adjacent_agents(state.seat_of(agent_id), state)

    close_satisfaction = 0.0
    explore_satisfaction = 0.0
    for neighbor_id in sorted(neighbors):
        strength = relationships.strength(agent_id, neighbor_id)
        if strength >= CLOSE_THRESHOLD:
            close_satisfaction += desires.close * strength
        else:
            explore_satisfaction += desires.explore * (1.0 - strength)

    return close_satisfaction, explore_satisfaction, len(neighbors)


def agent_utility(
    agent_id: int,
    state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> float:
    close_satisfaction, explore_satisfaction, _ = _satisfaction(agent_id, state, relationships, desires)
    return close_satisfaction + explore_satisfaction


def total_utility(
    state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> float:
    check_dimensions(state, relationships)
    score = 0.0
    for agent_id in range(1, state.num_agents + 1):
        score += agent_utility(agent_id, state, relationships, desires)
    return float(score)


def utility_change(
    state: SeatingState,
    agent_id: int,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> float:
    """
    Zmiana całkowitej użyteczności po przesadzeniu agenta na wolne miejsce.
    Liczona na pełnym stanie kandydującym, a nie przyrostowo.
    """
    current = total_utility(state, relationships, desires)
    candidate = apply_move(state, agent_id)
    return total_utility(candidate, relationships, desires) - current


def utility_breakdown(
    state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> Dict[str, object]:
    check_dimensions(state, relationships)

    agents: List[Dict[str, float]] = []
    for agent_id in range(1, state.num_agents + 1):
        close_satisfaction, explore_satisfaction, neighbor_count = _satisfaction(
            agent_id, state, relationships, desires
        )
        agents.append({
            "agent": agent_id,
            "seat": state.seat_of(agent_id),
            "utility": close_satisfaction + explore_satisfaction,
            "close": close_satisfaction,
            "explore": explore_satisfaction,
            "neighbors": neighbor_count,
        })

    utilities = [a["utility"] for a in agents]
    total = sum(utilities)
    mean = total / len(utilities)

    return {
        "total_utility": total,
        "mean_utility": mean,
        "utility_std": sample_std(utilities),
        "agents": agents,
    }


def evaluate_all_moves(
    state: SeatingState,
    relationships: RelationshipMatrix,
    desires: DesireParams,
) -> List[Tuple[int, float]]:
    moves = [
        (agent_id, utility_change(state, agent_id, relationships, desires))
        for agent_id in range(1, state.num_agents + 1)
    ]
    # sort stabilny: przy remisie zostaje rosnąca kolejność ID
    moves.sort(key=lambda move: move[1], reverse=True)
    return moves
