"""Tests for per-agent and total utility."""
from __future__ import annotations

import pytest

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.objectives import (
    agent_utility,
    evaluate_all_moves,
    total_utility,
    utility_breakdown,
    utility_change,
)
from seating_sim.solver.params import DesireParams
from seating_sim.solver.relationships import RelationshipMatrix, generate_relationship_matrix
from seating_sim.solver.seating import SeatingState, generate_random_seating

DESIRES = DesireParams(close=0.7, explore=0.3)


def pair(strength: float) -> RelationshipMatrix:
    return RelationshipMatrix([[1.0, strength], [strength, 1.0]])


def test_close_neighbors_satisfy_close_desire() -> None:
    state = SeatingState.from_assignment({1: 1, 2: 2})

    assert agent_utility(1, state, pair(0.8), DESIRES) == pytest.approx(0.56)
    assert total_utility(state, pair(0.8), DESIRES) == pytest.approx(1.12)


def test_distant_neighbors_satisfy_explore_desire() -> None:
    state = SeatingState.from_assignment({1: 3, 2: 8})

    assert agent_utility(2, state, pair(0.2), DESIRES) == pytest.approx(0.24)
    assert total_utility(state, pair(0.2), DESIRES) == pytest.approx(0.48)


def test_threshold_counts_as_close() -> None:
    state = SeatingState.from_assignment({1: 1, 2: 2})

    assert agent_utility(1, state, pair(0.5), DESIRES) == pytest.approx(0.35)


def test_isolated_agent_has_zero_utility() -> None:
    state = SeatingState.from_assignment({1: 1, 2: 10})

    assert agent_utility(1, state, pair(0.9), DESIRES) == 0.0
    assert total_utility(state, pair(0.9), DESIRES) == 0.0


def test_total_utility_is_never_negative() -> None:
    for seed in range(30):
        num_agents = seed % 9 + 1
        state = generate_random_seating(num_agents, random_seed=seed)
        relationships = generate_relationship_matrix(num_agents, random_seed=seed)
        desires = DesireParams(close=(seed % 5) / 4, explore=(seed % 3) / 2)

        assert total_utility(state, relationships, desires) >= 0.0


def test_utility_change_compares_full_states() -> None:
    # agent 1 na miejscu 1, agent 2 na miejscu 3, wolne miejsce 2
    state = SeatingState.from_assignment({1: 1, 2: 3})

    assert total_utility(state, pair(0.8), DESIRES) == 0.0
    assert utility_change(state, 1, pair(0.8), DESIRES) == pytest.approx(1.12)
    assert utility_change(state, 2, pair(0.8), DESIRES) == pytest.approx(1.12)


def test_dimension_mismatch_is_rejected() -> None:
    state = generate_random_seating(9, random_seed=1)

    with pytest.raises(InvalidConfiguration):
        total_utility(state, pair(0.5), DESIRES)


def test_breakdown_adds_up_to_total() -> None:
    state = generate_random_seating(9, random_seed=42)
    relationships = generate_relationship_matrix(9, random_seed=42)

    breakdown = utility_breakdown(state, relationships, DESIRES)

    assert breakdown["total_utility"] == pytest.approx(total_utility(state, relationships, DESIRES))
    assert len(breakdown["agents"]) == 9
    for entry in breakdown["agents"]:
        assert entry["utility"] == pytest.approx(entry["close"] + entry["explore"])
        assert entry["seat"] == state.seat_of(entry["agent"])
        assert 0 <= entry["neighbors"] <= 3
    assert breakdown["utility_std"] >= 0.0


def test_evaluate_all_moves_is_sorted_with_id_tie_break() -> None:
    state = SeatingState.from_assignment({1: 1, 2: 3})

    moves = evaluate_all_moves(state, pair(0.8), DESIRES)

    assert [agent for agent, _ in moves] == [1, 2]

    state = generate_random_seating(9, random_seed=7)
    relationships = generate_relationship_matrix(9, random_seed=7)
    changes = [change for _, change in evaluate_all_moves(state, relationships, DESIRES)]
    assert changes == sorted(changes, reverse=True)


def test_breakdown_std_is_sample_std() -> None:
    state = SeatingState.from_assignment({1: 1, 2: 2})
    assert utility_breakdown(state, pair(0.8), DESIRES)["utility_std"] == 0.0

    lone = SeatingState.from_assignment({1: 1})
    single = RelationshipMatrix([[1.0]])
    assert utility_breakdown(lone, single, DESIRES)["utility_std"] == 0.0
