"""Tests for relationship matrix generation and validation."""
from __future__ import annotations

import numpy as np
import pytest

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.relationships import (
    RelationshipMatrix,
    analyze_relationships,
    categorize_relationships,
    generate_predefined_relationships,
    generate_relationship_matrix,
    validate_relationships,
)


def test_generated_matrices_are_valid() -> None:
    for seed in range(25):
        for num_agents in (1, 2, 5, 9):
            matrix = generate_relationship_matrix(num_agents, random_seed=seed)
            values = matrix.values

            assert matrix.num_agents == num_agents
            assert validate_relationships(matrix)
            assert np.all(np.diag(values) == 1.0)
            assert np.allclose(values, values.T, atol=1e-10)
            assert values.min() >= 0.0 and values.max() <= 1.0


def test_generation_is_deterministic_for_a_seed() -> None:
    first = generate_relationship_matrix(9, random_seed=42)
    second = generate_relationship_matrix(9, random_seed=42)
    other = generate_relationship_matrix(9, random_seed=43)

    assert first == second
    assert first != other


def test_mean_and_std_shape_the_distribution() -> None:
    matrix = generate_relationship_matrix(9, random_seed=3, mean_relationship=0.9, std_relationship=0.01)
    stats = analyze_relationships(matrix)

    assert stats["mean"] == pytest.approx(0.9, abs=0.02)
    assert stats["min"] > 0.8


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_agents": 0},
        {"num_agents": 5, "mean_relationship": 1.5},
        {"num_agents": 5, "std_relationship": 0.0},
    ],
)
def test_generation_rejects_invalid_arguments(kwargs) -> None:
    with pytest.raises(InvalidConfiguration):
        generate_relationship_matrix(**kwargs)


@pytest.mark.parametrize(
    "values",
    [
        [[1.0, 0.3], [0.4, 1.0]],
        [[0.9, 0.3], [0.3, 1.0]],
        [[1.0, 1.3], [1.3, 1.0]],
        [[1.0, 0.3, 0.2], [0.3, 1.0, 0.1]],
        [],
        [[1.0, 0.5], [0.5]],
    ],
)
def test_invalid_matrices_are_rejected(values) -> None:
    with pytest.raises(InvalidConfiguration):
        RelationshipMatrix(values)


def test_matrix_is_read_only() -> None:
    matrix = RelationshipMatrix([[1.0, 0.3], [0.3, 1.0]])

    with pytest.raises(ValueError):
        matrix.values[0, 1] = 0.9
    assert matrix.strength(1, 2) == 0.3
    assert matrix.strength(2, 1) == 0.3


def test_predefined_patterns_are_valid() -> None:
    for pattern in ("balanced", "polarized", "random"):
        matrix = generate_predefined_relationships(pattern, random_seed=11)
        assert matrix.num_agents == 9
        assert validate_relationships(matrix)

    assert generate_predefined_relationships("balanced", random_seed=5) == generate_predefined_relationships(
        "balanced", random_seed=5
    )


def test_polarized_pattern_separates_groups() -> None:
    matrix = generate_predefined_relationships("polarized", random_seed=2)
    groups = [(1, 2, 3), (4, 5, 6), (7, 8, 9)]

    for group in groups:
        for a in group:
            for b in group:
                if a != b:
                    assert matrix.strength(a, b) >= 0.7
    for a in groups[0]:
        for b in groups[1] + groups[2]:
            assert matrix.strength(a, b) <= 0.4


def test_unknown_pattern_is_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        generate_predefined_relationships("chaotic")


def test_analyze_single_agent_matrix() -> None:
    stats = analyze_relationships(generate_relationship_matrix(1, random_seed=0))

    assert stats == {"mean": 0.0, "std": 0.0, "min": 0.0, "max": 0.0, "median": 0.0}


def test_categorize_relationships() -> None:
    matrix = RelationshipMatrix([
        [1.0, 0.9, 0.1],
        [0.9, 1.0, 0.5],
        [0.1, 0.5, 1.0],
    ])

    categories = categorize_relationships(matrix)

    assert categories["close"] == [(1, 2)]
    assert categories["distant"] == [(1, 3)]
    assert categories["neutral"] == [(2, 3)]

    with pytest.raises(InvalidConfiguration):
        categorize_relationships(matrix, threshold_close=0.3, threshold_distant=0.4)


@pytest.mark.parametrize("values", [[1.0, 0.5], [[1.0, 0.5, 0.2], [0.5, 1.0, 0.3]]])
def test_validate_rejects_non_square_input(values) -> None:
    assert validate_relationships(values) is False


def test_analyze_uses_sample_std() -> None:
    matrix = RelationshipMatrix([[1.0, 0.2], [0.2, 1.0]])
    assert analyze_relationships(matrix)["std"] == 0.0

    matrix = RelationshipMatrix([
        [1.0, 0.2, 0.4],
        [0.2, 1.0, 0.6],
        [0.4, 0.6, 1.0],
    ])
    # wartości poza przekątną: 0.2, 0.2, 0.4, 0.4, 0.6, 0.6 -> suma kwadratów odchyleń 0.16
    assert analyze_relationships(matrix)["std"] == pytest.approx((0.16 / 5) ** 0.5)
