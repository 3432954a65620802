import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.seating import make_rng

logger = logging.getLogger(__name__)

DEFAULT_MEAN_RELATIONSHIP = 0.5
DEFAULT_STD_RELATIONSHIP = 0.2
SYMMETRY_TOLERANCE = 1e-10

PATTERNS = ("balanced", "polarized", "random")


def sample_std(values) -> float:
    # odchylenie z poprawką Bessela (n - 1); dla jednej próbki 0.0
    values = np.asarray(values, dtype=float)
    if values.size < 2:
        return 0.0
    return float(np.std(values, ddof=1))


class RelationshipMatrix:
    """
    Symetryczna macierz relacji N x N (agent i -> wiersz i - 1).
    Tylko do odczytu; walidowana przy tworzeniu.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Sequence[Sequence[float]]):
        try:
            array = np.array(values, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"relationships must be a numeric matrix: {e}") from e
        if array.ndim != 2 or array.shape[0] != array.shape[1] or array.shape[0] == 0:
            raise InvalidConfiguration(
                f"relationships must be a non-empty square matrix, got shape {array.shape}"
            )
        if not validate_relationships(array):
            raise InvalidConfiguration("relationships must be symmetric, in [0, 1], with 1.0 on the diagonal")
        array.flags.writeable = False
        self._values = array

    @property
    def num_agents(self) -> int:
        return self._values.shape[0]

    @property
    def values(self) -> np.ndarray:
        return self._values

    def strength(self, agent_a: int, agent_b: int) -> float:
        return float(self._values[agent_a - 1, agent_b - 1])

    def to_list(self) -> List[List[float]]:
        return self._values.tolist()

    def __eq__(self, other):
        if not isinstance(other, RelationshipMatrix):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __hash__(self):
        return hash(self._values.tobytes())

    def __repr__(self):
        return f"RelationshipMatrix(num_agents={self.num_agents})"


def validate_relationships(matrix) -> bool:
    values = matrix.values if isinstance(matrix, RelationshipMatrix) else np.asarray(matrix, dtype=float)
    if values.ndim != 2 or values.shape[0] != values.shape[1]:
        logger.warning(f"Relationships must be a square matrix, got shape {values.shape}")
        return False
    n = values.shape[0]

    for i in range(n):
        if values[i, i] != 1.0:
            logger.warning(f"Diagonal value relationships[{i + 1}, {i + 1}] = {values[i, i]} is not 1.0")
            return False

    asymmetric = np.argwhere(np.abs(values - values.T) > SYMMETRY_TOLERANCE)
    if len(asymmetric) > 0:
        i, j = asymmetric[0]
        logger.warning(
            f"Asymmetric: relationships[{i + 1}, {j + 1}] = {values[i, j]}, "
            f"relationships[{j + 1}, {i + 1}] = {values[j, i]}"
        )
        return False

    out_of_range = np.argwhere((values < 0.0) | (values > 1.0) | np.isnan(values))
    if len(out_of_range) > 0:
        i, j = out_of_range[0]
        logger.warning(f"Out of range: relationships[{i + 1}, {j + 1}] = {values[i, j]}")
        return False

    return True


def generate_relationship_matrix(
    num_agents: int = 9,
    random_seed=None,
    mean_relationship: float = DEFAULT_MEAN_RELATIONSHIP,
    std_relationship: float = DEFAULT_STD_RELATIONSHIP,
) -> RelationshipMatrix:
    if num_agents <= 0:
        raise InvalidConfiguration(f"num_agents must be positive, got {num_agents}")
    if not 0.0 <= mean_relationship <= 1.0:
        raise InvalidConfiguration(f"mean_relationship must be in [0.0, 1.0], got {mean_relationship}")
    if std_relationship <= 0.0:
        raise InvalidConfiguration(f"std_relationship must be positive, got {std_relationship}")

    rng = make_rng(random_seed)
    values = np.eye(num_agents)

    # Losujemy górny trójkąt i odbijamy go na dolny
    for i in range(num_agents):
        for j in range(i + 1, num_agents):
            raw_value = rng.normal(mean_relationship, std_relationship)
            values[i, j] = values[j, i] = min(max(raw_value, 0.0), 1.0)

    return RelationshipMatrix(values)


def _polarized_groups(num_agents: int) -> List[range]:
    # Trzy kolejne grupy, np. 9 agentów -> (1,2,3), (4,5,6), (7,8,9)
    bounds = np.linspace(0, num_agents, 4).round().astype(int)
    return [range(bounds[k], bounds[k + 1]) for k in range(3)]


def generate_predefined_relationships(
    pattern: str,
    num_agents: int = 9,
    random_seed=None,
) -> RelationshipMatrix:
    if pattern == "balanced":
        return generate_relationship_matrix(num_agents, random_seed, 0.5, 0.15)
    elif pattern == "random":
        return generate_relationship_matrix(num_agents, random_seed, 0.5, 0.3)
    elif pattern == "polarized":
        if num_agents <= 0:
            raise InvalidConfiguration(f"num_agents must be positive, got {num_agents}")
        rng = make_rng(random_seed)
        group_of = {}
        for group_id, group in enumerate(_polarized_groups(num_agents)):
            for idx in group:
                group_of[idx] = group_id

        values = np.eye(num_agents)
        for i in range(num_agents):
            for j in range(i + 1, num_agents):
                if group_of[i] == group_of[j]:
                    value = float(np.clip(rng.normal(0.8, 0.1), 0.7, 1.0))
                else:
                    value = float(np.clip(rng.normal(0.2, 0.1), 0.0, 0.4))
                values[i, j] = values[j, i] = value
        return RelationshipMatrix(values)
    else:
        raise InvalidConfiguration(f"Unknown pattern: {pattern}. Available: {', '.join(PATTERNS)}")


def analyze_relationships(matrix: RelationshipMatrix) -> Dict[str, float]:
    n = matrix.num_agents
    off_diagonal = matrix.values[~np.eye(n, dtype=bool)]
    if off_diagonal.size == 0:
        return {"mean": 0.0, "std": 0.0, "min": 0.0, "max": 0.0, "median": 0.0}
    return {
        "mean": float(np.mean(off_diagonal)),
        "std": sample_std(off_diagonal),
        "min": float(np.min(off_diagonal)),
        "max": float(np.max(off_diagonal)),
        "median": float(np.median(off_diagonal)),
    }


def categorize_relationships(
    matrix: RelationshipMatrix,
    threshold_close: float = 0.6,
    threshold_distant: float = 0.4,
) -> Dict[str, List[Tuple[int, int]]]:
    if not 0.0 <= threshold_distant < threshold_close <= 1.0:
        raise InvalidConfiguration("invalid thresholds")

    categories: Dict[str, List[Tuple[int, int]]] = {"close": [], "neutral": [], "distant": []}
    n = matrix.num_agents
    for i in range(1, n + 1):
        for j in range(i + 1, n + 1):
            strength = matrix.strength(i, j)
            if strength >= threshold_close:
                categories["close"].append((i, j))
            elif strength <= threshold_distant:
                categories["distant"].append((i, j))
            else:
                categories["neutral"].append((i, j))
    return categories
