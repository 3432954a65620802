import networkx as nx
from typing import Dict, FrozenSet, Optional, TYPE_CHECKING

from seating_sim.solver.errors import InvalidConfiguration

if TYPE_CHECKING:
    from seating_sim.solver.seating import SeatingState

# Układ stołu:
# [1] [2] [3] [4] [5]
# [6] [7] [8] [9] [10]
NUM_SEATS = 10
ROW_LENGTH = 5

HORIZONTAL_ADJACENCIES = [
    (1, 2), (2, 3), (3, 4), (4, 5),
    (6, 7), (7, 8), (8, 9), (9, 10),
]

FACE_TO_FACE_ADJACENCIES = [
    (1, 6), (2, 7), (3, 8), (4, 9), (5, 10),
]

EXPECTED_ADJACENCIES: Dict[int, FrozenSet[int]] = {
    1: frozenset({2, 6}),
    2: frozenset({1, 3, 7}),
    3: frozenset({2, 4, 8}),
    4: frozenset({3, 5, 9}),
    5: frozenset({4, 10}),
    6: frozenset({1, 7}),
    7: frozenset({2, 6, 8}),
    8: frozenset({3, 7, 9}),
    9: frozenset({4, 8, 10}),
    10: frozenset({5, 9}),
}


def build_table_graph() -> nx.Graph:
    graph = nx.Graph()
    for seat in range(1, NUM_SEATS + 1):
        graph.add_node(seat, row=(seat - 1) // ROW_LENGTH, column=(seat - 1) % ROW_LENGTH)
    # Graf nieskierowany, więc relacja jest automatycznie symetryczna
    graph.add_edges_from(HORIZONTAL_ADJACENCIES, kind="horizontal")
    graph.add_edges_from(FACE_TO_FACE_ADJACENCIES, kind="face_to_face")
    return graph


TABLE_GRAPH = nx.freeze(build_table_graph())

_NEIGHBORS: Dict[int, FrozenSet[int]] = {
    seat: frozenset(TABLE_GRAPH.neighbors(seat)) for seat in TABLE_GRAPH.nodes()
}


def _check_seat(seat: int) -> None:
    if seat not in _NEIGHBORS:
        raise InvalidConfiguration(f"seat must be in range 1-{NUM_SEATS}, got {seat}")


def adjacent_seats(seat: int) -> FrozenSet[int]:
    _check_seat(seat)
    return _NEIGHBORS[seat]


def adjacent_agents(seat: int, state: "SeatingState") -> FrozenSet[int]:
    """Agenci siedzący obok danego miejsca (pusty zbiór, jeśli miejsce jest wolne)."""
    _check_seat(seat)
    if state.occupant(seat) is None:
        return frozenset()
    agents = set()
    for adj_seat in _NEIGHBORS[seat]:
        occupant = state.occupant(adj_seat)
        if occupant is not None:
            agents.add(occupant)
    return frozenset(agents)


def are_adjacent(seat_a: int, seat_b: int) -> bool:
    _check_seat(seat_a)
    _check_seat(seat_b)
    return TABLE_GRAPH.has_edge(seat_a, seat_b)


def adjacency_kind(seat_a: int, seat_b: int) -> Optional[str]:
    if not are_adjacent(seat_a, seat_b):
        return None
    return TABLE_GRAPH.get_edge_data(seat_a, seat_b)["kind"]


def validate_table_setup() -> bool:
    for seat, expected in EXPECTED_ADJACENCIES.items():
        if adjacent_seats(seat) != expected:
            return False
    return TABLE_GRAPH.number_of_nodes() == NUM_SEATS


def format_seating(state: "SeatingState") -> str:
    def seat_repr(seat: int) -> str:
        occupant = state.occupant(seat)
        return "[ ]" if occupant is None else f"[{occupant}]"

    top_row = " ".join(seat_repr(seat) for seat in range(1, ROW_LENGTH + 1))
    bottom_row = " ".join(seat_repr(seat) for seat in range(ROW_LENGTH + 1, NUM_SEATS + 1))
    return f"{top_row}\n\n{bottom_row}\n\nEmpty seat: {state.empty_seat}"
