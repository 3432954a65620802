from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from seating_sim.solver.errors import AgentNotFound, InvalidConfiguration
from seating_sim.solver.table import NUM_SEATS

EMPTY = 0


def make_rng(random_seed=None) -> np.random.Generator:
    if isinstance(random_seed, np.random.Generator):
        return random_seed
    if random_seed is not None and random_seed < 0:
        raise InvalidConfiguration(f"random_seed must be non-negative, got {random_seed}")
    return np.random.default_rng(random_seed)


def check_agent_count(num_agents: int, num_seats: int = NUM_SEATS) -> None:
    if num_seats != NUM_SEATS:
        raise InvalidConfiguration(
            f"num_seats must be {NUM_SEATS} (only the 10-seat table is supported), got {num_seats}"
        )
    if num_agents <= 0:
        raise InvalidConfiguration(f"num_agents must be positive, got {num_agents}")
    if num_agents >= num_seats:
        raise InvalidConfiguration(
            f"num_agents ({num_agents}) must be less than num_seats ({num_seats})"
        )


@dataclass(frozen=True)
class SeatingState:
    """
    Niemutowalny stan stołu.
    seating[seat - 1] to ID agenta albo EMPTY.
    """

    seating: Tuple[int, ...]
    num_agents: int

    def __post_init__(self):
        object.__setattr__(self, "seating", tuple(int(x) for x in self.seating))
        if len(self.seating) != NUM_SEATS:
            raise InvalidConfiguration(
                f"seating must have exactly {NUM_SEATS} elements, got {len(self.seating)}"
            )
        check_agent_count(self.num_agents, len(self.seating))

        occupants = [a for a in self.seating if a != EMPTY]
        if sorted(occupants) != list(range(1, self.num_agents + 1)):
            raise InvalidConfiguration(
                f"seating must hold agents 1-{self.num_agents} exactly once, got {occupants}"
            )

    @classmethod
    def from_assignment(cls, assignment: Dict[int, int], num_agents: Optional[int] = None) -> "SeatingState":
        """{agent_id: seat} -> SeatingState"""
        if num_agents is None:
            num_agents = len(assignment)
        seating = [EMPTY] * NUM_SEATS
        for agent_id, seat in assignment.items():
            if not 1 <= seat <= NUM_SEATS:
                raise InvalidConfiguration(f"seat must be in range 1-{NUM_SEATS}, got {seat}")
            if seating[seat - 1] != EMPTY:
                raise InvalidConfiguration(f"seat {seat} assigned twice")
            seating[seat - 1] = agent_id
        return cls(tuple(seating), num_agents)

    @property
    def empty_seats(self) -> Tuple[int, ...]:
        return tuple(seat for seat, a in enumerate(self.seating, start=1) if a == EMPTY)

    @property
    def empty_seat(self) -> int:
        # Przy N < 9 ruchy zawsze dotyczą najniższego wolnego miejsca
        return self.empty_seats[0]

    def occupant(self, seat: int) -> Optional[int]:
        agent_id = self.seating[seat - 1]
        return None if agent_id == EMPTY else agent_id

    def seat_of(self, agent_id: int) -> int:
        if 1 <= agent_id <= self.num_agents:
            for seat, occupant in enumerate(self.seating, start=1):
                if occupant == agent_id:
                    return seat
        raise AgentNotFound(agent_id)

    def as_assignment(self) -> Dict[int, int]:
        return {a: seat for seat, a in enumerate(self.seating, start=1) if a != EMPTY}


def generate_random_seating(
    num_agents: int = 9,
    num_seats: int = NUM_SEATS,
    random_seed: Optional[int] = None,
) -> SeatingState:
    check_agent_count(num_agents, num_seats)
    rng = make_rng(random_seed)

    seating = [EMPTY] * num_seats
    occupied_positions = rng.permutation(num_seats)[:num_agents]
    for agent_id, pos in enumerate(occupied_positions, start=1):
        seating[int(pos)] = agent_id
    return SeatingState(tuple(seating), num_agents)


def apply_move(state: SeatingState, agent_id: int) -> SeatingState:
    """Przesadza agenta na wolne miejsce; jego dotychczasowe miejsce się zwalnia."""
    current_seat = state.seat_of(agent_id)
    new_seating = list(state.seating)
    new_seating[state.empty_seat - 1] = agent_id
    new_seating[current_seat - 1] = EMPTY
    return SeatingState(tuple(new_seating), state.num_agents)
