from pydantic import BaseModel, Field
from typing import List, Dict, Optional

# --- Modele wejściowe (Request) ---

class Desires(BaseModel):
    close: float = Field(0.5, ge=0.0, le=1.0)
    explore: float = Field(0.5, ge=0.0, le=1.0)

class SimulationParams(BaseModel):
    num_agents: int = Field(9, ge=1, le=9)
    desires: Desires = Desires()
    max_iterations: int = Field(100, gt=0)
    random_seed: Optional[int] = Field(None, ge=0)
    mean_relationship: float = Field(0.5, ge=0.0, le=1.0)
    std_relationship: float = Field(0.2, gt=0.0)

class SimulateRequest(SimulationParams):
    pattern: Optional[str] = None  # "balanced", "polarized", "random"
    relationships: Optional[List[List[float]]] = None  # jawna macierz N x N

class BatchRequest(SimulationParams):
    num_runs: int = Field(10, ge=1, le=1000)
    seed_offset: int = 0

# --- Modele wyjściowe (Response) ---

class Move(BaseModel):
    iteration: int
    agent: int
    from_seat: int
    to_seat: int
    gain: float
    utility: float

class AgentUtility(BaseModel):
    agent: int
    seat: int
    utility: float
    close: float
    explore: float
    neighbors: int

class SimulationResponse(BaseModel):
    converged: bool
    status: str
    iterations: int
    initial_utility: float
    final_utility: float
    initial_seating: Dict[int, Optional[int]]  # {seat: agent_id | None}
    final_seating: Dict[int, Optional[int]]
    empty_seat: int
    utility_history: List[float]               # do wykresu zbieżności
    moves: List[Move]
    agents: List[AgentUtility]
    relationships: List[List[float]]

class RunSummary(BaseModel):
    random_seed: Optional[int]
    converged: bool
    iterations: int
    final_utility: float

class BatchResponse(BaseModel):
    num_runs: int
    convergence_rate: float
    mean_final_utility: float
    std_final_utility: float
    min_final_utility: float
    max_final_utility: float
    mean_iterations: float
    runs: List[RunSummary]
