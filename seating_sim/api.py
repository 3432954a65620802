import logging

from fastapi import FastAPI, HTTPException

from seating_sim.models import SimulationParams, SimulateRequest, BatchRequest, SimulationResponse, BatchResponse
from seating_sim.solver.core import run_simulation, run_multiple_simulations, summarize_runs
from seating_sim.solver.errors import InvalidConfiguration
from seating_sim.solver.greedy import SimulationResult
from seating_sim.solver.objectives import utility_breakdown
from seating_sim.solver.params import DesireParams, SimulationConfig
from seating_sim.solver.relationships import RelationshipMatrix, generate_predefined_relationships
from seating_sim.solver.seating import SeatingState
from seating_sim.solver.table import NUM_SEATS, adjacent_seats

logger = logging.getLogger(__name__)

app = FastAPI(title="Seating Simulation API")


def build_config(request: SimulationParams) -> SimulationConfig:
    return SimulationConfig(
        desires=DesireParams(request.desires.close, request.desires.explore),
        num_agents=request.num_agents,
        max_iterations=request.max_iterations,
        random_seed=request.random_seed,
        mean_relationship=request.mean_relationship,
        std_relationship=request.std_relationship,
    )


def build_relationships(request: SimulateRequest):
    """
    Macierz relacji z żądania: jawna, z predefiniowanego wzorca albo None
    (wtedy generuje ją symulacja na podstawie mean/std).
    """
    if request.relationships is not None:
        matrix = RelationshipMatrix(request.relationships)
        if matrix.num_agents != request.num_agents:
            raise InvalidConfiguration(
                f"relationships must be {request.num_agents}x{request.num_agents}"
            )
        return matrix
    if request.pattern is not None:
        return generate_predefined_relationships(
            request.pattern, request.num_agents, random_seed=request.random_seed
        )
    return None


def seating_dict(state: SeatingState):
    return {seat: state.occupant(seat) for seat in range(1, NUM_SEATS + 1)}


def to_response(result: SimulationResult) -> dict:
    breakdown = utility_breakdown(result.final_state, result.relationships, result.desires)
    return {
        "converged": result.converged,
        "status": result.status.value,
        "iterations": result.iterations,
        "initial_utility": result.initial_utility,
        "final_utility": result.final_utility,
        "initial_seating": seating_dict(result.initial_state),
        "final_seating": seating_dict(result.final_state),
        "empty_seat": result.final_state.empty_seat,
        "utility_history": list(result.utility_history),
        "moves": [vars(move) for move in result.moves],
        "agents": breakdown["agents"],
        "relationships": result.relationships.to_list(),
    }


@app.get("/")
def health_check():
    return {"status": "ok", "message": "Seating Simulation API is running"}


@app.get("/table")
def table_layout():
    return {seat: sorted(adjacent_seats(seat)) for seat in range(1, NUM_SEATS + 1)}


@app.post("/simulate", response_model=SimulationResponse)
def simulate_endpoint(request: SimulateRequest):
    try:
        config = build_config(request)
        relationships = build_relationships(request)
        result = run_simulation(config, relationships)
        return to_response(result)

    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Simulation failed")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {str(e)}")


@app.post("/simulate/batch", response_model=BatchResponse)
def batch_endpoint(request: BatchRequest):
    try:
        config = build_config(request)
        results = run_multiple_simulations(config, request.num_runs, seed_offset=request.seed_offset)
        summary = summarize_runs(results)

        runs = []
        for k, result in enumerate(results, start=1):
            seed = None
            if config.random_seed is not None:
                seed = config.random_seed + request.seed_offset + k - 1
            runs.append({
                "random_seed": seed,
                "converged": result.converged,
                "iterations": result.iterations,
                "final_utility": result.final_utility,
            })

        response = vars(summary).copy()
        response["runs"] = runs
        return response

    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Batch simulation failed")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {str(e)}")
