class SeatingError(Exception):
    """Bazowy wyjątek symulacji."""


class InvalidConfiguration(SeatingError, ValueError):
    """Błędne parametry: liczba agentów, pragnienia, macierz, rozmiar stołu."""


class AgentNotFound(SeatingError, LookupError):
    def __init__(self, agent_id: int):
        super().__init__(f"Agent {agent_id} not found in seating")
        self.agent_id = agent_id
