from api import state
from api.backend import PlannerBackend


def get_backend() -> PlannerBackend:
    if state.backend is None:
        state.backend = PlannerBackend()
    return state.backend
