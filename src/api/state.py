from typing import Optional

from api.backend import PlannerBackend

# Global instance initialized at startup (or lazily by the first request)
backend: Optional[PlannerBackend] = None
