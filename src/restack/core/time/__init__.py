from restack.core.time.abc import Time
from restack.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
