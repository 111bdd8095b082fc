from .replay import ReplayAction, ReplayHarness
from .runtime import CareerRuntime, RuntimePaths

__all__ = ["CareerRuntime", "ReplayAction", "ReplayHarness", "RuntimePaths"]
