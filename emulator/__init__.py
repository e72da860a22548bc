from .errors import MachineError
from .runner import run_listing, run_machine

__all__ = ["MachineError", "run_listing", "run_machine"]
