"""Public package interface for the Number Maker digit-puzzle solver.

Importing this package gives you the run options, the controller that drives
a search and the background worker without knowing the module layout.

Typical usage
-------------
>>> from number_maker import Options, RunController
>>> controller = RunController()
>>> outcome = controller.run(Options(digit_string="123", symbols=["+", "-", "×", "÷"]))
>>> 6 in controller.state.pool
True
"""
from importlib.metadata import version as _version  # type: ignore

from .controller import RunController
from .formula import Formula
from .messages import Command, Event, Snapshot, Status, StepOutcome
from .settings import Options, OptionsError, Settings, build_settings
from .worker import SolverWorker

__all__ = [
    "Options",
    "OptionsError",
    "Settings",
    "build_settings",
    "Formula",
    "RunController",
    "SolverWorker",
    "Command",
    "Event",
    "Snapshot",
    "Status",
    "StepOutcome",
    "__version__",
]

try:
    __version__ = _version("number_maker")
except Exception:  # pragma: no cover – package not installed yet
    __version__ = "0.0.0"
