"""
Simulation backend: process pools, scheduling policies, the transition
engine and its trace collaborators.
"""

from .core import NEVER, Process, ProcessState, Transition, EmptyPoolError, SimulationError
from .schedulers import Policy
from .simulator import simulate, SimulationResult

__all__ = [
    'NEVER', 'Process', 'ProcessState', 'Transition', 'EmptyPoolError',
    'SimulationError', 'Policy', 'simulate', 'SimulationResult',
]
