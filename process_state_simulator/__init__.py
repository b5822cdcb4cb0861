"""
Discrete-event simulator of CPU scheduling policies that traces every
process state transition.
"""

__version__ = "0.1.0"
