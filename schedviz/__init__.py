"""
schedviz package.

Scheduling engine (FCFS, SJF, Priority, Round Robin), metrics calculator and
a command-line visualizer for CPU scheduling algorithms.
"""

from .algorithms import schedule
from .errors import EmptySchedule, InvalidInput, InvalidParameter, SchedulerError
from .metrics import compute_results
from .models import ExecutionInterval, ProcessDescriptor

__all__ = [
    "EmptySchedule",
    "ExecutionInterval",
    "InvalidInput",
    "InvalidParameter",
    "ProcessDescriptor",
    "SchedulerError",
    "compute_results",
    "schedule",
]
