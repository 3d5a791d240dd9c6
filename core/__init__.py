"""
Core modules for the Two-Level Queue Scheduler Simulator
"""

from .config import SchedulerConfig, DEFAULT_QUANTUM, FOREGROUND, BACKGROUND
from .errors import (SchedulerError, InvalidDescriptorError, EmptyInputError,
                     SimulationDivergenceError, InputFormatError, InvalidConfigError)
from .process import (ProcessDescriptor, ProcessClass, ProcessState, ProcessRuntime,
                      make_descriptor, validate_descriptors)
from .scheduler_base import (BaseScheduler, SchedulerStats, TimelineSegment,
                             ProcessStats, SimulationResult)

__all__ = [
    'SchedulerConfig',
    'DEFAULT_QUANTUM',
    'FOREGROUND',
    'BACKGROUND',
    'SchedulerError',
    'InvalidDescriptorError',
    'EmptyInputError',
    'SimulationDivergenceError',
    'InputFormatError',
    'InvalidConfigError',
    'ProcessDescriptor',
    'ProcessClass',
    'ProcessState',
    'ProcessRuntime',
    'make_descriptor',
    'validate_descriptors',
    'BaseScheduler',
    'SchedulerStats',
    'TimelineSegment',
    'ProcessStats',
    'SimulationResult'
]
