"""Stream segmentation: breakpoint selection and range building"""

from .breakpoints import BreakpointSelector, make_breakpoint_selector
from .ranges import Range, build_ranges, iter_ranges

__all__ = [
    'BreakpointSelector',
    'make_breakpoint_selector',
    'Range',
    'build_ranges',
    'iter_ranges',
]
