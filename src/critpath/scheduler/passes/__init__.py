"""Forward and backward critical-path passes."""

from .backward_pass import BackwardPass, compute_late_times
from .forward_pass import ForwardPass, compute_early_times

__all__ = ["BackwardPass", "ForwardPass", "compute_early_times", "compute_late_times"]
