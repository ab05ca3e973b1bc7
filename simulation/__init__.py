"""Simulation helpers package."""

from .metabolic_model import apply_drift_and_feedback, bounded_drift  # noqa: F401
from .post_processing import post_process  # noqa: F401
from .response_kernel import cgm_delay_kernel, render_event  # noqa: F401
from .signal_model import downsample, smooth_in_place  # noqa: F401
