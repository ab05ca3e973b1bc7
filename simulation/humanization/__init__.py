"""Human factor helpers for circadian timing, daily scheduling, and sensors."""

from .circadian import circadian_delay  # noqa: F401
from .daily_variability import draw_daily_context  # noqa: F401
from .scheduler import SchedulerConfig, schedule_day  # noqa: F401
from .sensor_variability import apply_sensor_noise  # noqa: F401
