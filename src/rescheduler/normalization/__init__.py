"""Input normalization."""

from .config_resolver import DEFAULT_ENGINE_CONFIG, resolve_engine_config
from .course import build_course_snapshot, build_disruptions
from .request import normalize_request

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "build_course_snapshot",
    "build_disruptions",
    "normalize_request",
    "resolve_engine_config",
]
