"""Configuration for Care-Bot."""

from config.synonyms import SYNONYMS, normalize
from config.patterns import (
    PARTICLE_PATTERN,
    STEP_DELIMITER,
    strip_particles,
    looks_like_model_name,
    has_step_delimiter,
)
from config.settings import Settings, load_settings

__all__ = [
    "SYNONYMS",
    "normalize",
    "PARTICLE_PATTERN",
    "STEP_DELIMITER",
    "strip_particles",
    "looks_like_model_name",
    "has_step_delimiter",
    "Settings",
    "load_settings",
]
