"""Config layer — settings models, TOML discovery, and logging setup."""

from fieldwright.config.settings import FieldwrightSettings

__all__ = ["FieldwrightSettings"]
