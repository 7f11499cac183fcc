"""Build configuration loading."""

from .settings import BuildConfig, load_config

__all__ = ["BuildConfig", "load_config"]
