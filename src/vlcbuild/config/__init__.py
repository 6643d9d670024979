"""Configuration parsing modules for vlcbuild."""

from .build_config import BuildConfig, BuildConfigError

__all__ = [
    "BuildConfig",
    "BuildConfigError",
]
