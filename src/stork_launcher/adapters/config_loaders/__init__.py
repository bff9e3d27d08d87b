"""Launcher config file readers and the configuration factory."""

from .factory import ConfigurationFactory
from .structured import read_mapping

__all__ = ["ConfigurationFactory", "read_mapping"]
