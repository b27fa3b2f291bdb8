"""Managers for the FocusTime integration."""

from .base_manager import BaseManager
from .statistics_manager import StatisticsManager

__all__ = ["BaseManager", "StatisticsManager"]
