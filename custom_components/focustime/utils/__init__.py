# File: utils/__init__.py
"""Pure Python utilities for FocusTime.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Date/time parsing, month arithmetic, duration formatting
    - math_utils: Minute rounding and progress calculations

Usage:
    from . import dt_utils
    from .math_utils import round_minutes
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
