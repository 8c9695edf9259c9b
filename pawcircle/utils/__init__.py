# pawcircle/utils/__init__.py
"""공통 유틸리티 패키지."""

from .datetime_utils import DateTimeUtils

__all__ = ['DateTimeUtils']
