"""
Utility functions and helpers
"""
from leadmarket.utils.logging import get_logger, app_logger, get_shared_logger
from leadmarket.utils.cache import merge_by_id

__all__ = ["get_logger", "app_logger", "get_shared_logger", "merge_by_id"]
