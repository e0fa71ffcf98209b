"""
Utility modules for pylox.
"""

from .base import format_number, extract_location_info
