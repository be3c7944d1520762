"""
Configuration Package
"""

from .settings import Settings, DetectionThresholds

__all__ = ["Settings", "DetectionThresholds"]
