"""Sonar data types: angles, timestamps, beams, scans, multibeam samples and image frames."""

__version__ = "0.1.0"

__all__ = [
    "numeric",
    "angle",
    "linalg",
    "time",
    "sonar_beam",
    "sonar_scan",
    "sonar",
    "frame",
]