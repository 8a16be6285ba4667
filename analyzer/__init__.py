"""
Elevator Trip Analyzer

Recording and reporting tools for simulated car runs.

Components:
- TripRecorder: broker listener keeping trajectory, sensor, crash and command history
"""

__version__ = "0.1.0"

from .trip_recorder import TripRecorder

__all__ = ['TripRecorder']
