"""
Dispatch Planner - scheduling backend for field-service crews and vehicles.
"""

__version__ = "1.0.0"
