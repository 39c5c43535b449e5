"""
rpi-maintenance - unattended maintenance for a headless Raspberry Pi appliance
"""

__version__ = "2025112504"

from .core import MaintenanceOrchestrator
from .errors import MaintenanceError

__all__ = ["MaintenanceOrchestrator", "MaintenanceError"]
