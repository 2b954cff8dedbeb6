from .lease_repository import LeaseRepository, MaintenanceWindowRepository

__all__ = [
    "LeaseRepository",
    "MaintenanceWindowRepository",
]
