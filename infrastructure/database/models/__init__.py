from . import leases  # noqa: F401

__all__ = [
    "leases",
]
