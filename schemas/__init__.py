from .interval import IntervalPayload

__all__ = [
    "IntervalPayload",
]
