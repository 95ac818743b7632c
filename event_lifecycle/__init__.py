"""Event lifecycle core: status graph, publication readiness and transactional transitions."""

__version__ = "1.0.0"
