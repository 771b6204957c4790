"""Partner scheduling and availability engine for the car-wash console."""

__version__ = "0.1.0"
