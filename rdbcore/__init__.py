"""SQL type codes and collection and assignment of driver-reported result values."""

__version__ = "0.1.0"
__all__ = ["types", "valuer"]