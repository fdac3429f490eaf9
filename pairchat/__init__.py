"""pairchat - real-time two-party chat over WebSockets."""

__version__ = "1.0.0"
