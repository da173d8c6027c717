"""Live driver positions for real-time display."""

from racing_map.live.cache import LivePosition, LivePositionCache

__all__ = ["LivePosition", "LivePositionCache"]
