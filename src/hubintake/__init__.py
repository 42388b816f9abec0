"""hub-intake: intake sessions and item registration for pickup hubs."""

__version__ = "0.1.0"
