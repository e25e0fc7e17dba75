"""Version information for omega-deploy."""

__version__ = "0.1.0"
