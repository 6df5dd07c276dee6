"""Star growth rankings and forecasts for GitHub repositories."""

__version__ = '0.1.0'
