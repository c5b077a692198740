"""vrakit - request, poll and action engine for catalog-driven provisioning."""

__version__ = "0.1.0"
