from vrakit.clients.base import ApiResponse, BaseHTTPClient
from vrakit.clients.vra import VRAClient

__all__ = ["ApiResponse", "BaseHTTPClient", "VRAClient"]
