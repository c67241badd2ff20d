"""src/urlcraft/client/__init__.py"""

from .service import HttpService, RequestHook
from .services import HttpServiceManager

__all__ = ["HttpService", "HttpServiceManager", "RequestHook"]
