"""src/urlcraft/http/__init__.py

HTTP building blocks shared by urlcraft services.
"""

from .headers import Headers
from .multipart import encode_multipart
from .response import HttpResponse
from .verbs import HttpVerb

__all__ = ["Headers", "HttpResponse", "HttpVerb", "encode_multipart"]
