"""
Request handlers.

    RequestHandler   One GET request per connection, served from a
                     document root (files, default page, 404).
"""

from .request_handler import RequestHandler

__all__ = ["RequestHandler"]
