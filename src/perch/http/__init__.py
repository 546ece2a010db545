"""Minimal host-side HTTP types.

The dispatcher only needs the ``RequestLike`` / ``ResponseLike`` surface
from :mod:`perch.protocols`; these are the stock implementations.
"""

from perch.http.headers import Headers
from perch.http.request import Request
from perch.http.response import Body, Response

__all__ = ["Body", "Headers", "Request", "Response"]
