"""Routing — compiled route table built from route metadata.

Routes are added once the mapping tree has been built and compiled
into an immutable lookup structure when the app freezes.
"""

from perch.routing.params import PlaceholderAliases
from perch.routing.router import Router, RouteMatch

__all__ = ["PlaceholderAliases", "RouteMatch", "Router"]
