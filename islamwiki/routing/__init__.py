"""
Routing: route definitions, the ``IslamRouter`` and controller resolution.
"""

from .controller_factory import ControllerFactory
from .route import Route, RouteMatch
from .router import AFTER_RESPONSE_HOOK, BEFORE_REQUEST_HOOK, ROUTES_REGISTER_HOOK, IslamRouter

__all__ = [
    "AFTER_RESPONSE_HOOK",
    "BEFORE_REQUEST_HOOK",
    "ROUTES_REGISTER_HOOK",
    "ControllerFactory",
    "IslamRouter",
    "Route",
    "RouteMatch",
]
