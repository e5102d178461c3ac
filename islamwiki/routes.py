"""
Web route table.

Registered on the ``IslamRouter`` during application startup, before the
``RoutesRegister`` hook lets extensions add their own routes.
"""

from islamwiki.http.middleware import AuthenticationMiddleware
from islamwiki.routing import IslamRouter

CONTROLLERS = "islamwiki.http.controllers"


def register_routes(router: IslamRouter) -> IslamRouter:
    router.get("/", f"{CONTROLLERS}.home:HomeController@index", name="home")

    with router.group("/api"):
        router.get("/extensions", f"{CONTROLLERS}.extensions:ExtensionController@index", name="extensions.index")
        router.get("/hooks", f"{CONTROLLERS}.extensions:ExtensionController@hooks", name="extensions.hooks")
        router.get(
            "/configuration", f"{CONTROLLERS}.configuration:ConfigurationController@categories", name="configuration.index"
        )
        router.get(
            "/configuration/{category}",
            f"{CONTROLLERS}.configuration:ConfigurationController@show",
            name="configuration.show",
        )
        router.post(
            "/configuration/{category}/{key}",
            f"{CONTROLLERS}.configuration:ConfigurationController@update",
            middleware=[AuthenticationMiddleware],
            name="configuration.update",
        )
    return router
