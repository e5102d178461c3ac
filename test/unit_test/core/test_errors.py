"""
Unit tests for the shared exception types.
"""

from islamwiki.core.errors import ExtensionError, HttpException, RouteResolutionError, ServiceNotFoundError


class TestHttpException:
    def test_attributes(self):
        exc = HttpException(418, "teapot", {"X-Reason": "brew"})

        assert exc.status_code == 418
        assert exc.message == "teapot"
        assert exc.headers == {"X-Reason": "brew"}
        assert str(exc) == "teapot"

    def test_constructors(self):
        assert HttpException.not_found().status_code == 404
        assert HttpException.forbidden().status_code == 403
        assert HttpException.unauthorized().status_code == 401
        assert HttpException.bad_request().status_code == 400
        assert HttpException.server_error().status_code == 500

    def test_too_many_requests_retry_after(self):
        assert HttpException.too_many_requests(retry_after=5).headers == {"Retry-After": "5"}
        assert HttpException.too_many_requests().headers == {}


class TestOtherErrors:
    def test_route_resolution_error(self):
        exc = RouteResolutionError("a.b:C@d", "method 'd' not found")

        assert exc.reference == "a.b:C@d"
        assert "a.b:C@d" in str(exc)

    def test_service_not_found_message(self):
        assert str(ServiceNotFoundError("router")) == "Service not bound in container: 'router'"

    def test_extension_error(self):
        exc = ExtensionError("Adhan", "class not found")

        assert exc.extension_name == "Adhan"
        assert str(exc) == "Extension 'Adhan': class not found"
