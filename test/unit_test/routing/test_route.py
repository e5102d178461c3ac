"""
Unit tests for route pattern compilation and matching.
"""

import pytest

from islamwiki.routing.route import Route, RouteMatch, compile_pattern


class TestPatternCompilation:
    def test_placeholders_become_segment_groups(self):
        regex, names = compile_pattern("/wiki/{slug}/revisions/{revision}")

        assert regex.pattern == r"\A/wiki/([^/]+)/revisions/([^/]+)\Z"
        assert names == ["slug", "revision"]

    def test_literal_text_is_escaped(self):
        route = Route("GET", "/files/{name}.json", lambda request, name: name)

        assert route.match("/files/data.json") == {"name": "data"}
        assert route.match("/files/dataXjson") is None

    def test_pattern_is_anchored(self):
        route = Route("GET", "/wiki", lambda request: None)

        assert route.match("/wiki") == {}
        assert route.match("/wiki/extra") is None
        assert route.match("/prefix/wiki") is None

    @pytest.mark.parametrize("path", ["/admin\n", "/admin\n/", "\n/admin"])
    def test_newline_in_path_does_not_match(self, path):
        route = Route("GET", "/admin", lambda request: None)

        assert route.match(path) is None


class TestRouteMatching:
    def test_placeholder_does_not_cross_segments(self):
        route = Route("GET", "/wiki/{slug}", lambda request, slug: slug)

        assert route.match("/wiki/Salah") == {"slug": "Salah"}
        assert route.match("/wiki/a/b") is None
        assert route.match("/wiki/") is None

    def test_params_in_pattern_order(self):
        route = Route("GET", "/api/{category}/{key}", lambda request, **params: params)

        assert list(route.match("/api/core/site_name").items()) == [("category", "core"), ("key", "site_name")]

    def test_methods_are_upper_cased(self):
        route = Route(["get", "Post"], "/", lambda request: None)

        assert route.methods == frozenset({"GET", "POST"})
        assert route.allows("post")
        assert not route.allows("DELETE")

    def test_single_method_string(self):
        route = Route("put", "/", lambda request: None)

        assert route.methods == frozenset({"PUT"})


class TestRouteBuilding:
    def test_build_path_quotes_values(self):
        route = Route("GET", "/wiki/{slug}", lambda request, slug: slug)

        assert route.build_path(slug="Five Pillars") == "/wiki/Five%20Pillars"
        assert route.build_path(slug="a/b") == "/wiki/a%2Fb"

    def test_build_path_missing_param(self):
        route = Route("GET", "/wiki/{slug}", lambda request, slug: slug)

        with pytest.raises(ValueError, match="slug"):
            route.build_path()


class TestRouteMatchResult:
    def test_route_match_exposes_handler_and_middleware(self):
        def handler(request):
            return None

        middleware = object()
        route = Route("GET", "/", handler, middleware=[middleware])
        match = RouteMatch(route, {})

        assert match.handler is handler
        assert match.middleware == [middleware]
        assert match.params == {}
