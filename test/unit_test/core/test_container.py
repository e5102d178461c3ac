"""
Unit tests for the service container.
"""

import pytest

from islamwiki.core.container import Container
from islamwiki.core.errors import ServiceNotFoundError


class Greeter:
    def __init__(self, container):
        self.container = container


class TestContainerBindings:
    def test_bind_builds_every_time(self):
        container = Container()
        container.bind("list", lambda c: [])

        assert container.get("list") is not container.get("list")

    def test_singleton_is_cached(self):
        container = Container()
        container.singleton("list", lambda c: [])

        assert container.get("list") is container.get("list")

    def test_class_key_without_factory(self):
        container = Container()
        container.singleton(Greeter)

        greeter = container.get(Greeter)

        assert isinstance(greeter, Greeter)
        assert greeter.container is container

    def test_non_class_key_requires_factory(self):
        with pytest.raises(TypeError):
            Container().bind("name")

    def test_instance(self):
        container = Container()
        value = object()

        assert container.instance("value", value) is value
        assert container.get("value") is value

    def test_rebinding_drops_cached_instance(self):
        container = Container()
        container.singleton("value", lambda c: "first")
        assert container.get("value") == "first"

        container.singleton("value", lambda c: "second")

        assert container.get("value") == "second"

    def test_factory_receives_container(self):
        container = Container()
        container.instance("name", "IslamWiki")
        container.bind("greeting", lambda c: f"Salaam from {c.get('name')}")

        assert container.get("greeting") == "Salaam from IslamWiki"


class TestContainerResolution:
    def test_alias(self):
        container = Container()
        container.singleton(Greeter)
        container.alias(Greeter, "greeter")

        assert container.has("greeter")
        assert container.get("greeter") is container.get(Greeter)

    def test_missing_service(self):
        container = Container()

        assert not container.has("missing")
        with pytest.raises(ServiceNotFoundError, match="missing"):
            container.get("missing")

    def test_missing_service_is_key_error(self):
        with pytest.raises(KeyError):
            Container().get("missing")

    def test_make_always_builds(self):
        container = Container()
        container.singleton("list", lambda c: [])
        shared = container.get("list")

        assert container.make("list") is not shared
        assert container.get("list") is shared

    def test_make_falls_back_to_instances(self):
        container = Container()
        value = object()
        container.instance("value", value)

        assert container.make("value") is value
