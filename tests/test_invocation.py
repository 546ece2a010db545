"""Tests for perch.invocation — callable resolution and strategies."""

import pytest

from perch.container import Container
from perch.errors import ResolutionError
from perch.invocation import CallableResolver, RequestResponse, RequestResponseArgs


def module_handler(request, response, arguments):
    return "module"


class Controller:
    def show(self, request, response, arguments):
        return "show"


class Invokable:
    def __call__(self, request, response, arguments):
        return "invoked"


class NeedsArgs:
    def __init__(self, dependency) -> None:
        self.dependency = dependency

    def show(self, request, response, arguments):
        return self.dependency


class TestCallableResolver:
    def test_callable_returned_as_is(self) -> None:
        assert CallableResolver().resolve(module_handler) is module_handler

    def test_module_attribute(self) -> None:
        func = CallableResolver().resolve(f"{__name__}:module_handler")
        assert func is module_handler

    def test_class_method_path_instantiates(self) -> None:
        func = CallableResolver().resolve(f"{__name__}:Controller.show")
        assert func(None, None, {}) == "show"

    def test_invokable_class_instantiated(self) -> None:
        func = CallableResolver().resolve(f"{__name__}:Invokable")
        assert isinstance(func, Invokable)

    def test_pair_with_class(self) -> None:
        func = CallableResolver().resolve([Controller, "show"])
        assert func(None, None, {}) == "show"

    def test_pair_with_instance(self) -> None:
        controller = Controller()
        func = CallableResolver().resolve((controller, "show"))
        assert func.__self__ is controller

    def test_pair_with_string_target(self) -> None:
        func = CallableResolver().resolve((f"{__name__}:Controller", "show"))
        assert func(None, None, {}) == "show"

    def test_container_service_method(self) -> None:
        resolver = CallableResolver(Container({"users": NeedsArgs("db")}))
        func = resolver.resolve("users:show")
        assert func(None, None, {}) == "db"

    def test_container_callable_service(self) -> None:
        resolver = CallableResolver(Container({"home": module_handler}))
        assert resolver.resolve("home") is module_handler

    def test_container_class_service_in_pair(self) -> None:
        resolver = CallableResolver(Container({"ctl": Controller}))
        assert resolver.resolve(("ctl", "show"))(None, None, {}) == "show"

    def test_unknown_module(self) -> None:
        with pytest.raises(ResolutionError, match="perch_no_such_module"):
            CallableResolver().resolve("perch_no_such_module:handler")

    def test_unknown_attribute(self) -> None:
        with pytest.raises(ResolutionError, match="not resolvable"):
            CallableResolver().resolve(f"{__name__}:Controller.missing")

    def test_module_is_not_callable(self) -> None:
        with pytest.raises(ResolutionError):
            CallableResolver().resolve("json")

    def test_non_callable(self) -> None:
        with pytest.raises(ResolutionError):
            CallableResolver().resolve(42)

    def test_bad_pair(self) -> None:
        with pytest.raises(ResolutionError, match="target, 'method'"):
            CallableResolver().resolve([Controller, "show", "extra"])

    def test_class_needing_arguments(self) -> None:
        with pytest.raises(ResolutionError, match="Cannot instantiate NeedsArgs"):
            CallableResolver().resolve([NeedsArgs, "show"])


class TestStrategies:
    def test_request_response_passes_dict(self) -> None:
        seen = []

        def func(request, response, arguments):
            seen.append((request, response, arguments))

        RequestResponse()(func, "req", "resp", {"id": "1"})
        assert seen == [("req", "resp", {"id": "1"})]

    def test_request_response_args_spreads(self) -> None:
        def func(request, response, *, id, slug):
            return (id, slug)

        result = RequestResponseArgs()(func, None, None, {"id": "1", "slug": "x"})
        assert result == ("1", "x")
