"""Tests for specroute.matcher."""

from __future__ import annotations

import pytest

from specroute.compiler.routes import create_routes
from specroute.matcher import (
    extract_path_params,
    lookup_request,
    path_matches,
    request_matches,
)
from specroute.models import PathVariable, RouteKey


# ---------------------------------------------------------------------------
# lookup_request
# ---------------------------------------------------------------------------


class TestLookupRequest:
    """Test matching against the petstore table."""

    @pytest.mark.parametrize(
        ("method", "path", "operation_id"),
        [
            ("get", "/v1/pets", "listPets"),
            ("POST", "/v1/pets", "createPet"),
            ("get", "/v1/pets/42", "showPetById"),
            ("Delete", "/v1/pets/42", "deletePet"),
            ("get", "/v1/pets/42/", "showPetById"),
            ("get", "/v1/categories/toys", "showCategory"),
        ],
    )
    def test_matches(self, petstore_context, method, path, operation_id) -> None:
        route = lookup_request(petstore_context.requests, method, path)

        assert route is not None
        assert route.definition["operationId"] == operation_id

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("put", "/v1/pets"),
            ("get", "/pets"),
            ("get", "/v1"),
            ("get", "/v1/pets/42/toys"),
            ("get", "/"),
            ("delete", "/v1/categories/toys"),
        ],
    )
    def test_misses(self, petstore_context, method, path) -> None:
        assert lookup_request(petstore_context.requests, method, path) is None

    def test_first_declared_wins(self, petstore_context) -> None:
        route = lookup_request(petstore_context.requests, "get", "/v1/pets/mine")

        assert route.definition["operationId"] == "showPetById"

    def test_literal_declared_first_wins(self) -> None:
        table = create_routes(
            {
                "paths": {
                    "/users/me": {"get": {"operationId": "me"}},
                    "/users/{id}": {"get": {"operationId": "byId"}},
                }
            }
        )

        assert lookup_request(table, "get", "/users/me").definition["operationId"] == "me"
        assert lookup_request(table, "get", "/users/7").definition["operationId"] == "byId"

    def test_root_path(self) -> None:
        table = create_routes({"paths": {"/": {"get": {"operationId": "root"}}}})

        assert lookup_request(table, "get", "/").definition["operationId"] == "root"
        assert lookup_request(table, "get", "").definition["operationId"] == "root"
        assert lookup_request(table, "get", "/x") is None

    def test_variable_does_not_match_empty_tail(self) -> None:
        table = create_routes({"paths": {"/files/{name}": {"get": {}}}})

        assert lookup_request(table, "get", "/files/") is None
        assert lookup_request(table, "get", "/files/a.txt") is not None

    def test_empty_table(self) -> None:
        assert lookup_request(create_routes({}), "get", "/anything") is None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestPathMatches:
    """Test template comparison."""

    def test_literal_segments_must_be_equal(self) -> None:
        assert path_matches(("a", "b"), ("a", "b"))
        assert not path_matches(("a", "b"), ("a", "c"))

    def test_segment_counts_must_be_equal(self) -> None:
        assert not path_matches(("a",), ("a", "b"))
        assert not path_matches(("a", "b"), ("a",))

    def test_variables_match_anything(self) -> None:
        template = ("a", PathVariable(name="x"))
        assert path_matches(template, ("a", "anything"))
        assert path_matches(template, ("a", "{x}"))

    def test_empty(self) -> None:
        assert path_matches((), ())

    def test_request_matches_compares_method(self) -> None:
        key = RouteKey(method="get", template=("a",))
        assert request_matches(key, "get", ("a",))
        assert not request_matches(key, "post", ("a",))


class TestExtractPathParams:
    """Test variable capture."""

    def test_extracts_values(self) -> None:
        template = ("v1", "users", PathVariable(name="userId"), "posts", PathVariable(name="postId"))

        params = extract_path_params(template, ("v1", "users", "7", "posts", "99"))

        assert params == {"userId": "7", "postId": "99"}

    def test_no_variables(self) -> None:
        assert extract_path_params(("a", "b"), ("a", "b")) == {}
