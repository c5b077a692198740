"""Tests for catalog/paths.py route building and reference parsing."""

import pytest
from vrakit.catalog import paths


class TestBuildPath:
    def test_fills_named_segments(self):
        path = paths.build_path(
            paths.RESOURCE_ACTION_TEMPLATE, resource_id="res-1", action_id="act-9"
        )
        assert path == (
            "/catalog-service/api/consumer/resources/res-1/actions/act-9/requests/template"
        )

    def test_encodes_reserved_characters(self):
        path = paths.build_path(paths.REQUEST, request_id="a/b c?d")
        assert path.endswith("/requests/a%2Fb%20c%3Fd")

    def test_missing_segment(self):
        with pytest.raises(KeyError):
            paths.build_path(paths.RESOURCE_ACTION_REQUESTS, resource_id="res-1")

    def test_unknown_segment(self):
        with pytest.raises(ValueError, match="Unknown path segments"):
            paths.build_path(paths.REQUEST, request_id="r", resource_id="x")

    def test_empty_segment(self):
        with pytest.raises(ValueError, match="must not be empty"):
            paths.build_path(paths.REQUEST, request_id="")

    def test_tenant_route(self):
        assert (
            paths.build_path(paths.TENANT_SUBTENANTS, tenant="vsphere.local")
            == "/identity/api/tenants/vsphere.local/subtenants"
        )


class TestRequestIdFromLocation:
    @pytest.mark.parametrize(
        "location, expected",
        [
            ("https://vra/catalog-service/api/consumer/requests/abc-123", "abc-123"),
            ("/catalog-service/api/consumer/requests/req-2", "req-2"),
            ("requests/req-2?expand=true", "req-2"),
            ("https://vra/requests/req-3#frag", "req-3"),
        ],
    )
    def test_trailing_segment(self, location, expected):
        assert paths.request_id_from_location(location) == expected

    @pytest.mark.parametrize("location", [None, "", "abc-123", "https://vra/requests/"])
    def test_rejects_unusable_references(self, location):
        assert paths.request_id_from_location(location) is None
