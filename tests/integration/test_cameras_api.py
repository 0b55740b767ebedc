"""
End-to-end tests for /api/v1/cameras.

Tests cover:
- paginated list envelope, filters, sorting, clamping
- no matches is an empty 200, never an error
- search endpoint
- auth gate ordering on writes and deletes
- 400 on malformed bodies (including reversed year/value pairs), 404 on missing records
- out-of-range page and year parameters never fail a list
"""

from __future__ import annotations

import pytest

CAMERAS = "/api/v1/cameras"


@pytest.fixture
def seeded(cameras):
    cameras.add(
        name="Ruby Reflex",
        manufacturer="Thornton-Pickard",
        year_introduced=1909,
        format="Plate",
        rarity="Uncommon",
        description="Professional reflex camera popular with press photographers",
        estimated_value_min=500.0,
        estimated_value_max=800.0,
    )
    cameras.add(
        name="Imperial Triple Extension",
        manufacturer="Thornton-Pickard",
        year_introduced=1895,
        format="Plate",
        rarity="Rare",
        description="High-quality field camera",
    )
    cameras.add(name="Brownie", manufacturer="Kodak", year_introduced=1900, format="Roll", rarity="Common")
    return cameras


class TestList:
    def test_envelope(self, client, seeded):
        resp = client.get(CAMERAS)

        assert resp.status_code == 200
        body = resp.json()
        assert body["page"] == 1
        assert body["page_size"] == 10
        assert body["total"] == 3
        assert body["total_pages"] == 1
        assert [c["name"] for c in body["data"]] == ["Brownie", "Imperial Triple Extension", "Ruby Reflex"]

    def test_response_shape(self, client, seeded):
        ruby = next(c for c in client.get(CAMERAS).json()["data"] if c["name"] == "Ruby Reflex")
        assert ruby["estimated_value_range"] == "£500 - £800"
        assert ruby["plate_sizes"] == []
        assert "deleted_at" not in ruby

    def test_filter_by_manufacturer(self, client, seeded):
        body = client.get(CAMERAS, params={"manufacturer": "Kodak"}).json()
        assert [c["name"] for c in body["data"]] == ["Brownie"]

        spec, _ = seeded.list_calls[-1]
        assert [(c.field, c.value) for c in spec.equals] == [("manufacturer", "Kodak")]

    def test_unknown_params_are_ignored(self, client, seeded):
        body = client.get(CAMERAS, params={"secretfield": "1", "deleted_at": "x"}).json()

        assert body["total"] == 3
        spec, _ = seeded.list_calls[-1]
        assert spec.equals == () and spec.ranges == () and spec.search is None

    def test_search_is_case_insensitive(self, client, seeded):
        body = client.get(CAMERAS, params={"search": "REFLEX"}).json()
        assert [c["name"] for c in body["data"]] == ["Ruby Reflex"]

    def test_year_range_and_sort(self, client, seeded):
        body = client.get(
            CAMERAS,
            params={"year_from": "1896", "year_to": "oops", "sort": "year_introduced", "order": "desc"},
        ).json()
        assert [c["name"] for c in body["data"]] == ["Ruby Reflex", "Brownie"]

    def test_invalid_sort_and_order_fall_back(self, client, seeded):
        resp = client.get(CAMERAS, params={"sort": "DROP TABLE", "order": "sideways"})

        assert resp.status_code == 200
        spec, _ = seeded.list_calls[-1]
        assert spec.sort_field == "name"
        assert spec.sort_order == "asc"

    def test_clamped_paging_is_echoed(self, client, seeded):
        body = client.get(CAMERAS, params={"page": "0", "page_size": "500"}).json()
        assert body["page"] == 1
        assert body["page_size"] == 100

    def test_paging(self, client, seeded):
        body = client.get(CAMERAS, params={"page": "2", "page_size": "2"}).json()
        assert body["total"] == 3
        assert body["total_pages"] == 2
        assert [c["name"] for c in body["data"]] == ["Ruby Reflex"]

    def test_out_of_range_page_and_year_are_not_errors(self, client, seeded):
        resp = client.get(CAMERAS, params={"page": "9" * 30, "year_from": "99999999999"})

        assert resp.status_code == 200
        assert resp.json()["data"] == []
        spec, window = seeded.list_calls[-1]
        assert spec.ranges == ()
        assert window.offset < 2**63

    def test_no_matches_is_empty_page(self, client, seeded):
        resp = client.get(CAMERAS, params={"manufacturer": "Leica"})

        assert resp.status_code == 200
        assert resp.json() == {"page": 1, "page_size": 10, "total": 0, "total_pages": 0, "data": []}


class TestSearchEndpoint:
    def test_search(self, client, seeded):
        body = client.get(f"{CAMERAS}/search", params={"q": "imperial"}).json()
        assert [c["name"] for c in body["data"]] == ["Imperial Triple Extension"]

    def test_blank_query_is_bad_request(self, client, seeded):
        assert client.get(f"{CAMERAS}/search", params={"q": "  "}).status_code == 400


class TestGet:
    def test_get(self, client, seeded):
        resp = client.get(f"{CAMERAS}/1")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Ruby Reflex"

    def test_missing(self, client, seeded):
        assert client.get(f"{CAMERAS}/999").status_code == 404


class TestWrite:
    def test_create_requires_auth(self, client, cameras):
        resp = client.post(CAMERAS, json={"name": "X", "manufacturer": "Y"})

        assert resp.status_code == 401
        assert cameras.writes == []

    def test_create(self, client, cameras, auth_header):
        resp = client.post(
            CAMERAS,
            json={"name": "Ruby Special", "manufacturer": "Thornton-Pickard", "plate_sizes": ["quarter-plate"]},
            headers=auth_header(),
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Ruby Special"
        assert body["plate_sizes"] == ["quarter-plate"]
        assert body["estimated_value_range"] is None

    def test_create_malformed_body(self, client, cameras, auth_header):
        resp = client.post(CAMERAS, json={"manufacturer": "Y"}, headers=auth_header())

        assert resp.status_code == 400
        assert cameras.writes == []

    def test_create_unauthenticated_beats_malformed_body(self, client, cameras):
        assert client.post(CAMERAS, json={"bad": True}).status_code == 401

    def test_unauthenticated_unparseable_json_is_bad_request(self, client, cameras):
        # The body is decoded before the gate runs; nothing is written either way.
        resp = client.post(CAMERAS, content=b"{not json", headers={"Content-Type": "application/json"})

        assert resp.status_code == 400
        assert cameras.writes == []

    def test_update_partial(self, client, seeded, auth_header):
        resp = client.put(f"{CAMERAS}/3", json={"rarity": "Uncommon"}, headers=auth_header())

        assert resp.status_code == 200
        assert resp.json()["rarity"] == "Uncommon"
        assert resp.json()["name"] == "Brownie"

    def test_update_null_required_field(self, client, seeded, auth_header):
        resp = client.put(f"{CAMERAS}/3", json={"name": None}, headers=auth_header())
        assert resp.status_code == 400

    def test_update_rejects_reversed_years(self, client, seeded, auth_header):
        resp = client.put(
            f"{CAMERAS}/1",
            json={"year_introduced": 1920, "year_discontinued": 1910},
            headers=auth_header(),
        )

        assert resp.status_code == 400
        assert seeded.writes == []

    def test_update_rejects_reversed_value_range(self, client, seeded, auth_header):
        resp = client.put(
            f"{CAMERAS}/1",
            json={"estimated_value_min": 900, "estimated_value_max": 100},
            headers=auth_header(),
        )

        assert resp.status_code == 400
        assert seeded.writes == []

    def test_update_missing(self, client, seeded, auth_header):
        assert client.put(f"{CAMERAS}/999", json={"rarity": "Rare"}, headers=auth_header()).status_code == 404


class TestDelete:
    def test_unauthenticated(self, client, seeded):
        assert client.delete(f"{CAMERAS}/1").status_code == 401
        assert seeded.writes == []

    def test_non_admin_is_forbidden(self, client, seeded, auth_header):
        resp = client.delete(f"{CAMERAS}/1", headers=auth_header(role="user"))

        assert resp.status_code == 403
        assert seeded.writes == []

    def test_non_admin_forbidden_even_if_missing(self, client, seeded, auth_header):
        resp = client.delete(f"{CAMERAS}/999", headers=auth_header(role="user"))

        assert resp.status_code == 403
        assert seeded.writes == []

    def test_admin_deletes(self, client, seeded, auth_header):
        resp = client.delete(f"{CAMERAS}/1", headers=auth_header(role="admin"))

        assert resp.status_code == 204
        assert client.get(f"{CAMERAS}/1").status_code == 404
        assert client.get(CAMERAS).json()["total"] == 2

    def test_admin_delete_missing(self, client, seeded, auth_header):
        assert client.delete(f"{CAMERAS}/999", headers=auth_header(role="admin")).status_code == 404
