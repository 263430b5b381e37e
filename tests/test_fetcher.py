"""Tests for the remote catalog fetcher."""

import pytest
import requests

from nistview.retrieval.fetcher import CatalogFetcher, FetchFailure

CATALOG_SETTINGS = {
    "base_url": "https://catalog.example.gov/api/",
    "endpoints": ["/controls/sp800-53/r5", "/controls"],
    "timeout_seconds": 30,
    "user_agent": "nistview-test/1",
}

VALID_PAYLOAD = {
    "controls": [
        {
            "id": "AC-1",
            "title": "Policy and Procedures",
            "family": "Access Control",
            "priority": "P1",
            "baseline": ["Low", "Moderate", "High"],
            "description": "Develop access control policy.",
            "control_enhancements": [],
        }
    ]
}


def test_fetch_sends_json_accept_header_and_timeout(fake_session_factory, fake_response_factory):
    session = fake_session_factory([fake_response_factory(200, VALID_PAYLOAD)])
    fetcher = CatalogFetcher(CATALOG_SETTINGS, session=session)

    result = fetcher.fetch()

    assert [c.id for c in result.controls] == ["AC-1"]
    assert result.endpoint == "https://catalog.example.gov/api/controls/sp800-53/r5"
    assert result.status_code == 200
    call = session.calls[0]
    assert call["headers"]["Accept"] == "application/json"
    assert call["headers"]["User-Agent"] == "nistview-test/1"
    assert call["timeout"] == 30


def test_fetch_falls_through_to_next_endpoint(fake_session_factory, fake_response_factory):
    session = fake_session_factory([
        fake_response_factory(404, {"error": "not found"}),
        fake_response_factory(200, VALID_PAYLOAD),
    ])
    fetcher = CatalogFetcher(CATALOG_SETTINGS, session=session)

    result = fetcher.fetch()

    assert result.endpoint.endswith("/controls")
    assert len(result.attempts) == 2
    assert result.attempts[0].status_code == 404
    assert result.attempts[0].error is not None
    assert result.attempts[1].error is None


@pytest.mark.parametrize(
    "outcome",
    [
        requests.Timeout("read timed out"),
        requests.ConnectionError("connection refused"),
    ],
)
def test_network_errors_raise_fetch_failure(outcome, fake_session_factory):
    session = fake_session_factory([outcome, outcome])
    fetcher = CatalogFetcher(CATALOG_SETTINGS, session=session)

    with pytest.raises(FetchFailure) as exc_info:
        fetcher.fetch()

    assert len(exc_info.value.attempts) == 2
    assert all(a.status_code is None for a in exc_info.value.attempts)


@pytest.mark.parametrize(
    "payload",
    [
        {"items": []},
        {"controls": "not-a-list"},
        [{"id": "AC-1"}],
        {"controls": [{"title": "missing id"}]},
        {"controls": [{"id": "AC-1", "baseline": ["Extreme"]}]},
        {"controls": [{"id": "AC-1"}, {"id": "AC-1"}]},
    ],
)
def test_shape_mismatch_raises_fetch_failure(payload, fake_session_factory, fake_response_factory):
    session = fake_session_factory([fake_response_factory(200, payload)])
    fetcher = CatalogFetcher({**CATALOG_SETTINGS, "endpoints": ["/controls"]}, session=session)

    with pytest.raises(FetchFailure):
        fetcher.fetch()


def test_non_json_body_raises_fetch_failure(fake_session_factory, fake_response_factory):
    session = fake_session_factory([fake_response_factory(200, None, raise_json=True)])
    fetcher = CatalogFetcher({**CATALOG_SETTINGS, "endpoints": ["/controls"]}, session=session)

    with pytest.raises(FetchFailure):
        fetcher.fetch()


def test_no_endpoints_configured():
    fetcher = CatalogFetcher({**CATALOG_SETTINGS, "endpoints": []}, session=object())
    with pytest.raises(FetchFailure, match="No catalog endpoints"):
        fetcher.fetch()


def test_absolute_endpoint_urls_are_used_verbatim(fake_session_factory, fake_response_factory):
    session = fake_session_factory([fake_response_factory(200, VALID_PAYLOAD)])
    settings = {**CATALOG_SETTINGS, "endpoints": ["https://mirror.example.org/catalog.json"]}

    CatalogFetcher(settings, session=session).fetch()

    assert session.calls[0]["url"] == "https://mirror.example.org/catalog.json"


def test_missing_optional_fields_are_tolerated(fake_session_factory, fake_response_factory):
    payload = {"controls": [{"id": "XX-1"}]}
    session = fake_session_factory([fake_response_factory(200, payload)])

    result = CatalogFetcher(CATALOG_SETTINGS, session=session).fetch()

    control = result.controls[0]
    assert control.family is None
    assert control.baseline == []
    assert control.control_enhancements == []


@pytest.mark.parametrize(
    "overrides, field, expected",
    [
        ({"baseline": None}, "baseline", []),
        ({"control_enhancements": None}, "control_enhancements", []),
        ({"priority": ""}, "priority", None),
    ],
)
def test_null_fields_in_one_record_keep_remote_catalog(
    overrides, field, expected, fake_session_factory, fake_response_factory
):
    partial = {"id": "AC-1", "family": "Access Control", **overrides}
    payload = {"controls": [VALID_PAYLOAD["controls"][0] | {"id": "AC-2"}, partial]}
    session = fake_session_factory([fake_response_factory(200, payload)])

    result = CatalogFetcher({**CATALOG_SETTINGS, "endpoints": ["/controls"]}, session=session).fetch()

    assert [c.id for c in result.controls] == ["AC-2", "AC-1"]
    assert getattr(result.controls[1], field) == expected


@pytest.mark.parametrize("status_code", [301, 302, 304])
def test_redirect_status_is_an_endpoint_failure(status_code, fake_session_factory, fake_response_factory):
    session = fake_session_factory([fake_response_factory(status_code, VALID_PAYLOAD)])
    fetcher = CatalogFetcher({**CATALOG_SETTINGS, "endpoints": ["/controls"]}, session=session)

    with pytest.raises(FetchFailure) as exc_info:
        fetcher.fetch()

    assert exc_info.value.attempts[0].status_code == status_code
