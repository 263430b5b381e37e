"""Pytest configuration and fixtures."""

import json

import pytest
import requests

from nistview.catalog.models import Control


def _control(**fields) -> Control:
    return Control.model_validate(fields)


@pytest.fixture
def sample_controls():
    """Small catalog covering optional fields, baselines and enhancements."""
    return [
        _control(
            id="AC-2",
            title="Account Management",
            family="Access Control",
            priority="P1",
            baseline=["Low", "Moderate", "High"],
            description="Manage system accounts.",
            control_text="Define and document the types of accounts allowed.",
            supplemental_guidance="Examples include individual, shared and guest accounts.",
            control_enhancements=[
                {"id": "AC-2(1)", "title": "Automated System Account Management"},
                {"id": "AC-2(3)", "title": "Disable Accounts"},
            ],
        ),
        _control(
            id="AC-3",
            title="Access Enforcement",
            family="Access Control",
            priority="P1",
            baseline=["Low", "High"],
            description="Enforce approved authorizations for logical access.",
            control_text="Enforce approved authorizations.",
            supplemental_guidance="Relates to audit logging of access decisions.",
            control_enhancements=[],
        ),
        _control(
            id="AU-2",
            title="Event Logging",
            family="Audit and Accountability",
            priority="P2",
            baseline=["Moderate"],
            description="Identify the types of events the system logs.",
            control_text=None,
            supplemental_guidance=None,
            control_enhancements=[{"id": "AU-2(4)", "title": "Privileged Functions"}],
        ),
        _control(
            id="PM-9",
            title="Risk Management Strategy",
            family="Program Management",
            description="Develop a strategy to manage risk.",
        ),
    ]


@pytest.fixture
def fallback_file(tmp_path, sample_controls):
    """Fallback catalog file holding the sample controls."""
    path = tmp_path / "fallback.json"
    path.write_text(
        json.dumps({"controls": [c.model_dump(mode="json") for c in sample_controls]}),
        encoding="utf-8",
    )
    return path


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, raise_json=False):
        self.status_code = status_code
        self._payload = payload
        self._raise_json = raise_json
        self.content = json.dumps(payload).encode("utf-8") if payload is not None else b""

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._raise_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Records requests and replays queued responses (or raises queued exceptions)."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response_factory():
    return FakeResponse
