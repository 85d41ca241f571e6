from __future__ import annotations

import logging

import httpx
import pytest
from pydantic import ValidationError

from mpns import responses
from mpns.responses import (
    BAD_REQUEST,
    CATALOG,
    EXPIRED,
    INACTIVATE_STATE,
    OVER_LIMIT,
    QUEUE_FULL,
    RECEIVED,
    SERVICE_UNAVAILABLE,
    SUPPRESSED,
    UNDEFINED,
    classify,
    classify_response,
    outcome_by_name,
)

REAL_ENTRIES = [outcome for outcome in CATALOG if outcome is not UNDEFINED]


@pytest.mark.parametrize("outcome", REAL_ENTRIES, ids=lambda o: o.name)
def test_exact_tuple_classifies_as_its_entry(outcome):
    result = classify(
        outcome.status_code,
        outcome.notification_status,
        outcome.device_connection_status,
        outcome.subscription_status,
    )

    assert result is outcome


def test_received_is_successful_without_retry():
    outcome = classify(200, "Received", "Connected", "Active")

    assert outcome is RECEIVED
    assert outcome.success is True
    assert outcome.should_retry is False


@pytest.mark.parametrize("device_status", ["Connected", "Inactive", "whatever", None])
def test_over_limit_ignores_device_status(device_status):
    outcome = classify(406, "Dropped", device_status, "Active")

    assert outcome is OVER_LIMIT
    assert outcome.should_retry is True


@pytest.mark.parametrize("device_status", ["Connected", "TempDisconnected", None])
def test_wildcard_device_status_on_200_entries(device_status):
    assert classify(200, "QueueFull", device_status, "Active") is QUEUE_FULL
    assert classify(200, "Suppressed", device_status, "Active") is SUPPRESSED


@pytest.mark.parametrize(
    "headers",
    [
        (None, None, None),
        ("Dropped", "Connected", "Active"),
        ("", "", ""),
    ],
)
def test_fully_wildcarded_entries_match_any_headers(headers):
    assert classify(400, *headers) is BAD_REQUEST
    assert classify(503, *headers) is SERVICE_UNAVAILABLE


STATUS_FIELDS = ("notification_status", "device_connection_status", "subscription_status")

WILDCARD_CASES = [
    pytest.param(outcome, index, value, id=f"{outcome.name}-{field}-{value!r}")
    for outcome in REAL_ENTRIES
    for index, field in enumerate(STATUS_FIELDS)
    if getattr(outcome, field) is None
    for value in (None, "", "Unlisted")
]


@pytest.mark.parametrize("outcome, index, value", WILDCARD_CASES)
def test_wildcard_field_matches_any_value(outcome, index, value):
    headers = [getattr(outcome, field) for field in STATUS_FIELDS]
    headers[index] = value

    assert classify(outcome.status_code, *headers) is outcome


def test_inactive_state_ignores_subscription_status():
    assert classify(412, "Dropped", "Inactive", None) is INACTIVATE_STATE
    assert classify(412, "Dropped", "Inactive", "Expired") is INACTIVATE_STATE


def test_expired_requires_expired_subscription():
    assert classify(404, None, None, "Expired") is EXPIRED
    assert classify(404, "Dropped", "Connected", "Expired") is EXPIRED
    assert classify(404, None, None, None, on_unmatched=lambda *args: None) is UNDEFINED


def test_unknown_status_code_is_undefined():
    outcome = classify(999, "Received", "Connected", "Active", on_unmatched=lambda *args: None)

    assert outcome is UNDEFINED
    assert outcome.success is False
    assert outcome.should_retry is True


def test_absent_header_does_not_match_specific_expectation():
    outcome = classify(200, "Received", None, "Active", on_unmatched=lambda *args: None)

    assert outcome is UNDEFINED


def test_header_comparison_is_case_sensitive():
    outcome = classify(200, "received", "connected", "active", on_unmatched=lambda *args: None)

    assert outcome is UNDEFINED


def test_fallback_entry_is_never_matched_by_status_zero():
    seen = []

    outcome = classify(0, None, None, None, on_unmatched=lambda *args: seen.append(args))

    assert outcome is UNDEFINED
    assert seen == [(0, None, None, None)]


def test_unmatched_observer_receives_the_combination():
    seen = []

    classify(200, "Received", "Elsewhere", "Active", on_unmatched=lambda *args: seen.append(args))

    assert seen == [(200, "Received", "Elsewhere", "Active")]


def test_unmatched_is_logged_by_default(caplog):
    with caplog.at_level(logging.ERROR, logger=responses.__name__):
        classify(302, "Received", None, None)

    assert "Unmatched response" in caplog.text
    assert "Status code: [302]" in caplog.text


def test_matched_response_is_not_reported():
    seen = []

    classify(200, "Received", "Connected", "Active", on_unmatched=lambda *args: seen.append(args))

    assert seen == []


def test_classify_response_reads_vendor_headers():
    resp = httpx.Response(
        200,
        headers={
            "X-NotificationStatus": "Received",
            "X-DeviceConnectionStatus": "TempDisconnected",
            "X-SubscriptionStatus": "Active",
        },
    )

    assert classify_response(resp) is outcome_by_name("QUEUED")


def test_classify_response_uses_first_value_of_repeated_header():
    resp = httpx.Response(
        200,
        headers=[
            ("X-NotificationStatus", "Received"),
            ("X-NotificationStatus", "Dropped"),
            ("X-DeviceConnectionStatus", "Connected"),
            ("X-SubscriptionStatus", "Active"),
        ],
    )

    assert classify_response(resp) is RECEIVED


def test_classify_response_without_headers():
    resp = httpx.Response(401)

    assert classify_response(resp).name == "UNAUTHORIZED"


def test_catalog_has_single_fallback():
    fallbacks = [outcome for outcome in CATALOG if outcome.status_code == 0]

    assert fallbacks == [UNDEFINED]
    assert CATALOG[-1] is UNDEFINED


def test_outcome_by_name_unknown():
    with pytest.raises(KeyError):
        outcome_by_name("NOT_A_RESPONSE")


def test_outcomes_are_immutable():
    with pytest.raises(ValidationError):
        RECEIVED.success = False
