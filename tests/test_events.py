import logging

import pytest

from bibpress.adapters.events import SourceNotification, parse_event, parse_record


def _record(bucket: str, key: str) -> dict:
    return {
        "eventName": "ObjectCreated:Put",
        "s3": {"bucket": {"name": bucket}, "object": {"key": key}},
    }


def test_parse_event_extracts_notifications_in_order() -> None:
    event = {"Records": [_record("b1", "one.bib"), _record("b2", "dir/two.bib")]}
    assert parse_event(event) == [
        SourceNotification("b1", "one.bib"),
        SourceNotification("b2", "dir/two.bib"),
    ]


def test_parse_event_decodes_url_encoded_keys() -> None:
    [notification] = parse_event({"Records": [_record("b", "my+refs%282020%29.bib")]})
    assert notification.key == "my refs(2020).bib"
    assert str(notification) == "s3://b/my refs(2020).bib"


@pytest.mark.parametrize("event", [None, {}, {"Records": []}, {"Records": "nope"}])
def test_parse_event_without_records_is_empty(event) -> None:
    assert parse_event(event) == []


def test_parse_event_skips_malformed_records(caplog: pytest.LogCaptureFixture) -> None:
    event = {
        "Records": [
            {"s3": {"bucket": {"name": "b"}}},
            "garbage",
            _record("b", "ok.bib"),
            _record("", "empty-bucket.bib"),
        ]
    }
    with caplog.at_level(logging.WARNING, logger="bibpress"):
        assert parse_event(event) == [SourceNotification("b", "ok.bib")]
    assert len(caplog.records) == 3


def test_parse_record_rejects_non_string_values() -> None:
    assert parse_record({"s3": {"bucket": {"name": 1}, "object": {"key": "k"}}}) is None
