"""Unit tests for wire schemas and GatewayResult."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pgs3.core.enums import GatewayStatus
from pgs3.core.exceptions import BucketNotFoundError, StoreConnectionError
from pgs3.features.objects.schemas import (
    BucketEntry,
    GatewayResult,
    ObjectEntry,
    PutObjectResponse,
    decode_object_listing,
    encode_bucket_listing,
    encode_object_listing,
    format_timestamp,
)


@pytest.mark.unit
class TestFormatTimestamp:
    def test_millisecond_precision(self):
        value = datetime(2024, 5, 1, 12, 30, 5, 123456, tzinfo=UTC)

        assert format_timestamp(value) == "2024-05-01T12:30:05.123Z"

    def test_truncates_instead_of_rounding(self):
        value = datetime(2024, 5, 1, 23, 59, 59, 999999, tzinfo=UTC)

        assert format_timestamp(value) == "2024-05-01T23:59:59.999Z"

    def test_naive_values_are_utc(self):
        assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"

    def test_converts_other_zones_to_utc(self):
        value = datetime(2024, 1, 2, 3, 0, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(value) == "2024-01-02T01:00:00.000Z"


@pytest.mark.unit
class TestListingEncoding:
    def test_bucket_listing(self):
        entries = [BucketEntry(name="public", creation_date=datetime(2023, 1, 1, tzinfo=UTC))]

        assert json.loads(encode_bucket_listing(entries)) == [
            {"Name": "public", "CreationDate": "2023-01-01T00:00:00.000Z"}
        ]

    def test_empty_object_listing(self):
        assert encode_object_listing([]) == b"[]"

    def test_object_listing_escapes_keys(self):
        entry = ObjectEntry(
            key='dir/"quoted"\n\\name',
            size=3,
            last_modified=datetime(2024, 1, 1, tzinfo=UTC),
        )

        (decoded,) = json.loads(encode_object_listing([entry]))

        assert decoded["Key"] == 'dir/"quoted"\n\\name'

    def test_decode_object_listing(self):
        payload = (
            b'[{"Key":"a/1","Size":5,"LastModified":"2024-01-01T00:00:01.000Z"},'
            b'{"Key":"a/2","Size":0,"LastModified":"2024-01-01T00:00:02.500Z"}]'
        )

        entries = decode_object_listing(payload)

        assert [e.key for e in entries] == ["a/1", "a/2"]
        assert entries[0].size == 5
        assert entries[1].last_modified == datetime(2024, 1, 1, 0, 0, 2, 500000, tzinfo=UTC)

    def test_decode_reencodes_identically(self):
        payload = b'[{"Key":"k","Size":1,"LastModified":"2024-01-01T00:00:01.000Z"}]'

        assert encode_object_listing(decode_object_listing(payload)) == payload

    def test_decode_rejects_malformed_payload(self):
        with pytest.raises(ValidationError):
            decode_object_listing(b'[{"Key": "k"}]')

    def test_put_response_aliases(self):
        response = PutObjectResponse(
            etag="0000abcd",
            last_modified=datetime(2024, 2, 3, 4, 5, 6, 7000, tzinfo=UTC),
        )

        assert json.loads(response.model_dump_json(by_alias=True)) == {
            "ETag": "0000abcd",
            "LastModified": "2024-02-03T04:05:06.007Z",
        }


@pytest.mark.unit
class TestGatewayResult:
    def test_success_defaults_to_json(self):
        result = GatewayResult.success(b"{}")

        assert result.ok
        assert result.content_type == "application/json"
        assert result.json() == {}

    def test_from_error_keeps_status_and_message(self):
        result = GatewayResult.from_error(StoreConnectionError("refused"))

        assert not result.ok
        assert result.status is GatewayStatus.CONNECTION
        assert result.error_message == "refused"
        assert result.data is None
        assert result.json() is None

    @pytest.mark.parametrize(
        ("status", "http_status"),
        [
            (GatewayStatus.SUCCESS, 200),
            (GatewayStatus.NOT_FOUND, 404),
            (GatewayStatus.PERMISSION_DENIED, 403),
            (GatewayStatus.INVALID_INPUT, 500),
            (GatewayStatus.EXECUTION, 500),
            (GatewayStatus.CONNECTION, 500),
            (GatewayStatus.OUT_OF_MEMORY, 500),
        ],
    )
    def test_http_status_mapping(self, status, http_status):
        assert status.http_status == http_status

    def test_bucket_error_defaults(self):
        exc = BucketNotFoundError(extra={"bucket": "x"})

        assert exc.detail == "Bucket not found"
        assert exc.http_status == 404
