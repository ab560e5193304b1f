"""
Tests for the S3 version store adapter.

The boto3 client is replaced with a MagicMock so the adapter's translation
and pagination logic run without credentials or network access.
"""

import pytest
from datetime import datetime, UTC
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from s3rollback.domain.ports.version_store_port import VersionStorePort
from s3rollback.infrastructure.adapters.s3_adapter import S3VersionStore

T = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


def _client_with_pages(pages):
    client = MagicMock()
    paginator = MagicMock()
    paginator.paginate.return_value = iter(pages)
    client.get_paginator.return_value = paginator
    return client, paginator


@pytest.fixture
def make_store():
    stores = []

    def _make(client, **kwargs):
        store = S3VersionStore(client=client, concurrency=4, **kwargs)
        stores.append(store)
        return store

    yield _make
    for store in stores:
        store.close()


class TestS3VersionStore:
    def test_satisfies_port(self, make_store):
        store = make_store(MagicMock())
        assert isinstance(store, VersionStorePort)

    @pytest.mark.asyncio
    async def test_list_versions_drains_all_pages(self, make_store):
        client, paginator = _client_with_pages(
            [
                {"Versions": [{"Key": "a", "VersionId": "v1", "LastModified": T}]},
                {
                    "Versions": [{"Key": "a", "VersionId": "v2", "LastModified": T}],
                    "DeleteMarkers": [
                        {"Key": "a", "VersionId": "dm", "LastModified": T}
                    ],
                },
            ]
        )
        store = make_store(client)

        records = await store.list_versions("bucket", "a")

        client.get_paginator.assert_called_once_with("list_object_versions")
        paginator.paginate.assert_called_once_with(Bucket="bucket", Prefix="a")
        assert [(r.version_id, r.is_delete_marker) for r in records] == [
            ("v1", False),
            ("v2", False),
            ("dm", True),
        ]
        assert records[0].last_modified == T

    @pytest.mark.asyncio
    async def test_list_versions_stops_at_sibling_key(self, make_store):
        served = []

        def pages():
            for page in (
                {"Versions": [{"Key": "logs", "VersionId": "v1", "LastModified": T}]},
                {
                    "Versions": [
                        {"Key": "logs", "VersionId": "v2", "LastModified": T},
                        {"Key": "logs/2024", "VersionId": "x1", "LastModified": T},
                    ]
                },
                {"Versions": [{"Key": "logs/2025", "VersionId": "x2", "LastModified": T}]},
            ):
                served.append(page)
                yield page

        client = MagicMock()
        client.get_paginator.return_value.paginate.return_value = pages()
        store = make_store(client)

        records = await store.list_versions("bucket", "logs")

        assert len(served) == 2
        assert [r.version_id for r in records if r.key == "logs"] == ["v1", "v2"]

    @pytest.mark.asyncio
    async def test_list_versions_empty_page(self, make_store):
        client, _ = _client_with_pages([{}])
        store = make_store(client)

        assert await store.list_versions("bucket", "missing") == []

    @pytest.mark.asyncio
    async def test_delete_version_passes_version_id(self, make_store):
        client = MagicMock()
        store = make_store(client)

        await store.delete_version("bucket", "a/b", "v1")

        client.delete_object.assert_called_once_with(
            Bucket="bucket", Key="a/b", VersionId="v1"
        )

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self, make_store):
        client = MagicMock()
        client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
            "DeleteObject",
        )
        store = make_store(client)

        with pytest.raises(ClientError, match="AccessDenied"):
            await store.delete_version("bucket", "a", "v1")

    def test_builds_client_from_settings(self):
        store = S3VersionStore(
            region="eu-west-1",
            endpoint_url="http://localhost:9000",
            concurrency=8,
        )
        try:
            assert store.region == "eu-west-1"
            assert store._client.meta.region_name == "eu-west-1"
            assert store._client.meta.endpoint_url == "http://localhost:9000"
        finally:
            store.close()

    def test_empty_settings_become_none(self, make_store):
        store = make_store(MagicMock(), region="", profile="", endpoint_url="")
        assert store.region is None
        assert store.profile is None
        assert store.endpoint_url is None
