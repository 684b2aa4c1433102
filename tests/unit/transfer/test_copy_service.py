"""
Tests for the direct-copy transfer service.
"""

import logging
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from copyplane.core.exceptions import SecretNotFoundError
from copyplane.storage.clients import ClientCache
from copyplane.storage.connection import ClientKind, ConnectionConfig
from copyplane.transfer.copy_service import (
    S3CopyTransferService,
    TransferRequest,
    TransferResult,
    select_transfer_service,
)


@pytest.fixture
def s3_clients():
    """Builder handing out one MagicMock per built client."""
    built = {}

    def build(kind, config):
        client = MagicMock(name=f"{kind.value}-client")
        built[(kind, config)] = client
        return client

    return built, build


@pytest.fixture
def mock_cache(s3_clients):
    _, build = s3_clients
    return ClientCache(builder=build)


@pytest.fixture
def service(mock_cache, vault, static_token, metrics):
    vault.store_secret("source-creds", static_token.to_json())
    return S3CopyTransferService(mock_cache, vault, metrics=metrics)


@pytest.fixture
def request_for(s3_location):
    def _make(source=None, destination=None, **source_props):
        props = {"objectName": "data.csv", "keyName": "source-creds", **source_props}
        return TransferRequest(
            "process-1",
            source or s3_location(bucketName="source-bucket", **props),
            destination,
        )

    return _make


class TestCanHandle:
    def test_s3_to_s3(self, service, request_for, s3_location):
        assert service.can_handle(request_for(destination=s3_location()))

    def test_without_destination(self, service, request_for):
        assert not service.can_handle(request_for())


class TestValidate:
    """Tests for S3CopyTransferService.validate."""

    def test_valid(self, service, request_for, s3_location):
        assert service.validate(request_for(destination=s3_location())).succeeded

    def test_missing_destination(self, service, request_for):
        result = service.validate(request_for())
        assert result.failed
        assert result.violations[-1].path == "destination"

    def test_unresolvable_credentials(self, service, request_for, s3_location):
        result = service.validate(request_for(destination=s3_location(), keyName="unknown"))
        assert result.messages == ["No credential found in vault for given key."]
        assert result.violations[0].value == "unknown"

    def test_malformed_credentials(self, service, vault, request_for, s3_location):
        vault.store_secret("broken", "not json")
        result = service.validate(request_for(destination=s3_location(), keyName="broken"))
        assert result.failed

    def test_collects_every_violation(self, service, s3_location):
        request = TransferRequest(
            "process-1", s3_location(bucketName=None), s3_location(region=None)
        )
        result = service.validate(request)
        assert [v.path for v in result.violations] == ["bucketName", "objectName", "region", "keyName"]


class TestTransfer:
    """Tests for S3CopyTransferService.transfer."""

    def test_copies_object(self, service, request_for, s3_location, s3_clients, static_token):
        built, _ = s3_clients
        destination = s3_location(bucketName="dest-bucket")

        result = service.transfer(request_for(destination=destination))

        assert result == TransferResult.success()
        key = (ClientKind.S3, ConnectionConfig("eu-central-1", credentials=static_token))
        built[key].copy_object.assert_called_once_with(
            CopySource={"Bucket": "source-bucket", "Key": "data.csv"},
            Bucket="dest-bucket",
            Key="data.csv",
        )

    def test_destination_object_name_and_folder(self, service, request_for, s3_location, s3_clients):
        built, _ = s3_clients
        destination = s3_location(bucketName="dest", objectName="renamed.csv", folderName="in")

        service.transfer(request_for(destination=destination))

        (client,) = built.values()
        assert client.copy_object.call_args.kwargs["Key"] == "in/renamed.csv"

    def test_uses_source_endpoint_override(self, service, request_for, s3_location, s3_clients):
        built, _ = s3_clients
        endpoint = "http://localhost:9000"

        service.transfer(
            request_for(destination=s3_location(endpointOverride=endpoint), endpointOverride=endpoint)
        )

        ((kind, config),) = built.keys()
        assert kind is ClientKind.S3
        assert config.endpoint_override == endpoint

    def test_reuses_cached_client(self, service, request_for, s3_location, s3_clients):
        built, _ = s3_clients
        request = request_for(destination=s3_location())
        service.transfer(request)
        service.transfer(request)
        assert len(built) == 1

    def test_client_error_becomes_error_result(
        self, service, request_for, s3_location, caplog, registry
    ):
        failing = MagicMock()
        failing.copy_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "CopyObject"
        )
        service.cache._builder = lambda kind, config: failing

        with caplog.at_level(logging.ERROR, logger="copyplane"):
            result = service.transfer(request_for(destination=s3_location()))

        assert not result.succeeded
        assert result.message.startswith("Exception during S3 copy operation:")
        assert "AccessDenied" in result.message
        assert any("process-1" in r.getMessage() for r in caplog.records)
        assert registry.get_sample_value("copyplane_copy_transfers_total", {"outcome": "error"}) == 1.0

    def test_connection_error_becomes_error_result(self, service, request_for, s3_location):
        failing = MagicMock()
        failing.copy_object.side_effect = EndpointConnectionError(endpoint_url="https://s3")
        service.cache._builder = lambda kind, config: failing

        result = service.transfer(request_for(destination=s3_location()))

        assert not result.succeeded

    def test_success_metric(self, service, request_for, s3_location, registry):
        service.transfer(request_for(destination=s3_location()))
        assert registry.get_sample_value("copyplane_copy_transfers_total", {"outcome": "success"}) == 1.0

    def test_missing_credentials_propagate(self, service, request_for, s3_location, s3_clients):
        built, _ = s3_clients
        with pytest.raises(SecretNotFoundError):
            service.transfer(request_for(destination=s3_location(), keyName="unknown"))
        assert built == {}

    def test_missing_destination(self, service, request_for):
        result = service.transfer(request_for())
        assert not result.succeeded

    def test_prefix_only_source(self, service, s3_location, s3_clients):
        built, _ = s3_clients
        source = s3_location(objectPrefix="logs/", keyName="source-creds")

        result = service.transfer(TransferRequest("process-1", source, s3_location()))

        assert not result.succeeded
        assert "objectName" in result.message
        assert built == {}


class TestSelectTransferService:
    def test_first_capable_service(self, request_for, s3_location):
        refusing = MagicMock(**{"can_handle.return_value": False})
        accepting = MagicMock(**{"can_handle.return_value": True})
        request = request_for(destination=s3_location())

        assert select_transfer_service(request, [refusing, accepting]) is accepting

    def test_fallback(self, service, request_for):
        fallback = MagicMock()
        assert select_transfer_service(request_for(), [service], fallback=fallback) is fallback

    def test_none_without_fallback(self, service, request_for):
        assert select_transfer_service(request_for(), [service]) is None
