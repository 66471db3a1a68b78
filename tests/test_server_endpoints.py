"""Tests for the speed test HTTP endpoints."""

import os

import pytest

from server.config import TransferSettings, get_transfer_settings
from server.exceptions import ChunkGenerationError, ConfigurationError
from server.main import app
from server.services.chunk_generator import ChunkGenerator

NO_CACHE = "no-store, no-cache, must-revalidate, max-age=0"


class TestDownloadEndpoint:
    """GET /download"""

    def test_one_mebibyte_download(self, client):
        response = client.get('/download?size=1048576')

        assert response.status_code == 200
        assert response.headers['content-length'] == '1048576'
        assert response.headers['content-type'] == 'application/octet-stream'
        assert len(response.content) == 1048576

    def test_download_headers(self, client):
        response = client.get('/download?size=2048')

        assert response.headers['cache-control'] == NO_CACHE
        assert response.headers['pragma'] == 'no-cache'
        assert response.headers['access-control-allow-origin'] == '*'
        assert 'GET' in response.headers['access-control-allow-methods']

    def test_non_numeric_size_uses_default(self, client):
        response = client.get('/download?size=abc')

        assert response.status_code == 200
        assert response.headers['content-length'] == '10485760'
        assert len(response.content) == 10485760

    def test_missing_size_uses_default(self, small_client, small_settings):
        response = small_client.get('/download')

        assert response.status_code == 200
        assert len(response.content) == small_settings.default_size

    def test_cache_buster_parameter_is_ignored(self, small_client):
        response = small_client.get('/download?size=4096&r=0.123')

        assert len(response.content) == 4096

    @pytest.mark.parametrize("size", ["1024", "2097152"])
    def test_bounds_are_accepted(self, small_client, size):
        response = small_client.get(f'/download?size={size}')

        assert response.status_code == 200
        assert response.headers['content-length'] == size
        assert len(response.content) == int(size)

    @pytest.mark.parametrize("size", ["1023", "2097153", "-1", "1.5", ""])
    def test_out_of_bounds_falls_back(self, small_client, small_settings, size):
        response = small_client.get(f'/download?size={size}')

        assert response.status_code == 200
        assert int(response.headers['content-length']) == small_settings.default_size
        assert len(response.content) == small_settings.default_size

    def test_repeated_downloads_differ(self, small_client):
        first = small_client.get('/download?size=65536').content
        second = small_client.get('/download?size=65536').content

        assert len(first) == len(second) == 65536
        assert first != second

    def test_strict_mode_rejects_invalid_size(self, make_client):
        client = make_client(settings=TransferSettings(strict_size=True).validate())

        response = client.get('/download?size=abc')

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_SIZE'

    def test_generation_failure_aborts_response(self, make_client, small_settings, failing_source_factory):
        client = make_client(
            settings=small_settings,
            generator=ChunkGenerator(random_source=failing_source_factory(1)),
        )

        with pytest.raises(ChunkGenerationError):
            client.get('/download?size=65536')

    def test_chunks_come_from_injected_generator(self, make_client, small_settings, counting_source):
        client = make_client(settings=small_settings, generator=ChunkGenerator(counting_source))

        response = client.get('/download?size=40000')

        assert len(response.content) == 40000
        assert counting_source.calls == 3
        assert counting_source.bytes_generated == 40000

    def test_preflight(self, client):
        response = client.options('/download')

        assert response.status_code == 204
        assert response.content == b''
        assert response.headers['access-control-allow-origin'] == '*'
        assert response.headers['access-control-allow-methods'] == 'GET, OPTIONS'
        assert response.headers['access-control-allow-headers'] == 'Content-Type, Range'
        assert response.headers['access-control-max-age'] == '86400'


class TestUploadEndpoint:
    """POST /upload"""

    def test_five_mebibyte_upload(self, client):
        response = client.post(
            '/upload',
            content=os.urandom(5242880),
            headers={'Content-Type': 'application/octet-stream'}
        )

        assert response.status_code == 200
        assert response.json() == {'status': 'ok', 'bytes_received': 5242880}
        assert response.headers['cache-control'] == NO_CACHE

    def test_upload_without_content_length(self, small_client):
        def body():
            yield b'a' * 1000
            yield b'b' * 1000

        response = small_client.post('/upload', content=body())

        assert response.status_code == 200
        assert response.json()['bytes_received'] == 2000

    def test_empty_upload(self, client):
        response = client.post('/upload')

        assert response.status_code == 200
        assert response.json()['bytes_received'] == 0

    def test_oversized_upload_rejected(self, small_client, small_settings):
        response = small_client.post('/upload', content=b'x' * (small_settings.max_upload + 1))

        assert response.status_code == 413
        assert response.json()['code'] == 'UPLOAD_TOO_LARGE'

    def test_preflight(self, client):
        response = client.options('/upload')

        assert response.status_code == 204
        assert response.headers['access-control-allow-methods'] == 'POST, OPTIONS'


class TestPingEndpoint:
    """GET /ping"""

    def test_ping_returns_pong(self, client):
        response = client.get('/ping')

        assert response.status_code == 200
        assert response.text == 'pong'
        assert response.headers['cache-control'] == NO_CACHE
        assert response.headers['pragma'] == 'no-cache'

    def test_preflight(self, client):
        assert client.options('/ping').status_code == 204


class TestServiceEndpoints:
    """Root, health and readiness endpoints."""

    def test_root_endpoint(self, client):
        response = client.get('/')

        assert response.status_code == 200
        assert response.json()['status'] == 'running'

    def test_health(self, client):
        assert client.get('/health').json() == {'status': 'healthy', 'service': 'speedtest'}

    def test_ready(self, client):
        response = client.get('/ready')

        assert response.status_code == 200
        assert response.json() == {'ready': True, 'random_source': 'ok'}

    def test_not_ready_when_random_source_fails(self, make_client, failing_source_factory):
        client = make_client(generator=ChunkGenerator(random_source=failing_source_factory(0)))

        response = client.get('/ready')

        assert response.status_code == 503
        assert response.json()['ready'] is False

    def test_request_id_header(self, client):
        response = client.get('/ping')

        assert len(response.headers['x-request-id']) == 36

    def test_configuration_error_is_reported(self, make_client):
        def broken_settings():
            raise ConfigurationError("min > max")

        app.dependency_overrides[get_transfer_settings] = broken_settings
        client = make_client()

        response = client.get('/download?size=2048')

        assert response.status_code == 500
        assert response.json()['code'] == 'CONFIGURATION_ERROR'


def test_openapi_documents_error_responses(client):
    response = client.get("/openapi.json")

    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "413" in paths["/upload"]["post"]["responses"]
    assert "400" in paths["/download"]["get"]["responses"]
