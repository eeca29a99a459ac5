"""Tests for asset decoding and fetching."""

import base64
import logging

from docpress import config
from docpress.assets import decode_data_url, fetch_image, resolve_assets


def test_decode_data_url(png_bytes):
    encoded = base64.b64encode(png_bytes).decode()
    assert decode_data_url("data:image/png;base64," + encoded) == png_bytes
    assert decode_data_url(encoded) == png_bytes
    assert decode_data_url("data:text/plain,hello%20world") == b"hello world"


def test_decode_invalid_payload_logs_and_returns_none(caplog):
    with caplog.at_level(logging.WARNING):
        assert decode_data_url("data:image/png;base64,***") is None
    assert "Could not decode" in caplog.text


def test_fetch_local_file(tmp_path, png_bytes):
    path = tmp_path / "logo.png"
    path.write_bytes(png_bytes)
    assert fetch_image(str(path)) == png_bytes


def test_fetch_missing_file_returns_none(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert fetch_image(str(tmp_path / "missing.png")) is None
    assert "Could not fetch asset" in caplog.text


def test_fetch_respects_size_limit(tmp_path, monkeypatch):
    path = tmp_path / "big.bin"
    path.write_bytes(b"x" * 64)
    monkeypatch.setattr(config, "MAX_ASSET_BYTES", 16)
    assert fetch_image(str(path)) is None


def test_fetch_empty_source():
    assert fetch_image("") is None


def test_resolve_assets_loads_logo(tmp_path, png_bytes, make_request):
    path = tmp_path / "logo.png"
    path.write_bytes(png_bytes)
    request = make_request(company={"company_name": "Northwind", "logo_url": str(path)})

    resolved = resolve_assets(request)
    assert resolved.company.logo == png_bytes
    assert request.company.logo is None


def test_resolve_assets_without_logo_is_unchanged(tmp_path, make_request):
    request = make_request(company={"company_name": "Northwind", "logo_url": str(tmp_path / "nope.png")})
    assert resolve_assets(request) is request
    plain = make_request(company=None)
    assert resolve_assets(plain) is plain
