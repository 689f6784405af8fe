"""Unit tests for the input normalizer."""

import base64
from unittest.mock import Mock, patch

import pytest
import requests

from app.cartoonify.errors import InvalidInput, MissingInput, UnsupportedMediaType
from app.cartoonify.images import (
    ImageArtifact,
    canonical_mime_type,
    fetch_remote_image,
    normalize_input,
    parse_data_url,
    parse_raw_base64,
)

from .conftest import PNG_1X1, PNG_1X1_B64, PNG_DATA_URL


def _response(status=200, content=PNG_1X1, content_type="image/png"):
    response = Mock()
    response.status_code = status
    response.content = content
    response.headers = {"Content-Type": content_type} if content_type is not None else {}
    return response


@pytest.mark.parametrize(
    "mime,expected_mime,extension",
    [
        ("image/png", "image/png", "png"),
        ("image/jpeg", "image/jpeg", "jpeg"),
        ("image/jpg", "image/jpeg", "jpeg"),
        ("image/webp", "image/webp", "webp"),
    ],
)
def test_data_url_decodes_byte_identical(mime, expected_mime, extension):
    payload = b"\x00\x01binary\xffimage"
    data_url = f"data:{mime};base64,{base64.b64encode(payload).decode()}"

    artifact = parse_data_url(data_url)

    assert artifact.data == payload
    assert artifact.mime_type == expected_mime
    assert artifact.file_extension == extension
    assert artifact.filename == f"source.{extension}"


def test_data_url_round_trip():
    artifact = parse_data_url(PNG_DATA_URL)
    assert artifact.to_data_url() == PNG_DATA_URL


@pytest.mark.parametrize(
    "value",
    [
        "not-a-data-url",
        "data:image/png,abc",
        "data:image/png;base64,",
        "data:image/png;base64,not base64!",
        "",
    ],
)
def test_malformed_data_url_is_invalid_input(value):
    with pytest.raises(InvalidInput):
        parse_data_url(value)


def test_data_url_with_bad_padding_is_invalid_input():
    with pytest.raises(InvalidInput):
        parse_data_url("data:image/png;base64,abc")


def test_data_url_with_unsupported_type():
    with pytest.raises(UnsupportedMediaType):
        parse_data_url(f"data:image/gif;base64,{PNG_1X1_B64}")


def test_canonical_mime_type():
    assert canonical_mime_type("IMAGE/PNG; charset=binary") == "image/png"
    assert canonical_mime_type("image/jpg") == "image/jpeg"
    assert canonical_mime_type("image/gif") is None
    assert canonical_mime_type(None) is None


def test_raw_base64_requires_explicit_mime():
    with pytest.raises(InvalidInput):
        parse_raw_base64(PNG_1X1_B64, None)


def test_raw_base64_rejects_unsupported_mime():
    with pytest.raises(UnsupportedMediaType):
        parse_raw_base64(PNG_1X1_B64, "image/tiff")


def test_raw_base64_rejects_malformed_payload():
    with pytest.raises(InvalidInput):
        parse_raw_base64("%%%", "image/png")


@patch("app.cartoonify.images.requests.get")
def test_fetch_remote_image(mock_get):
    mock_get.return_value = _response()

    artifact = fetch_remote_image("https://example.com/photo")

    assert artifact == ImageArtifact(PNG_1X1, "image/png")
    mock_get.assert_called_once_with("https://example.com/photo", timeout=None)


@patch("app.cartoonify.images.requests.get")
def test_fetch_remote_image_infers_type_from_extension(mock_get):
    mock_get.return_value = _response(content_type="application/octet-stream")
    artifact = fetch_remote_image("https://example.com/images/photo.JPG?x=1")
    assert artifact.mime_type == "image/jpeg"


@patch("app.cartoonify.images.requests.get")
def test_fetch_remote_image_missing_type_and_extension(mock_get):
    mock_get.return_value = _response(content_type=None)
    with pytest.raises(UnsupportedMediaType):
        fetch_remote_image("https://example.com/photo")


@patch("app.cartoonify.images.requests.get")
def test_fetch_remote_image_rejects_declared_type(mock_get):
    mock_get.return_value = _response(content_type="text/html")
    with pytest.raises(UnsupportedMediaType):
        fetch_remote_image("https://example.com/photo.png")


@patch("app.cartoonify.images.requests.get")
def test_fetch_remote_image_non_2xx(mock_get):
    mock_get.return_value = _response(status=404)
    with pytest.raises(InvalidInput, match="HTTP 404"):
        fetch_remote_image("https://example.com/photo.png")


@patch("app.cartoonify.images.requests.get")
def test_fetch_remote_image_network_failure(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError("boom")
    with pytest.raises(InvalidInput):
        fetch_remote_image("https://example.com/photo.png")


def test_fetch_remote_image_rejects_other_schemes():
    with pytest.raises(InvalidInput):
        fetch_remote_image("file:///etc/passwd")


def test_normalize_requires_some_input():
    with pytest.raises(MissingInput):
        normalize_input()


def test_normalize_prefers_data_url_over_other_inputs():
    fetch = Mock()
    artifact = normalize_input(
        image_base64=PNG_DATA_URL,
        source_url="https://example.com/photo.png",
        image_data="ignored",
        mime_type="image/webp",
        fetch=fetch,
    )
    assert artifact.mime_type == "image/png"
    fetch.assert_not_called()


def test_normalize_prefers_remote_url_over_raw():
    fetch = Mock(return_value=ImageArtifact(PNG_1X1, "image/png"))
    normalize_input(source_url="https://example.com/a.png", image_data="ignored", fetch=fetch)
    fetch.assert_called_once_with("https://example.com/a.png")


def test_invalid_data_url_does_not_fall_back():
    fetch = Mock()
    with pytest.raises(InvalidInput):
        normalize_input(image_base64="not-a-data-url", source_url="https://example.com/a.png", fetch=fetch)
    fetch.assert_not_called()


@patch("app.cartoonify.images.requests.get")
def test_all_input_modes_produce_identical_artifacts(mock_get):
    mock_get.return_value = _response()

    from_data_url = normalize_input(image_base64=PNG_DATA_URL)
    from_remote = normalize_input(source_url="https://example.com/photo.png")
    from_raw = normalize_input(image_data=PNG_1X1_B64, mime_type="image/png")

    assert from_data_url == from_remote == from_raw
