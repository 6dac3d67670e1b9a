import io
from unittest.mock import patch
from urllib.error import URLError

import pytest

from xmlfield_toolkit.core.interfaces import ImageSourceResolver
from xmlfield_toolkit.core.resolvers import default_image_source_resolver

URLOPEN = "xmlfield_toolkit.core.resolvers.urlopen"


@pytest.fixture
def download_dir(tmp_path):
    directory = tmp_path / "downloads"
    directory.mkdir()
    return directory


def test_requires_existing_directory(tmp_path):
    with pytest.raises(ValueError):
        default_image_source_resolver(tmp_path / "missing")


def test_resolver_is_an_image_source_resolver(download_dir):
    assert isinstance(default_image_source_resolver(download_dir), ImageSourceResolver)


def test_remote_image_is_downloaded(download_dir):
    resolve = default_image_source_resolver(download_dir)
    with patch(URLOPEN, return_value=io.BytesIO(b"image-bytes")) as mock_open:
        path = resolve("http://x.com/img/a.png")

    assert path == str(download_dir / "a.png")
    assert (download_dir / "a.png").read_bytes() == b"image-bytes"
    request = mock_open.call_args[0][0]
    assert request.full_url == "http://x.com/img/a.png"
    assert request.get_header("User-agent") == "xmlfield-toolkit/1.0"


def test_query_string_is_not_part_of_file_name(download_dir):
    resolve = default_image_source_resolver(download_dir)
    with patch(URLOPEN, return_value=io.BytesIO(b"x")):
        path = resolve("HTTPS://x.com/pics/photo%20one.jpg?size=large")
    assert path == str(download_dir / "photo one.jpg")


def test_existing_file_is_reused(download_dir):
    (download_dir / "a.png").write_bytes(b"cached")
    resolve = default_image_source_resolver(download_dir)
    with patch(URLOPEN) as mock_open:
        path = resolve("http://x.com/a.png")
    assert path == str(download_dir / "a.png")
    mock_open.assert_not_called()


@pytest.mark.parametrize("src", ["/local/a.png", "ftp://x.com/a.png", "", None, "http://x.com/"])
def test_unsupported_sources_resolve_to_none(download_dir, src):
    resolve = default_image_source_resolver(download_dir)
    with patch(URLOPEN) as mock_open:
        assert resolve(src) is None
    mock_open.assert_not_called()


def test_download_failure_resolves_to_none(download_dir):
    resolve = default_image_source_resolver(download_dir)
    with patch(URLOPEN, side_effect=URLError("no route")):
        assert resolve("http://x.com/a.png") is None
    assert list(download_dir.iterdir()) == []
