import pytest
from pydantic import ValidationError

from postmigrate.config import DEFAULT_LEGACY_HOST_PATTERN, MigrationConfig


def test_migration_config_defaults() -> None:
    config = MigrationConfig()
    assert config.base_path == "/"
    assert config.private_prefix == "/private/"
    assert config.legacy_host_pattern == DEFAULT_LEGACY_HOST_PATTERN
    assert config.unescape_body is True


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("/", "/"), ("blog", "/blog/"), ("/blog", "/blog/"), ("blog/", "/blog/"), ("/a/b/", "/a/b/")],
)
def test_base_path_is_wrapped_in_slashes(raw: str, expected: str) -> None:
    assert MigrationConfig(base_path=raw).base_path == expected


def test_legacy_pattern_must_compile() -> None:
    with pytest.raises(ValidationError):
        MigrationConfig(legacy_host_pattern="https?://[")


def test_download_timeout_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        MigrationConfig(download_timeout=0)


def test_legacy_host_re_matches_posterous_hosts() -> None:
    pattern = MigrationConfig().legacy_host_re
    assert pattern.search("http://getfile3.posterous.com/getfile/files/foo.jpg")
    assert pattern.search("https://posterous.com/x")
    assert not pattern.search("http://example.com/posterous.com/x")
