"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

from pdfmeta.config import AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.settings_namespace == "pdf_metadata"
        assert config.pdf_mime_type == "application/pdf"
        assert config.keyword_separator == ","
        assert config.sync_xmp is True
        assert config.stream_wrappers == {
            "public": Path("sites/default/files"),
            "private": Path("private"),
        }

    def test_custom_config(self) -> None:
        """Should create config with custom values."""
        config = AppConfig(
            settings_namespace="custom",
            keyword_separator=";",
            sync_xmp=False,
            stream_wrappers={"public": Path("/srv/files")},
        )

        assert config.settings_namespace == "custom"
        assert config.keyword_separator == ";"
        assert config.sync_xmp is False
        assert config.stream_wrappers == {"public": Path("/srv/files")}

    def test_defaults_not_shared(self) -> None:
        """Should give each config its own stream wrapper mapping."""
        first = AppConfig()
        first.stream_wrappers["temporary"] = Path("/tmp")

        assert "temporary" not in AppConfig().stream_wrappers

    def test_resolve_stream_wrappers_absolute(self) -> None:
        """Should return absolute roots as-is."""
        config = AppConfig(stream_wrappers={"public": Path("/srv/files")})

        assert config.resolve_stream_wrappers(Path("/base")) == {"public": Path("/srv/files")}

    def test_resolve_stream_wrappers_no_base(self) -> None:
        """Should return relative roots when no base_dir is provided."""
        config = AppConfig()

        assert config.resolve_stream_wrappers()["public"] == Path("sites/default/files")

    def test_resolve_stream_wrappers_with_base(self) -> None:
        """Should resolve relative roots against base_dir."""
        config = AppConfig()

        resolved = config.resolve_stream_wrappers(Path("/var/www"))

        assert resolved == {
            "public": Path("/var/www/sites/default/files"),
            "private": Path("/var/www/private"),
        }
