"""Unit tests for application settings configuration."""

from pathlib import Path

from app.config import Settings
from app.infrastructure.dependencies import build_asset_store
from app.infrastructure.storage import CloudinaryAssetStore, LocalAssetStore


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_cloudinary_configured_requires_all_credentials():
    partial = Settings(_env_file=None, cloudinary_cloud_name="demo", cloudinary_api_key="key")
    full = Settings(
        _env_file=None,
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
    )
    assert partial.cloudinary_configured is False
    assert full.cloudinary_configured is True


def test_max_upload_size_bytes():
    assert Settings(_env_file=None, max_upload_size_mb=2).max_upload_size_bytes == 2 * 1024 * 1024


def test_build_asset_store_selects_backend(tmp_path: Path):
    local = build_asset_store(
        Settings(_env_file=None, asset_store_backend="local", upload_dir=str(tmp_path))
    )
    cloud = build_asset_store(
        Settings(
            _env_file=None,
            asset_store_backend="cloudinary",
            cloudinary_cloud_name="demo",
            cloudinary_api_key="key",
            cloudinary_api_secret="secret",
        )
    )
    assert isinstance(local, LocalAssetStore)
    assert isinstance(cloud, CloudinaryAssetStore)
