from pathlib import Path

import pytest

from app.config.settings import Settings


@pytest.fixture()
def local_settings(tmp_path: Path) -> Settings:
    """Filesystem store under a temp dir with in-process conversion."""
    return Settings(
        storage_backend="local",
        local_storage_root=str(tmp_path / "storage"),
        conversion_provider="local",
        pdf_engine="pdfplumber",
    )
