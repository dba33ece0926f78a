import pytest

from yamltrimmer.config import CacheSettings, PipelineSettings, get_settings, set_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path):
    """Run every test with fresh settings and a throwaway default cache directory."""
    original_settings = get_settings()

    test_settings = PipelineSettings(cache=CacheSettings(default_dir=tmp_path / "default-cache"))
    set_settings(test_settings)

    yield test_settings

    set_settings(original_settings)
