"""
Settings tests

Tests unit name helpers and environment overrides.
"""

from zlang.config import AppSettings


class TestUnitNames:
    """Test unit name resolution helpers"""

    def test_candidates_with_extension(self):
        """Names with the extension also try the bare name"""
        assert AppSettings().unitName_candidates("lib.z") == ["lib.z", "lib"]

    def test_candidates_without_extension(self):
        """Bare names also try the name with the extension"""
        assert AppSettings().unitName_candidates("lib") == ["lib", "lib.z"]

    def test_is_source(self):
        """Only files with the unit extension are units"""
        settings = AppSettings()
        assert settings.unitName_isSource("main.z")
        assert not settings.unitName_isSource("main.js")


class TestEnvironment:
    """Test ZLANG_ environment variables"""

    def test_env_override(self, monkeypatch):
        """Settings are read from prefixed environment variables"""
        monkeypatch.setenv("ZLANG_STRICT_MODE", "false")
        monkeypatch.setenv("ZLANG_MACRO_MAX_PASSES", "7")
        settings = AppSettings()
        assert settings.strict_mode is False
        assert settings.macro_max_passes == 7

    def test_defaults(self, monkeypatch):
        """Defaults match the documented values"""
        for name in ("ZLANG_STRICT_MODE", "ZLANG_WRAP_OUTPUT", "ZLANG_ENTRY_UNIT"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings()
        assert settings.strict_mode is True
        assert settings.wrap_output is True
        assert settings.entry_unit == "main.z"
