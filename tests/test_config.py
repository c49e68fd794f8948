import pytest

from hub_analytics.config import DEFAULT_CUBE_BASE_URL, Config


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch: "pytest.MonkeyPatch") -> "None":
        monkeypatch.delenv("CUBE_BASE_URL", raising=False)
        monkeypatch.delenv("CUBE_AUTH_TOKEN", raising=False)
        monkeypatch.delenv("CUBE_TIMEOUT", raising=False)
        config = Config.from_env()
        assert config.cube_base_url == DEFAULT_CUBE_BASE_URL
        assert config.cube_auth_token == ""
        assert config.cube_timeout == 10.0

    def test_reads_env_vars(self, monkeypatch: "pytest.MonkeyPatch") -> "None":
        monkeypatch.setenv("CUBE_BASE_URL", "https://cube.example.com")
        monkeypatch.setenv("CUBE_AUTH_TOKEN", "token-123")
        monkeypatch.setenv("CUBE_TIMEOUT", "2.5")
        config = Config.from_env()
        assert config.cube_base_url == "https://cube.example.com"
        assert config.cube_auth_token == "token-123"
        assert config.cube_timeout == 2.5

    @pytest.mark.parametrize("url", ["cube:4000", "ftp://cube", "http://"])
    def test_rejects_invalid_base_url(
        self, monkeypatch: "pytest.MonkeyPatch", url: "str"
    ) -> "None":
        monkeypatch.setenv("CUBE_BASE_URL", url)
        with pytest.raises(ValueError):
            Config.from_env()


class TestCubeEnabled:
    def test_enabled_when_token_set(self) -> "None":
        config = Config(cube_auth_token="token")
        assert config.cube_enabled is True

    def test_disabled_when_token_empty(self) -> "None":
        config = Config(cube_auth_token="")
        assert config.cube_enabled is False
