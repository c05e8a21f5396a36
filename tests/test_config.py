"""Tests for configuration management."""

import pytest
import yaml

from reviewweb.validation.config import DEFAULT_BASE_URL, Config, ConfigError, ReviewWebConfig


class TestConfig:
    """Tests for Config class."""

    @pytest.fixture
    def isolated(self, tmp_path, monkeypatch):
        """Point global and local config lookups at an empty temp directory."""
        monkeypatch.setattr(Config, "GLOBAL_CONFIG_DIR", tmp_path / "home" / ".reviewweb")
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_deep_merge(self):
        """Test deep merging of dictionaries."""
        config = Config()

        base = {
            "a": 1,
            "b": {"c": 2, "d": 3},
            "e": [1, 2, 3],
        }

        override = {
            "b": {"c": 10, "f": 5},
            "g": "new",
        }

        result = config._deep_merge(base, override)

        assert result["a"] == 1
        assert result["b"]["c"] == 10
        assert result["b"]["d"] == 3
        assert result["b"]["f"] == 5
        assert result["e"] == [1, 2, 3]
        assert result["g"] == "new"

    def test_get_merged_config(self):
        """Local overrides global, environment overrides both."""
        config = Config(
            global_config={"api_key": "global-key", "api": {"base_url": "https://global.test", "timeout": 5}},
            local_config={"api": {"base_url": "https://local.test"}},
            env_config={"api_key": "env-key"},
        )
        merged = config.get_merged_config()

        assert merged["api"]["base_url"] == "https://local.test"
        assert merged["api"]["timeout"] == 5
        assert merged["api_key"] == "env-key"

    def test_defaults(self):
        """An empty config still validates."""
        config = Config()

        assert config.api_key is None
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout is None
        assert config.merged.server.transport == "stdio"

    def test_base_url_trailing_slash(self):
        """Test the base URL is normalized."""
        config = Config(local_config={"api": {"base_url": "https://api.test/v1/"}})

        assert config.base_url == "https://api.test/v1"

    def test_invalid_config(self):
        """Test invalid values raise ConfigError."""
        config = Config(env_config={"logging": {"level": "LOUD"}})

        with pytest.raises(ConfigError):
            _ = config.merged

    def test_set_dotted_key(self):
        """Test per-process overrides reset the cached merge."""
        config = Config()
        assert config.merged.logging.level == "WARNING"

        config.set("logging.level", "DEBUG")

        assert config.merged.logging.level == "DEBUG"

    def test_set_api_key(self):
        """Test storing the key in either file layer."""
        config = Config(global_config={}, local_config={})

        config.set_api_key("local-key", global_=False)
        assert config._local_config["api_key"] == "local-key"

        config.set_api_key("global-key", global_=True)
        assert config._global_config["api_key"] == "global-key"

        assert config.api_key == "local-key"

    def test_save_global(self, isolated):
        """Test saving writes only the file-backed layer."""
        config = Config(env_config={"api_key": "env-key"})
        config.set_api_key("saved-key", global_=True)

        path = config.save(global_=True)

        assert path == Config.GLOBAL_CONFIG_DIR / "config.yaml"
        assert yaml.safe_load(path.read_text()) == {"api_key": "saved-key"}

    def test_load_reads_files_and_environ(self, isolated):
        """Test load() layers the global file, local file and environment."""
        Config.GLOBAL_CONFIG_DIR.mkdir(parents=True)
        (Config.GLOBAL_CONFIG_DIR / "config.yaml").write_text("api_key: global-key\napi:\n  timeout: 10\n")
        local_dir = isolated / ".reviewweb"
        local_dir.mkdir()
        (local_dir / "config.yaml").write_text("api:\n  base_url: https://local.test/v1\n")

        config = Config.load(environ={"REVIEWWEBSITE_TIMEOUT": "30"})

        assert config.api_key == "global-key"
        assert config.base_url == "https://local.test/v1"
        assert config.timeout == 30.0

    def test_load_invalid_yaml(self, isolated):
        """Test unreadable YAML raises ConfigError."""
        local_dir = isolated / ".reviewweb"
        local_dir.mkdir()
        (local_dir / "config.yaml").write_text("api: [unclosed\n")

        with pytest.raises(ConfigError):
            Config.load(environ={})


class TestFromEnviron:
    """Tests for environment variable translation."""

    def test_api_key_variable(self):
        """Test REVIEWWEBSITE_API_KEY wins over the access-key alias."""
        env = Config.from_environ(
            {"REVIEWWEBSITE_API_KEY": "primary", "REVIEWWEBSITE_ACCESS_KEY": "secondary"}
        )

        assert env["api_key"] == "primary"

    def test_access_key_fallback(self):
        """Test the access-key alias is used when the primary is unset."""
        env = Config.from_environ({"REVIEWWEBSITE_API_KEY": "", "REVIEWWEBSITE_ACCESS_KEY": "secondary"})

        assert env["api_key"] == "secondary"

    def test_other_variables(self):
        """Test base URL, timeout and log level variables."""
        env = Config.from_environ(
            {
                "REVIEWWEBSITE_BASE_URL": "https://staging.test/api/v1",
                "REVIEWWEBSITE_TIMEOUT": "12.5",
                "REVIEWWEBSITE_LOG_LEVEL": "debug",
            }
        )

        assert env["api"] == {"base_url": "https://staging.test/api/v1", "timeout": "12.5"}
        assert env["logging"] == {"level": "DEBUG"}

    def test_empty_environ(self):
        """Test nothing is set when no variable is present."""
        assert Config.from_environ({}) == {}


class TestReviewWebConfig:
    """Tests for ReviewWebConfig schema."""

    def test_default_config(self):
        """Test creating default configuration."""
        config = ReviewWebConfig()

        assert config.api_key is None
        assert config.api.base_url == DEFAULT_BASE_URL
        assert config.logging.level == "WARNING"
        assert config.server.port == 8080
