"""Test configuration loading"""

from pathlib import Path

import pytest

from tunebridge.core.config import Config, load_config
from tunebridge.core.exceptions import ConfigError


def write_config(directory: Path, content: str) -> Path:
    path = directory / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test load_config()"""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Test a missing default config file gives defaults"""
        monkeypatch.chdir(tmp_path)

        config = load_config(environ={})

        assert config == Config()
        assert config.youtube.api_keys == ()
        assert config.cache.capacity == 100
        assert config.cache.prefetch_batch_size == 3
        assert config.youtube.timeout == 15.0
        assert config.logging.directory is None

    def test_missing_explicit_file(self, tmp_path):
        """Test an explicit path that does not exist is an error"""
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml", environ={})

    def test_full_file(self, tmp_path):
        """Test every section is read"""
        path = write_config(tmp_path, """
youtube:
  api_keys: ["file-1", "file-2"]
  timeout: 5
  max_results: 25
cache:
  capacity: 50
  prefetch_batch_size: 2
spotify:
  client_id: "id"
  client_secret: "secret"
lyrics:
  timeout: 3.5
logging:
  directory: "logs"
  level: "debug"
""")
        config = load_config(path, environ={})

        assert config.youtube.api_keys == ("file-1", "file-2")
        assert config.youtube.timeout == 5.0
        assert config.youtube.max_results == 25
        assert config.cache.capacity == 50
        assert config.cache.prefetch_batch_size == 2
        assert config.spotify.is_configured
        assert config.lyrics.timeout == 3.5
        assert config.logging.directory.name == "logs"
        assert config.logging.level == "DEBUG"

    def test_env_keys_appended_without_duplicates(self, tmp_path):
        """Test environment keys follow file keys in order, deduplicated"""
        path = write_config(tmp_path, 'youtube:\n  api_keys: ["k1"]\n')
        environ = {
            "YOUTUBE_API_KEY": "k1",
            "YOUTUBE_API_KEY_2": "k2",
            "YOUTUBE_API_KEY_3": " k3 ",
        }

        config = load_config(path, environ=environ)

        assert config.youtube.api_keys == ("k1", "k2", "k3")

    def test_env_overrides_spotify_credentials(self, tmp_path):
        """Test SPOTIFY_* variables win over the file"""
        path = write_config(tmp_path, "spotify:\n  client_id: file-id\n  client_secret: file-secret\n")

        config = load_config(path, environ={"SPOTIFY_CLIENT_ID": "env-id"})

        assert config.spotify.client_id == "env-id"
        assert config.spotify.client_secret == "file-secret"

    def test_empty_file(self, tmp_path):
        """Test an empty file gives defaults"""
        path = write_config(tmp_path, "")

        assert load_config(path, environ={}) == Config()

    @pytest.mark.parametrize("content", [
        "youtube: [1, 2]\n",
        "cache:\n  capacity: 0\n",
        "cache:\n  capacity: many\n",
        "cache:\n  prefetch_batch_size: true\n",
        "youtube:\n  timeout: -1\n",
        "youtube:\n  max_results: 51\n",
        "youtube:\n  api_keys: [1, 2]\n",
        "logging:\n  level: LOUD\n",
        "- just\n- a list\n",
        "youtube: {api_keys: [unclosed\n",
    ])
    def test_invalid_values(self, tmp_path, content):
        """Test invalid configuration raises ConfigError"""
        path = write_config(tmp_path, content)

        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_single_key_string(self, tmp_path):
        """Test a single api_keys string is accepted"""
        path = write_config(tmp_path, "youtube:\n  api_keys: only-key\n")

        assert load_config(path, environ={}).youtube.api_keys == ("only-key",)
