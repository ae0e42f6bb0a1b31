"""Tests for environment configuration interface."""

from common.env import Environment, env


class TestEnvironment:
    """Tests for Environment class."""

    def test_ostree_bin_default(self, monkeypatch):
        """Test ostree_bin returns default value."""
        monkeypatch.delenv("OSTREE_BIN", raising=False)
        assert Environment.ostree_bin() == "ostree"

    def test_ostree_bin_from_env(self, monkeypatch):
        """Test ostree_bin reads from environment."""
        monkeypatch.setenv("OSTREE_BIN", "/opt/ostree/bin/ostree")
        assert Environment.ostree_bin() == "/opt/ostree/bin/ostree"

    def test_ostree_timeout_default(self, monkeypatch):
        """Test ostree_timeout returns default value."""
        monkeypatch.delenv("OSTREE_TIMEOUT", raising=False)
        assert Environment.ostree_timeout() == 10.0

    def test_ostree_timeout_from_env(self, monkeypatch):
        """Test ostree_timeout reads from environment."""
        monkeypatch.setenv("OSTREE_TIMEOUT", "2.5")
        assert Environment.ostree_timeout() == 2.5

    def test_store_type_default(self, monkeypatch):
        """Test store_type returns default value."""
        monkeypatch.delenv("OSTREE_STORE", raising=False)
        assert Environment.store_type() == "cli"

    def test_store_type_from_env(self, monkeypatch):
        """Test store_type reads from environment."""
        monkeypatch.setenv("OSTREE_STORE", "memory")
        assert Environment.store_type() == "memory"

    def test_refresh_interval_default(self, monkeypatch):
        """Test refresh_interval is disabled by default."""
        monkeypatch.delenv("OSTREE_TUI_REFRESH_INTERVAL", raising=False)
        assert Environment.refresh_interval() == 0

    def test_refresh_interval_from_env(self, monkeypatch):
        """Test refresh_interval reads from environment."""
        monkeypatch.setenv("OSTREE_TUI_REFRESH_INTERVAL", "30")
        assert Environment.refresh_interval() == 30.0

    def test_log_file_unset(self, monkeypatch):
        """Test log_file returns None when unset or empty."""
        monkeypatch.delenv("OSTREE_TUI_LOG_FILE", raising=False)
        assert Environment.log_file() is None
        monkeypatch.setenv("OSTREE_TUI_LOG_FILE", "")
        assert Environment.log_file() is None

    def test_log_file_from_env(self, monkeypatch):
        """Test log_file reads from environment."""
        monkeypatch.setenv("OSTREE_TUI_LOG_FILE", "/tmp/ostree-tui.log")
        assert Environment.log_file() == "/tmp/ostree-tui.log"


class TestEnvSingleton:
    """Tests for env singleton instance."""

    def test_env_is_environment_instance(self):
        """Test that env is an instance of Environment."""
        assert isinstance(env, Environment)

    def test_env_singleton_methods_work(self, monkeypatch):
        """Test that env singleton methods work."""
        monkeypatch.setenv("OSTREE_STORE", "memory")
        assert env.store_type() == "memory"
