"""Tests for RuntimeConfig and configure()."""

import pytest

from bones_reactive import ConfigError, RuntimeConfig, configure, current_runtime, reset_runtime


class TestRuntimeConfig:
    def test_defaults(self):
        config = RuntimeConfig()
        assert config.max_flush_passes == 100
        assert config.clone_on_get is True
        assert config.log_reruns is False

    def test_rejects_non_positive_passes(self):
        with pytest.raises(ConfigError):
            RuntimeConfig(max_flush_passes=0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RuntimeConfig().max_flush_passes = 3


class TestFromEnv:
    def test_empty_env(self):
        assert RuntimeConfig.from_env({}) == RuntimeConfig()

    def test_reads_values(self):
        config = RuntimeConfig.from_env({
            "BONES_REACTIVE_MAX_FLUSH_PASSES": "7",
            "BONES_REACTIVE_CLONE_ON_GET": "off",
            "BONES_REACTIVE_LOG_RERUNS": "Yes",
        })
        assert config == RuntimeConfig(max_flush_passes=7, clone_on_get=False, log_reruns=True)

    def test_invalid_int(self):
        with pytest.raises(ConfigError, match="MAX_FLUSH_PASSES"):
            RuntimeConfig.from_env({"BONES_REACTIVE_MAX_FLUSH_PASSES": "many"})

    def test_invalid_bool(self):
        with pytest.raises(ConfigError, match="CLONE_ON_GET"):
            RuntimeConfig.from_env({"BONES_REACTIVE_CLONE_ON_GET": "maybe"})

    def test_process_env(self, monkeypatch):
        monkeypatch.setenv("BONES_REACTIVE_MAX_FLUSH_PASSES", "3")
        assert reset_runtime().config.max_flush_passes == 3


class TestConfigure:
    def test_updates_current_runtime(self):
        config = configure(max_flush_passes=9)
        assert current_runtime().config is config
        assert config.max_flush_passes == 9

    def test_unknown_option(self):
        with pytest.raises(ConfigError):
            configure(nonsense=True)

    def test_invalid_value(self):
        with pytest.raises(ConfigError):
            configure(max_flush_passes=-1)
        assert current_runtime().config.max_flush_passes == 100

    def test_log_reruns(self, caplog):
        from bones_reactive import create_effect, create_signal

        configure(log_reruns=True)
        count, set_count = create_signal(1)
        create_effect(lambda _: count.get())
        with caplog.at_level("DEBUG", logger="bones_reactive"):
            set_count.set(2)
        assert any("Re-ran effect" in r.getMessage() for r in caplog.records)
