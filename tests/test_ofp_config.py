"""
Tests for ofp_config.py configuration handling
"""
import pytest
from ofp_config import Config, ConfigParser, MonitorSettings


class TestMonitorSettings:
    """Tests for MonitorSettings"""

    def test_default_values(self):
        settings = MonitorSettings()
        assert settings.poll_interval == 5.0
        assert settings.takeoff_roll_poll_interval == 0.2
        assert settings.realtime is False

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            MonitorSettings(poll_interval=0)


class TestConfigParser:
    """Tests for ConfigParser"""

    def test_find_config_file_from_cli(self, sample_config_file):
        assert ConfigParser().find_config_file(str(sample_config_file)) == str(sample_config_file)

    def test_find_config_file_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "ofplog.ini").write_text("[Defaults]\n", encoding='utf-8')
        monkeypatch.chdir(tmp_path)
        assert ConfigParser().find_config_file() == "./ofplog.ini"

    def test_no_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert ConfigParser().find_config_file(str(tmp_path / "missing.conf")) is None

    def test_default_settings(self, sample_config_file):
        parser = ConfigParser()
        assert parser.load_config_file(str(sample_config_file))
        defaults = parser.get_default_settings()
        assert defaults['aircraft'] == "Test Aircraft - Boeing 737-800"
        assert defaults['pollinterval'] == 2.0
        assert defaults['takeoffrollpollinterval'] == 0.5
        assert defaults['realtime'] is False

    def test_invalid_number(self, tmp_path):
        config_file = tmp_path / "bad.conf"
        config_file.write_text("[Defaults]\nPollInterval = often\n", encoding='utf-8')
        parser = ConfigParser()
        parser.load_config_file(str(config_file))
        with pytest.raises(ValueError):
            parser.get_default_settings()

    def test_no_defaults_section(self, tmp_path):
        config_file = tmp_path / "empty.conf"
        config_file.write_text("[Other]\nkey = value\n", encoding='utf-8')
        parser = ConfigParser()
        parser.load_config_file(str(config_file))
        assert parser.get_default_settings() == {}


class TestConfig:
    """Tests for Config"""

    def test_values_from_file(self, mock_cli_args):
        mock_cli_args.output = None
        mock_cli_args.flightplan = None
        config = Config(mock_cli_args)
        assert config.aircraft == "Test Aircraft - Boeing 737-800"
        assert config.outPath == "."
        assert config.flight_plan_path is None
        assert config.poll_interval == 2.0
        assert config.takeoff_roll_poll_interval == 0.5
        assert config.realtime is False

    def test_cli_overrides_file(self, mock_cli_args, temp_output_dir, sample_pln_file):
        mock_cli_args.aircraft = "Cessna 172"
        mock_cli_args.realtime = True
        config = Config(mock_cli_args)
        assert config.aircraft == "Cessna 172"
        assert config.outPath == str(temp_output_dir)
        assert config.flight_plan_path == str(sample_pln_file)
        assert config.realtime is True

    def test_flight_plan_from_file(self, tmp_path, mock_cli_args, sample_pln_file):
        config_file = tmp_path / "plan.conf"
        config_file.write_text(f"[Defaults]\nFlightPlan = {sample_pln_file}\nRealtime = yes\n",
                               encoding='utf-8')
        mock_cli_args.config = str(config_file)
        mock_cli_args.flightplan = None
        config = Config(mock_cli_args)
        assert config.flight_plan_path == str(sample_pln_file)
        assert config.realtime is True
        assert config.poll_interval == 5.0

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        class Args:
            config = None

        config = Config(Args())
        assert config.aircraft == ""
        assert config.outPath == "."
        assert config.flight_plan_path is None
        assert config.monitor_settings == MonitorSettings()
