#!/usr/bin/env python3
"""
Tests for configuration loading and analysis options
"""

import json
import os

import pytest
import yaml

from ecod_curation.analysis import AnalysisOptions
from ecod_curation.config import ConfigManager, ConfigSchema, DEFAULT_CONFIG
from ecod_curation.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove ECOD_ overrides inherited from the calling shell"""
    for key in list(os.environ):
        if key.startswith(ConfigManager.ENV_PREFIX):
            monkeypatch.delenv(key)


class TestConfigManager:
    """Test configuration sources and precedence"""

    def test_defaults(self):
        manager = ConfigManager()

        assert manager.errors == []
        assert manager.get_db_config()['database'] == 'ecod_protein'
        assert manager.get('analysis.min_alignment_length') == 30
        assert manager.get('analysis.missing', 'fallback') == 'fallback'

    def test_defaults_are_not_mutated(self):
        manager = ConfigManager()
        manager.config['analysis']['min_alignment_length'] = 5

        assert DEFAULT_CONFIG['analysis']['min_alignment_length'] == 30

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump({'analysis': {'coverage_threshold': 0.8}}))
        manager = ConfigManager(str(path))

        assert manager.get('analysis.coverage_threshold') == 0.8
        assert manager.get('analysis.min_alignment_length') == 30

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({'database': {'host': 'localhost'}}))
        manager = ConfigManager(str(path))

        assert manager.get_db_config()['host'] == 'localhost'
        assert manager.get_db_config()['port'] == 45000

    def test_local_overlay(self, tmp_path):
        (tmp_path / "config.yml").write_text(yaml.safe_dump({'analysis': {'near_window': 12}}))
        (tmp_path / "config.local.yml").write_text(yaml.safe_dump({'analysis': {'near_window': 8}}))
        manager = ConfigManager(str(tmp_path / "config.yml"))

        assert manager.get('analysis.near_window') == 8

    def test_environment_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump({'analysis': {'min_alignment_length': 40}}))
        monkeypatch.setenv('ECOD_ANALYSIS__MIN_ALIGNMENT_LENGTH', '25')
        monkeypatch.setenv('ECOD_ANALYSIS__COVERAGE_THRESHOLD', '0.65')
        monkeypatch.setenv('ECOD_DATABASE__HOST', 'db.example.org')
        manager = ConfigManager(str(path))

        assert manager.get('analysis.min_alignment_length') == 25
        assert manager.get('analysis.coverage_threshold') == 0.65
        assert manager.get_db_config()['host'] == 'db.example.org'

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "absent.yml"))
        assert manager.get_analysis_config() == DEFAULT_CONFIG['analysis']

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("analysis: [unclosed")

        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_non_mapping_file_raises(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_validation_errors_collected(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump({'analysis': {'near_window': 'wide', 'boundary_window': True}}))
        manager = ConfigManager(str(path))

        assert len(manager.errors) == 2
        assert any('analysis.near_window' in error for error in manager.errors)


class TestConfigSchema:
    """Test schema validation directly"""

    def test_defaults_are_valid(self):
        assert ConfigSchema.validate(DEFAULT_CONFIG) == []

    def test_missing_required_section(self):
        errors = ConfigSchema.validate({'analysis': {}})
        assert "Missing required configuration section: database" in errors


class TestAnalysisOptions:
    """Test threshold options built from configuration"""

    def test_defaults_match_config_defaults(self):
        assert AnalysisOptions.from_config(DEFAULT_CONFIG['analysis']) == AnalysisOptions()

    def test_from_config_casts_and_ignores_unknown(self):
        options = AnalysisOptions.from_config({'min_alignment_length': '25', 'near_window': 12.0,
                                               'unrelated': 'value'})
        assert options.min_alignment_length == 25
        assert options.near_window == 12
        assert isinstance(options.near_window, int)

    def test_from_config_invalid_value(self):
        with pytest.raises(ConfigurationError):
            AnalysisOptions.from_config({'coverage_threshold': 'high'})

    @pytest.mark.parametrize("overrides", [
        {'min_alignment_length': 0},
        {'fragment_coverage': 0.5},
        {'primary_overlap': 1.5},
        {'blast_strong_evalue': 1.0},
        {'hhsearch_low_probability': 90.0},
        {'near_window': -1},
        {'source_match_bonus': 2.0},
    ])
    def test_inconsistent_thresholds_rejected(self, overrides):
        with pytest.raises(ConfigurationError):
            AnalysisOptions(**overrides).validate()

    def test_with_overrides_ignores_none(self):
        options = AnalysisOptions().with_overrides(min_alignment_length=None, coverage_threshold=0.6)

        assert options.min_alignment_length == 30
        assert options.coverage_threshold == 0.6

    def test_to_dict(self):
        data = AnalysisOptions().to_dict()
        assert data['boundary_window'] == 5
        assert data['near_window'] == 10
