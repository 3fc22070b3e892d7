"""Tests for YAML settings and JSON loaders.

Run with: pytest tests/test_config.py -v
"""

import json
from pathlib import Path

import pytest

from src.basket.config import BasketConfig, SplitterConfig, load_config
from src.basket.errors import ConfigurationError
from src.basket.loaders import load_basket, load_eligibility, parse_eligibility

REPO_ROOT = Path(__file__).resolve().parents[1]


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """YAML → BasketConfig."""

    def test_full_config(self, tmp_path):
        path = _write(
            tmp_path / "cfg.yaml",
            "splitter:\n"
            "  time_limit_s: 2.5\n"
            "  max_workers: 4\n"
            "  catalog_order: lexicographic\n"
            "data:\n"
            "  eligibility_path: data/elig.json\n"
            "api:\n"
            "  port: 9000\n",
        )
        cfg = load_config(path)
        assert cfg.splitter.time_limit_s == 2.5
        assert cfg.splitter.max_workers == 4
        assert cfg.splitter.catalog_order == "lexicographic"
        assert cfg.splitter.num_search_workers == 1
        assert cfg.data.eligibility_path == "data/elig.json"
        assert cfg.api.port == 9000
        assert cfg.api.host == "0.0.0.0"

    def test_empty_file_gives_defaults(self, tmp_path):
        cfg = load_config(_write(tmp_path / "empty.yaml", ""))
        assert cfg == BasketConfig()

    def test_null_time_limit_allowed(self, tmp_path):
        cfg = load_config(_write(tmp_path / "c.yaml", "splitter:\n  time_limit_s: null\n"))
        assert cfg.splitter.time_limit_s is None

    def test_unknown_key_rejected(self, tmp_path):
        path = _write(tmp_path / "c.yaml", "splitter:\n  threads: 3\n")
        with pytest.raises(ConfigurationError, match="threads"):
            load_config(path)

    def test_unknown_section_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="metrics"):
            load_config(_write(tmp_path / "c.yaml", "metrics:\n  on: true\n"))

    def test_non_mapping_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path / "c.yaml", "- a\n- b\n"))

    def test_invalid_yaml_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path / "c.yaml", "splitter: [unclosed\n"))

    def test_wrong_type_value_rejected(self, tmp_path):
        path = _write(tmp_path / "c.yaml", "splitter:\n  max_workers: four\n")
        with pytest.raises(ConfigurationError, match="max_workers"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path / "absent.yaml")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_bytes(b"splitter:\n  catalog_order: \xff\xfe\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_shipped_default_config_loads(self):
        cfg = load_config(REPO_ROOT / "config" / "default_splitter.yaml")
        assert cfg.splitter == SplitterConfig()


class TestSplitterConfigValidation:
    """Invalid values fail at construction."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"time_limit_s": 0},
            {"time_limit_s": -1.0},
            {"num_search_workers": 0},
            {"max_workers": 0},
            {"catalog_order": "alphabetical"},
            {"time_limit_s": "fast"},
            {"num_search_workers": 2.5},
            {"max_workers": "four"},
            {"max_workers": True},
        ],
    )
    def test_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            SplitterConfig(**kwargs)


class TestLoaders:
    """JSON eligibility tables and item lists."""

    def test_load_eligibility(self, tmp_path):
        path = tmp_path / "elig.json"
        path.write_text(json.dumps({"a": ["D1", "D2"], "b": ["D2"]}), encoding="utf-8")
        table = load_eligibility(path)
        assert table.entries["a"] == ("D1", "D2")
        assert table.eligible("b") == {"D2"}

    def test_shipped_eligibility_loads(self):
        table = load_eligibility(REPO_ROOT / "config" / "eligibility.json")
        assert len(table) == 9
        assert table.eligible("Garden Chair") == {"Courier"}

    def test_eligibility_root_must_be_object(self):
        with pytest.raises(ConfigurationError):
            parse_eligibility(["a", "b"])

    def test_eligibility_values_must_be_lists(self):
        with pytest.raises(ConfigurationError, match="'a'"):
            parse_eligibility({"a": "D1"})

    def test_eligibility_delivery_names_must_be_strings(self):
        with pytest.raises(ConfigurationError):
            parse_eligibility({"a": ["D1", 7]})

    def test_empty_entry_kept(self, caplog):
        table = parse_eligibility({"a": []})
        assert table.eligible("a") == frozenset()
        assert "no eligible delivery types" in caplog.text

    def test_malformed_json(self, tmp_path):
        path = _write(tmp_path / "bad.json", "{not json")
        with pytest.raises(ConfigurationError):
            load_eligibility(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_eligibility(tmp_path / "missing.json")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_basket(tmp_path / "missing.json")

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_eligibility(tmp_path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_bytes(b"\xff\xfe[")
        with pytest.raises(ConfigurationError):
            load_basket(path)

    def test_load_basket(self, tmp_path):
        path = _write(tmp_path / "items.json", '["b", "a", "b"]')
        assert load_basket(path) == ["b", "a", "b"]

    def test_basket_must_be_array_of_strings(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_basket(_write(tmp_path / "items.json", '{"a": 1}'))
        with pytest.raises(ConfigurationError):
            load_basket(_write(tmp_path / "items2.json", '["a", 1]'))
