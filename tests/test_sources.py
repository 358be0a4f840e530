from __future__ import annotations

import datetime
import json
from pathlib import Path

import pytest

from envmanifest import (
    DictSource,
    EnvSource,
    FileSource,
    Manifest,
    ManifestFormatError,
    ManifestLoadError,
)


def test_dict_source_returns_a_copy():
    data = {"a": None}
    loaded = DictSource(data).load()

    assert loaded == {"a": None}
    assert loaded is not data


def test_file_source_loads_yaml(manifest_file: Path):
    loaded = FileSource(manifest_file).load()

    assert list(loaded) == ["min1", "opt1", "req1", "opt2", "const1"]
    assert loaded["const1"] == {"desc": "This is a constant parameter", "const": "const1.default"}


def test_file_source_loads_json_and_toml(tmp_path: Path):
    json_file = tmp_path / "manifest.json"
    json_file.write_text(json.dumps({"a": "A", "b": {"default": 1}}), encoding="utf-8")
    toml_file = tmp_path / "manifest.toml"
    toml_file.write_text('a = "A"\n\n[b]\ndefault = 1\n', encoding="utf-8")

    assert FileSource(json_file).load() == {"a": "A", "b": {"default": 1}}
    assert FileSource(toml_file).load() == {"a": "A", "b": {"default": 1}}


def test_file_source_empty_yaml_is_empty_fragment(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("# nothing declared yet\n", encoding="utf-8")

    assert FileSource(path).load() == {}


def test_file_source_missing_file(tmp_path: Path):
    missing = tmp_path / "does_not_exist.yml"

    with pytest.raises(ManifestLoadError):
        FileSource(missing).load()
    assert FileSource(missing, optional=True).load() is None


def test_file_source_invalid_yaml(tmp_path: Path):
    path = tmp_path / "broken.yml"
    path.write_text("a: [unclosed\n", encoding="utf-8")

    with pytest.raises(ManifestLoadError):
        FileSource(path).load()


def test_file_source_non_mapping_top_level(tmp_path: Path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ManifestFormatError):
        FileSource(path).load()


def test_file_source_unsupported_extension(tmp_path: Path):
    path = tmp_path / "manifest.ini"
    path.write_text("[a]\n", encoding="utf-8")

    with pytest.raises(ManifestLoadError):
        FileSource(path).load()


@pytest.mark.parametrize("filename", ["nested/manifest.yml", "manifest.json"])
def test_file_source_dump_then_load_gives_equal_manifest(
    tmp_path: Path, manifest_fragment, filename
):
    manifest = Manifest(manifest_fragment)
    manifest.merge({"token": {"desc": "API token", "hidden": True}})
    path = tmp_path / filename

    FileSource(path).dump(manifest.to_source())

    assert path.exists()
    assert not path.with_suffix(path.suffix + ".tmp").exists()
    assert Manifest(FileSource(path).load()) == manifest


def test_env_source_snapshot_is_a_copy():
    environ = {"A": "1"}
    snapshot = EnvSource(environ, dotenv_path=None).snapshot()

    environ["A"] = "2"
    assert snapshot == {"A": "1"}


def test_env_source_environment_wins_over_dotenv(tmp_path: Path):
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text("A=from-file\nB=from-file\n", encoding="utf-8")

    source = EnvSource({"A": "from-env"}, dotenv_path=dotenv_file)

    assert source.snapshot() == {"A": "from-env", "B": "from-file"}
    assert source.snapshot(use_dotenv=False) == {"A": "from-env"}


def test_env_source_reads_process_environment(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("ENVMANIFEST_TEST_VAR", "value")

    snapshot = EnvSource(dotenv_path=tmp_path / "missing.env").snapshot()

    assert snapshot["ENVMANIFEST_TEST_VAR"] == "value"


def test_file_source_dump_unencodable_default(tmp_path: Path):
    path = tmp_path / "manifest.json"
    fragment = {"release": {"default": datetime.date(2024, 1, 31)}}

    with pytest.raises(ManifestLoadError):
        FileSource(path).dump(fragment)

    assert not path.exists()
    assert not path.with_suffix(".json.tmp").exists()


def test_env_source_keeps_dotenv_references_literal(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("ENVMANIFEST_HOST", "process-host")
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text("URL=http://${ENVMANIFEST_HOST}/api\n", encoding="utf-8")

    snapshot = EnvSource({}, dotenv_path=dotenv_file).snapshot()

    assert snapshot == {"URL": "http://${ENVMANIFEST_HOST}/api"}
