from __future__ import annotations

from pathlib import Path

import pytest
import yaml

MANIFEST_1 = """\
min1:

opt1:
  desc: This is an optional configurable parameter
  default: opt1.default

req1: This is a required configurable parameter

opt2:
  type: integer
  default:

const1:
  desc: This is a constant parameter
  const: const1.default
"""


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    path = tmp_path / "manifest.yml"
    path.write_text(MANIFEST_1, encoding="utf-8")
    return path


@pytest.fixture
def env_vars() -> dict:
    return {
        "min1": "min1.value",
        "opt1": "opt1.value",
        "req1": "req1.value",
        "opt2": "2",
        "const1": "const1.value",
        "foobar": "foobar.value",
    }


@pytest.fixture
def manifest_fragment() -> dict:
    return yaml.safe_load(MANIFEST_1)
