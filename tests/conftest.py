import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'combo_skills'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_combo_skills_caches


@pytest.fixture(autouse=True)
def _reset_caches():
    """Ensure config, data and logging state are fresh for each test."""
    reset_combo_skills_caches()
    saved = {k: v for k, v in os.environ.items() if k.startswith("COMBO_SKILLS_")}
    for k in saved:
        os.environ.pop(k, None)
    yield
    reset_combo_skills_caches()
    for k in [k for k in os.environ if k.startswith("COMBO_SKILLS_")]:
        os.environ.pop(k, None)
    os.environ.update(saved)


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """Run the test from an empty project directory.

    Config lookups resolve against ``tmp_path`` and compiled output lands
    under it.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path
