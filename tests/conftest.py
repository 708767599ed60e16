import pytest
from pathlib import Path
from typing import List, Optional

from yaib import constants
from yaib.datacls import BuildContext
from yaib.recipe import Recipe

from helpers import RecordingAction


@pytest.fixture(autouse=True)
def clean_sandbox_env(monkeypatch):
    """Make sure no test believes it runs inside, or is barred from, a sandbox."""
    monkeypatch.delenv(constants.IN_SANDBOX_ENV, raising=False)
    monkeypatch.delenv(constants.DISABLE_SANDBOX_ENV, raising=False)


@pytest.fixture
def context(tmp_path: Path) -> BuildContext:
    scratch = tmp_path / "scratch"
    (scratch / "root").mkdir(parents=True)
    artifacts = tmp_path / "artifacts"
    artifacts.mkdir()
    recipe_dir = tmp_path / "recipe"
    recipe_dir.mkdir()
    return BuildContext(scratchdir=scratch, artifactdir=artifacts, recipe_dir=recipe_dir, architecture="amd64")


@pytest.fixture
def make_recipe():
    """Build a recipe of RecordingActions sharing one event log."""
    def _make(*names: str, fail: Optional[tuple] = None, forward: Optional[List[str]] = None):
        events: list = []
        actions = []
        for name in names:
            fail_at = fail[1] if fail and fail[0] == name else None
            action = RecordingAction(action="record", description=name, fail_at=fail_at, forward=forward or [])
            action._events = events
            actions.append(action)
        return Recipe("amd64", actions), events
    return _make


@pytest.fixture
def write_recipe(tmp_path: Path):
    """A pytest fixture to create a recipe file in a temporary directory."""
    def _write(text: str, name: str = "recipe.yaml") -> Path:
        recipe_file = tmp_path / name
        recipe_file.write_text(text)
        return recipe_file
    return _write
