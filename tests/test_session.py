import pytest
from pathlib import Path

from yaib import constants
from yaib.session import BuildSession

from helpers import FakeSandbox

RECIPE = """\
architecture: arm64
actions:
  - action: run
    command: 'echo built > "$ARTIFACTDIR/marker"'
"""


class TestPathResolution:

    def test_relative_paths_resolve_against_cwd(self, tmp_path):
        session = BuildSession("recipes/../recipes/r.yaml", FakeSandbox(), artifactdir="out", cwd=tmp_path)

        assert session.recipe_file == tmp_path / "recipes" / "r.yaml"
        assert session.recipe_dir == tmp_path / "recipes"
        assert session.artifactdir == tmp_path / "out"

    def test_absolute_paths_are_kept(self, tmp_path):
        session = BuildSession("/srv/r.yaml", FakeSandbox(), artifactdir="/srv/out/", cwd=tmp_path)

        assert session.recipe_file == Path("/srv/r.yaml")
        assert session.artifactdir == Path("/srv/out")

    def test_artifactdir_defaults_to_cwd(self, tmp_path):
        assert BuildSession("r.yaml", FakeSandbox(), cwd=tmp_path).artifactdir == tmp_path


class TestScratchDirectory:

    def test_host_direct_uses_temporary_scratch(self, tmp_path):
        with BuildSession("r.yaml", FakeSandbox(), cwd=tmp_path) as session:
            scratch = session.scratchdir
            assert scratch.parent == tmp_path
            assert scratch.name.startswith(constants.SCRATCH_PREFIX)
            assert scratch.is_dir()
            assert session.context.rootdir == scratch / "root"

        assert not scratch.exists()

    def test_scratch_is_removed_on_error(self, tmp_path):
        with pytest.raises(RuntimeError):
            with BuildSession("r.yaml", FakeSandbox(), cwd=tmp_path) as session:
                scratch = session.scratchdir
                raise RuntimeError("interrupted")

        assert not scratch.exists()

    def test_sandboxed_run_uses_fixed_scratch(self, tmp_path):
        with BuildSession("r.yaml", FakeSandbox(supported=True), cwd=tmp_path) as session:
            assert session.scratchdir == Path(constants.SANDBOX_SCRATCHDIR)

        assert list(tmp_path.iterdir()) == []

    def test_internal_image_seeds_context(self, tmp_path):
        with BuildSession("r.yaml", FakeSandbox(), internal_image="/out/disk.img", cwd=tmp_path) as session:
            assert session.context.image == "/out/disk.img"
            assert session.context.artifactdir == tmp_path


class TestSessionRun:

    def test_run_builds_recipe(self, tmp_path):
        (tmp_path / "r.yaml").write_text(RECIPE)

        with BuildSession("r.yaml", FakeSandbox(), cwd=tmp_path) as session:
            assert session.run() == 0
            assert session.context.architecture == "arm64"

        assert (tmp_path / "marker").read_text() == "built\n"

    def test_missing_artifactdir_is_created(self, tmp_path):
        (tmp_path / "r.yaml").write_text(RECIPE)

        with BuildSession("r.yaml", FakeSandbox(), artifactdir="out/images", cwd=tmp_path) as session:
            assert (tmp_path / "out" / "images").is_dir()
            assert session.run() == 0

        assert (tmp_path / "out" / "images" / "marker").read_text() == "built\n"

    def test_run_outside_context_manager_raises(self, tmp_path):
        with pytest.raises(RuntimeError, match="context manager"):
            BuildSession("r.yaml", FakeSandbox(), cwd=tmp_path).run()
