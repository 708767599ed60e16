import pytest
from pydantic import ValidationError

from yaib.recipe import Recipe
from yaib.bases import AptAction, RawAction, RunAction, ImagePartitionAction
from yaib.exceptions import (
    ActionDefinitionError,
    RecipeFileMissingError,
    RecipeParsingError,
    RecipeValidationError,
    TemplateError,
    UnknownActionError,
)

BASE_RECIPE = """\
architecture: amd64
actions:
  - action: run
    description: Say hello
    command: echo hello
  - action: apt
    packages: [openssh-server, sudo]
  - action: run
    chroot: true
    command: echo inside
"""


class TestRecipeLoading:
    """Tests for loading, decoding and dispatching recipes."""

    def test_load_valid_recipe(self, write_recipe):
        recipe = Recipe.load(write_recipe(BASE_RECIPE))

        assert recipe.architecture == "amd64"
        assert len(recipe) == 3
        assert [type(a) for a in recipe] == [RunAction, AptAction, RunAction]

    def test_order_and_descriptions_are_preserved(self, write_recipe):
        recipe = Recipe.load(write_recipe(BASE_RECIPE))

        assert [str(a) for a in recipe] == ["Say hello", "apt", "run"]
        assert recipe.actions[0].command == "echo hello"
        assert recipe.actions[2].chroot is True
        assert recipe.actions[1].packages == ["openssh-server", "sudo"]

    def test_tag_selects_behavior(self, write_recipe):
        run, apt, _ = Recipe.load(write_recipe(BASE_RECIPE)).actions

        assert type(run).run is not type(apt).run
        assert type(run).verify is not type(apt).verify

    def test_unknown_tag_is_fatal(self, write_recipe):
        text = BASE_RECIPE + "  - action: frobnicate\n"

        with pytest.raises(UnknownActionError, match="Unknown action: frobnicate"):
            Recipe.load(write_recipe(text))

    def test_tag_is_immutable(self, write_recipe):
        action = Recipe.load(write_recipe(BASE_RECIPE)).actions[0]

        with pytest.raises(ValidationError):
            action.action = "apt"

    def test_hyphenated_keys_are_accepted(self, write_recipe):
        text = """\
architecture: arm64
actions:
  - action: image-partition
    imagename: disk.img
    imagesize: 4GB
    partitions:
      - {name: root, fs: ext4, start: 0%, end: 100%}
    mountpoints:
      - {mountpoint: /, partition: root}
  - action: filesystem-deploy
    setup-kernel-cmdline: false
    append-kernel-cmdline: quiet
"""
        partition, deploy = Recipe.load(write_recipe(text)).actions

        assert isinstance(partition, ImagePartitionAction)
        assert partition.partitions[0].start == "0%"
        assert deploy.setup_kernel_cmdline is False
        assert deploy.setup_fstab is True
        assert deploy.append_kernel_cmdline == "quiet"


class TestRecipeErrors:

    def test_file_not_found_raises_error(self, tmp_path):
        with pytest.raises(RecipeFileMissingError):
            Recipe.load(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises_error(self, write_recipe):
        with pytest.raises(RecipeParsingError, match="Error parsing YAML recipe"):
            Recipe.load(write_recipe("architecture: amd64\nactions: [\n"))

    def test_non_mapping_document_raises_error(self, write_recipe):
        with pytest.raises(RecipeParsingError, match="dictionary"):
            Recipe.load(write_recipe("- just\n- a list\n"))

    def test_missing_architecture_raises_error(self, write_recipe):
        with pytest.raises(RecipeValidationError, match="architecture"):
            Recipe.load(write_recipe("actions: []\n"))

    def test_entry_without_tag_raises_error(self, write_recipe):
        with pytest.raises(RecipeValidationError, match="missing its 'action' tag"):
            Recipe.load(write_recipe("architecture: amd64\nactions:\n  - command: ls\n"))

    def test_unexpected_field_raises_error(self, write_recipe):
        text = "architecture: amd64\nactions:\n  - action: apt\n    packages: [vim]\n    pakages: [oops]\n"
        with pytest.raises(RecipeValidationError, match="pakages"):
            Recipe.load(write_recipe(text))

    def test_run_needs_exactly_one_of_command_or_script(self, write_recipe):
        text = "architecture: amd64\nactions:\n  - action: run\n    command: ls\n    script: x.sh\n"
        with pytest.raises(ActionDefinitionError, match="exactly one"):
            Recipe.load(write_recipe(text))


class TestRecipeTemplating:

    def test_template_variable_is_substituted(self, write_recipe):
        text = "architecture: amd64\nactions:\n  - action: debootstrap\n    suite: {{ release }}\n"
        recipe = Recipe.load(write_recipe(text), {"release": "bullseye"})

        assert recipe.actions[0].suite == "bullseye"

    def test_sector_helper_in_numeric_field(self, write_recipe):
        text = (
            "architecture: amd64\nactions:\n"
            "  - action: raw\n    origin: recipe\n    source: u-boot.bin\n    offset: {{ sector(2048) }}\n"
        )
        action = Recipe.load(write_recipe(text)).actions[0]

        assert isinstance(action, RawAction)
        assert action.offset == 1048576

    def test_undefined_variable_fails_before_decoding(self, write_recipe):
        text = "architecture: amd64\nactions:\n  - action: frobnicate\n    suite: {{ release }}\n"

        # the template error wins over the unknown tag further down
        with pytest.raises(TemplateError, match="release"):
            Recipe.load(write_recipe(text))
