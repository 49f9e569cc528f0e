"""
Unit tests for input configuration loading.
"""

from pathlib import Path

import pytest

from odinkit.config.inputs import (
    DEFAULT_REPOSITORY,
    load_config,
    load_env_inputs,
    load_yaml_inputs,
    parse_bool,
)
from odinkit.core.exceptions import ConfigurationError


class TestParseBool:
    """Test boolean input parsing."""

    @pytest.mark.parametrize("value", ["true", "True", "yes", "1", "on", True])
    def test_true_values(self, value):
        assert parse_bool("cache", value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "no", "0", "off", False])
    def test_false_values(self, value):
        assert parse_bool("cache", value) is False

    def test_invalid_value(self):
        """Test unrecognized values raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Input 'cache' must be a boolean"):
            parse_bool("cache", "maybe")


class TestLoadConfigDefaults:
    """Test built-in defaults."""

    def test_defaults(self, isolated_environment):
        """Test the request built from defaults only."""
        request = load_config(environ={}).request

        assert request.repository == DEFAULT_REPOSITORY
        assert request.version_spec == "master"
        assert request.release_tag == "latest"
        assert request.build_type == "release"
        assert request.llvm_version == "17"
        assert request.caching_enabled is True
        assert request.access_token == ""
        assert request.install_path == Path.home() / ".odinkit" / "odin"

    def test_default_cache_dir(self, isolated_environment):
        """Test the default local cache directory."""
        config = load_config(environ={})
        assert config.cache_dir == Path.home() / ".odinkit" / "cache"

    def test_install_path_under_tool_cache(self, isolated_environment):
        """Test the runner tool cache is used when available."""
        environ = {"RUNNER_TOOL_CACHE": "/opt/hostedtoolcache"}
        request = load_config(environ=environ).request
        assert request.install_path == Path("/opt/hostedtoolcache") / "odin"


class TestEnvironmentInputs:
    """Test INPUT_* environment variables."""

    def test_action_inputs(self, isolated_environment):
        """Test inputs in the Actions naming convention."""
        environ = {
            "INPUT_ODIN-VERSION": "dev-2024-09",
            "INPUT_LLVM-VERSION": "18",
            "INPUT_BUILD-TYPE": "debug",
            "INPUT_RELEASE": "",
            "INPUT_CACHE": "false",
        }

        request = load_config(environ=environ).request

        assert request.version_spec == "dev-2024-09"
        assert request.llvm_version == "18"
        assert request.build_type == "debug"
        assert request.release_tag == ""
        assert request.caching_enabled is False

    def test_github_token_fallback(self):
        """Test GITHUB_TOKEN is used when no token input is given."""
        inputs = load_env_inputs({"INPUT_TOKEN": "", "GITHUB_TOKEN": "ghs_abc"})
        assert inputs["token"] == "ghs_abc"

    def test_token_input_wins(self):
        """Test an explicit token input is kept."""
        inputs = load_env_inputs({"INPUT_TOKEN": "mine", "GITHUB_TOKEN": "ghs_abc"})
        assert inputs["token"] == "mine"

    def test_aliases(self):
        """Test alternative input spellings."""
        inputs = load_env_inputs({"INPUT_BRANCH": "dev", "INPUT_CACHING": "no"})
        assert inputs == {"odin-version": "dev", "cache": "no"}


class TestYamlInputs:
    """Test odinkit.yaml loading."""

    def test_snake_case_keys(self, tmp_path):
        """Test snake_case keys and YAML scalars are normalized."""
        config_file = tmp_path / "odinkit.yaml"
        config_file.write_text(
            "odin_version: dev-2024-07\nllvm_version: 18\ncache: false\n"
        )

        inputs = load_yaml_inputs(config_file)

        assert inputs == {
            "odin-version": "dev-2024-07",
            "llvm-version": "18",
            "cache": "false",
        }

    def test_config_file_in_working_directory(self, isolated_environment):
        """Test ./odinkit.yaml is picked up automatically."""
        (isolated_environment / "odinkit.yaml").write_text("build-type: debug\n")

        request = load_config(environ={}).request

        assert request.build_type == "debug"

    def test_environment_overrides_file(self, isolated_environment):
        """Test INPUT_* variables take precedence over the file."""
        (isolated_environment / "odinkit.yaml").write_text("build-type: debug\n")

        request = load_config(environ={"INPUT_BUILD-TYPE": "release"}).request

        assert request.build_type == "release"

    def test_missing_required_file(self, tmp_path):
        """Test an explicit config file must exist."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "missing.yaml", environ={})

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigurationError."""
        config_file = tmp_path / "odinkit.yaml"
        config_file.write_text("repository: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_inputs(config_file)

    def test_non_mapping(self, tmp_path):
        """Test the document must be a mapping."""
        config_file = tmp_path / "odinkit.yaml"
        config_file.write_text("- master\n- dev\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_yaml_inputs(config_file)

    def test_empty_file(self, tmp_path):
        """Test an empty file contributes nothing."""
        config_file = tmp_path / "odinkit.yaml"
        config_file.write_text("")
        assert load_yaml_inputs(config_file) == {}


class TestOverridesAndValidation:
    """Test command-line overrides and validation."""

    def test_overrides_win(self, isolated_environment):
        """Test overrides take precedence over the environment."""
        request = load_config(
            overrides={"odin-version": "dev-2024-10"},
            environ={"INPUT_ODIN-VERSION": "master"},
        ).request

        assert request.version_spec == "dev-2024-10"

    def test_explicit_paths(self, isolated_environment, tmp_path):
        """Test install path and cache dir overrides."""
        config = load_config(
            overrides={
                "install-path": str(tmp_path / "odin"),
                "cache-dir": str(tmp_path / "cache"),
            },
            environ={},
        )

        assert config.request.install_path == tmp_path / "odin"
        assert config.cache_dir == tmp_path / "cache"

    def test_empty_version_rejected(self, isolated_environment):
        """Test an empty version spec is a configuration error."""
        with pytest.raises(ConfigurationError, match="odin-version"):
            load_config(overrides={"odin-version": " "}, environ={})

    def test_empty_repository_rejected(self, isolated_environment):
        """Test an empty repository is a configuration error."""
        with pytest.raises(ConfigurationError, match="repository"):
            load_config(environ={"INPUT_REPOSITORY": ""})

    def test_invalid_cache_flag(self, isolated_environment):
        """Test a malformed boolean input fails the run."""
        with pytest.raises(ConfigurationError):
            load_config(environ={"INPUT_CACHE": "sometimes"})


class TestAcquisitionRequest:
    """Test AcquisitionRequest helpers."""

    def test_repository_name(self, make_request):
        """Test the last path segment is used, without '.git'."""
        request = make_request(repository="https://github.com/odin-lang/Odin.git")
        assert request.repository_name == "Odin"

    def test_release_asset_name_defaults_to_repository(self, make_request):
        """Test asset names are matched on the lowercased repository name."""
        assert make_request().release_asset_name() == "odin"
        assert make_request(repository="example/proj").release_asset_name() == "proj"

    def test_release_asset_name_override(self, make_request):
        """Test an explicit asset name."""
        request = make_request(asset_name="odin-nightly")
        assert request.release_asset_name() == "odin-nightly"

    def test_request_is_immutable(self, make_request):
        """Test requests cannot be modified after creation."""
        request = make_request()
        with pytest.raises(AttributeError):
            request.version_spec = "dev"
