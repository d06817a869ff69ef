"""Tests for Config hierarchy and paths module"""
import pytest

from cratepub.config import Config, GLOBAL_CONFIG_PATH
from cratepub.paths import find_workspace_root, get_workspace_config_path


@pytest.fixture
def configured_workspace(workspace):
    """Workspace fixture with a .cratepub.yaml at its root"""
    (workspace / ".cratepub.yaml").write_text("publish_args:\n  - --allow-dirty\n")
    return workspace


class TestWorkspaceRootFinder:
    """Test find_workspace_root() function"""

    def test_find_root_at_root(self, configured_workspace):
        assert find_workspace_root(configured_workspace) == configured_workspace

    def test_find_root_from_crate_subdirectory(self, configured_workspace):
        subdir = configured_workspace / "b" / "src" / "nested"
        subdir.mkdir(parents=True)
        assert find_workspace_root(subdir) == configured_workspace

    def test_no_config_file(self, workspace):
        assert find_workspace_root(workspace) is None

    def test_config_requires_manifest(self, temp_dir):
        """Test a .cratepub.yaml without Cargo.toml beside it is ignored"""
        (temp_dir / ".cratepub.yaml").write_text("")
        assert find_workspace_root(temp_dir) is None

    def test_get_workspace_config_path(self, configured_workspace):
        assert get_workspace_config_path(configured_workspace) == configured_workspace / ".cratepub.yaml"


class TestConfig:
    """Test Config values and hierarchy"""

    def test_defaults(self, temp_dir):
        config = Config(config_path=temp_dir / "missing.yaml", enable_hierarchy=False)
        assert config.cargo == "cargo"
        assert config.publish_args == []
        assert config.change_process_cwd is False
        assert config.check_tools is True

    def test_reads_values(self, configured_workspace):
        config = Config(config_path=configured_workspace / ".cratepub.yaml", enable_hierarchy=False)
        assert config.publish_args == ["--allow-dirty"]

    def test_publish_args_as_string(self, temp_dir):
        path = temp_dir / "c.yaml"
        path.write_text("publish_args: --allow-dirty --no-verify\n")
        config = Config(config_path=path, enable_hierarchy=False)
        assert config.publish_args == ["--allow-dirty", "--no-verify"]

    def test_local_overrides_global(self, temp_dir):
        (temp_dir / "global.yaml").write_text("cargo: /opt/rust/bin/cargo\npublish_args: [--no-verify]\n")
        (temp_dir / "local.yaml").write_text("publish_args: [--allow-dirty]\n")
        global_config = Config(config_path=temp_dir / "global.yaml", enable_hierarchy=False)

        config = Config(config_path=temp_dir / "local.yaml", enable_hierarchy=False)
        # Manually load global for hierarchy
        config._global_data = global_config._data

        assert config.publish_args == ["--allow-dirty"]
        assert config.cargo == "/opt/rust/bin/cargo"

    def test_boolean_flags_from_file(self, temp_dir):
        path = temp_dir / "test.yaml"
        path.write_text("change_process_cwd: true\ncheck_tools: false\n")

        loaded = Config(config_path=path, enable_hierarchy=False)
        assert loaded.change_process_cwd is True
        assert loaded.check_tools is False

    def test_read_only_api(self):
        """Test configuration is never written back by cratepub"""
        assert not hasattr(Config, "save")
        assert not hasattr(Config, "set")

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("publish_args: [unclosed\n")
        with pytest.raises(RuntimeError):
            Config(config_path=path, enable_hierarchy=False)

    def test_non_mapping_yaml(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(RuntimeError):
            Config(config_path=path, enable_hierarchy=False)


class TestConfigWithWorkspaceContext:
    """Test Config.load_with_workspace_context()"""

    def test_in_workspace(self, configured_workspace):
        config = Config.load_with_workspace_context(start_path=configured_workspace / "a")
        assert config.config_path == configured_workspace / ".cratepub.yaml"
        assert config.enable_hierarchy is True

    def test_outside_workspace(self, temp_dir):
        config = Config.load_with_workspace_context(start_path=temp_dir)
        assert config.config_path == GLOBAL_CONFIG_PATH
        assert config.enable_hierarchy is False
