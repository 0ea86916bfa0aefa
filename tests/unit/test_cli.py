import pytest
import yaml

from click.testing import CliRunner

from relay.cli import cli
from relay.main import build_outputs, load_config
from relay.outputs import WriterOutput

class TestCli:
    """Tests for the command line interface"""

    @pytest.fixture
    def config_file(self, tmp_path, basic_config_data):
        path = tmp_path / "relay_config.yaml"
        path.write_text(yaml.dump(basic_config_data))
        return path

    def test_check_config(self, config_file):
        result = CliRunner().invoke(cli, ["check-config", "--config", str(config_file)])

        assert result.exit_code == 0
        assert "Configuration OK" in result.output
        assert "stdout (WriterOutput)" in result.output

    def test_check_config_missing_file(self, tmp_path):
        result = CliRunner().invoke(cli, ["check-config", "--config", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_token_override(self, config_file):
        config = load_config(str(config_file), token="override")

        assert config.get_setting("adapter", "bot_token") == "override"

    def test_missing_token(self, tmp_path, basic_config_data):
        del basic_config_data["adapter"]["bot_token"]
        path = tmp_path / "relay_config.yaml"
        path.write_text(yaml.dump(basic_config_data))

        with pytest.raises(ValueError):
            load_config(str(path))

    def test_default_output(self, tmp_path, basic_config_data):
        del basic_config_data["outputs"]
        path = tmp_path / "relay_config.yaml"
        path.write_text(yaml.dump(basic_config_data))

        outputs = build_outputs(load_config(str(path)))

        assert len(outputs) == 1
        assert isinstance(outputs[0], WriterOutput)
