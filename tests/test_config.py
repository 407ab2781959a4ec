import dataclasses

import pytest

from ascii_grid.config import (
    AnsiFile,
    Config,
    ConfigBuilder,
    HtmlFile,
    PlainFile,
    ResizingDimension,
    Shell,
)
from ascii_grid.constants import CharacterSet
from ascii_grid.exceptions import ConfigurationError


class TestConfig:
    def test_defaults(self):
        config = ConfigBuilder().build()
        assert config.characters == CharacterSet.FLAT
        assert config.threads == 4
        assert config.scale == 0.42
        assert config.target_size == 80
        assert config.dimension == ResizingDimension.WIDTH
        assert config.target == Shell(color=True, background=False)
        assert not any([config.invert, config.border, config.transform_x, config.transform_y,
                        config.center_x, config.center_y, config.outline, config.hysteresis])

    def test_is_frozen(self):
        config = Config()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.threads = 8

    def test_builder_shortcut(self):
        assert isinstance(Config.builder(), ConfigBuilder)
        assert Config.builder().build() == Config()


class TestConfigBuilder:
    def test_setters_chain(self):
        config = (ConfigBuilder()
                  .characters("@. ")
                  .threads(2)
                  .scale(0.5)
                  .target_size(120)
                  .invert(True)
                  .border(True)
                  .dimension(ResizingDimension.HEIGHT)
                  .transform_x(True)
                  .transform_y(True)
                  .center_x(True)
                  .center_y(True)
                  .outline(True)
                  .hysteresis(True)
                  .target(HtmlFile(background=True))
                  .build())

        assert config == Config(
            characters="@. ", threads=2, scale=0.5, target_size=120, invert=True, border=True,
            dimension=ResizingDimension.HEIGHT, transform_x=True, transform_y=True,
            center_x=True, center_y=True, outline=True, hysteresis=True,
            target=HtmlFile(background=True),
        )

    def test_empty_characters_are_ignored(self):
        config = ConfigBuilder().characters("#. ").characters("").build()
        assert config.characters == "#. "

    def test_starts_from_existing_config(self):
        base = ConfigBuilder().target_size(33).build()
        config = ConfigBuilder(base).border(True).build()
        assert config.target_size == 33
        assert config.border
        assert not base.border

    @pytest.mark.parametrize("setter, value", [
        ("target_size", 0),
        ("threads", 0),
        ("scale", 0.0),
        ("scale", -0.5),
        ("target", "shell"),
    ])
    def test_invalid_values_raise(self, setter, value):
        builder = getattr(ConfigBuilder(), setter)(value)
        with pytest.raises(ConfigurationError):
            builder.build()

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ConfigBuilder().threads(-1).build()


class TestTargets:
    def test_ansi_file_is_always_colored(self):
        assert AnsiFile().color
        assert AnsiFile(background=True).background

    def test_plain_file_has_no_color(self):
        assert not PlainFile().color
        assert not PlainFile().background

    def test_shell_defaults(self):
        assert Shell().color
        assert not Shell().background


class TestCharacterSet:
    @pytest.mark.parametrize("name, expected", [
        ("short", CharacterSet.SHORT),
        ("s", CharacterSet.SHORT),
        ("0", CharacterSet.SHORT),
        ("flat", CharacterSet.FLAT),
        ("f", CharacterSet.FLAT),
        ("1", CharacterSet.FLAT),
        ("long", CharacterSet.LONG),
        ("l", CharacterSet.LONG),
        ("2", CharacterSet.LONG),
        ("#k. ", "#k. "),
    ])
    def test_get_preset(self, name, expected):
        assert CharacterSet.get_preset(name) == expected
