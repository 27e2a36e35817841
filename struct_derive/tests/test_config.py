#!/usr/bin/env python3

import pytest

from struct_derive.pipeline import DeriveConfig, OutputMode


class TestDeriveConfig:
    """Configuration loading"""

    def test_defaults(self):
        config = DeriveConfig()
        assert config.check_duplicate_names is False
        assert config.render.indent == "    "
        assert config.render.add_generation_comment is True
        assert config.output.mode is OutputMode.ERROR_IF_EXISTS
        assert config.output.atomic_write is True

    def test_from_dict(self):
        config = DeriveConfig.from_dict(
            {
                "check_duplicate_names": True,
                "render": {"indent": "  ", "emit_compile_errors": False},
                "output": {"mode": "force", "atomic_write": False},
            }
        )
        assert config.check_duplicate_names is True
        assert config.render.indent == "  "
        assert config.render.emit_compile_errors is False
        assert config.render.add_generation_comment is True
        assert config.output.mode is OutputMode.FORCE
        assert config.output.atomic_write is False

    def test_unknown_keys_are_ignored(self):
        config = DeriveConfig.from_dict({"no_such_option": 1})
        assert not hasattr(config, "no_such_option")

    def test_unknown_render_keys_are_ignored(self):
        config = DeriveConfig.from_dict({"render": {"indent": "  ", "colour": True}})
        assert config.render.indent == "  "
        assert not hasattr(config.render, "colour")

    def test_round_trip(self):
        data = {
            "check_duplicate_names": True,
            "render": {
                "indent": "\t",
                "add_generation_comment": False,
                "emit_compile_errors": True,
                "blank_lines_between": 2,
            },
            "output": {"mode": "error", "atomic_write": True},
        }
        assert DeriveConfig.from_dict(data).to_dict() == data

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            DeriveConfig.from_dict({"output": {"mode": "sometimes"}})


if __name__ == "__main__":
    pytest.main([__file__])
