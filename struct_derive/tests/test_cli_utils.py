#!/usr/bin/env python3

import click
import pytest
from click.testing import CliRunner

from struct_derive.cli_utils import reconstruct_command_line
from struct_derive.struct_derive import struct_derive


@click.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.option("--name", "-n", default=None)
@click.argument("path")
def echo_command_line(verbose, name, path):
    click.echo(reconstruct_command_line(echo_command_line))


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context the program name is returned"""
        assert reconstruct_command_line(struct_derive) == "struct_derive"

    def test_arguments_then_options(self):
        result = CliRunner().invoke(echo_command_line, ["--name", "x", "-v", "missing.json"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "struct_derive missing.json --verbose --name x"

    def test_defaults_are_omitted(self):
        result = CliRunner().invoke(echo_command_line, ["missing.json"])
        assert result.output.strip() == "struct_derive missing.json"

    def test_existing_paths_are_shortened(self, tmp_path):
        job = tmp_path / "job.json"
        job.write_text("{}")
        result = CliRunner().invoke(echo_command_line, [str(job)])
        assert result.output.strip() == "struct_derive job.json"


if __name__ == "__main__":
    pytest.main([__file__])
