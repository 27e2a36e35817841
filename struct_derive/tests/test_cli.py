#!/usr/bin/env python3

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from struct_derive.struct_derive import struct_derive

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def runner():
    return CliRunner()


def copy_job(tmp_path, name):
    path = tmp_path / f"{name}.json"
    shutil.copy(TEST_DATA / f"{name}.json", path)
    return path


def without_header(text):
    return text.split("\n", 2)[2]


class TestStructDeriveCommand:
    """End-to-end runs of the struct_derive command"""

    def test_all_specifications_succeed(self, runner, tmp_path):
        job = copy_job(tmp_path, "shapes")
        out = tmp_path / "shapes.rs"
        result = runner.invoke(struct_derive, [str(job), str(out)])
        assert result.exit_code == 0, result.output
        generated = out.read_text()
        assert generated.startswith("// Generated by struct_derive")
        assert "using: struct_derive shapes.json" in generated
        assert without_header(generated) == without_header((TEST_DATA / "shapes.rs").read_text())

    def test_failures_are_reported_and_exit_non_zero(self, runner, tmp_path):
        job = copy_job(tmp_path, "person")
        out = tmp_path / "person.rs"
        result = runner.invoke(struct_derive, [str(job), str(out)])
        assert result.exit_code == 1
        assert "error: specification #2: line 1, column 17: no target matched field change `-weight`" in result.output
        # Siblings are still written
        assert without_header(out.read_text()) == without_header((TEST_DATA / "person.rs").read_text())

    def test_existing_output_requires_force(self, runner, tmp_path):
        job = copy_job(tmp_path, "shapes")
        out = tmp_path / "shapes.rs"
        out.write_text("keep me")

        result = runner.invoke(struct_derive, [str(job), str(out)])
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert out.read_text() == "keep me"

        result = runner.invoke(struct_derive, ["--force", str(job), str(out)])
        assert result.exit_code == 0, result.output
        assert "pub enum Shape32" in out.read_text()

    def test_config_file(self, runner, tmp_path):
        job = copy_job(tmp_path, "shapes")
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"render": {"indent": "  ", "add_generation_comment": False}}))
        out = tmp_path / "shapes.rs"

        result = runner.invoke(struct_derive, ["--config", str(config), str(job), str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text().startswith("pub enum Shape32 {\n  Circle(f32),\n")

    def test_invalid_config_file(self, runner, tmp_path):
        job = copy_job(tmp_path, "shapes")
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"output": {"mode": "sometimes"}}))
        out = tmp_path / "shapes.rs"

        result = runner.invoke(struct_derive, ["--config", str(config), str(job), str(out)])
        assert result.exit_code == 1
        assert "sometimes" in result.output
        assert not out.exists()

    def test_check_duplicates(self, runner, tmp_path):
        job = tmp_path / "job.json"
        job.write_text(json.dumps({"base": "struct X { id: u8 }", "derive": ["struct Y { +id: u16 }"]}))
        out = tmp_path / "out.rs"

        result = runner.invoke(struct_derive, [str(job), str(out)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(struct_derive, ["--check-duplicates", "--force", str(job), str(out)])
        assert result.exit_code == 1
        assert "error: specification #0: duplicate field `id` in `Y`" in result.output

    def test_invalid_job_file(self, runner, tmp_path):
        job = tmp_path / "job.json"
        job.write_text(json.dumps(["struct X {}"]))
        result = runner.invoke(struct_derive, [str(job), str(tmp_path / "out.rs")])
        assert result.exit_code == 1
        assert "expected an object with a string `base`" in result.output

    def test_invalid_base(self, runner, tmp_path):
        job = tmp_path / "job.json"
        job.write_text(json.dumps({"base": "struct X {", "derive": []}))
        result = runner.invoke(struct_derive, [str(job), str(tmp_path / "out.rs")])
        assert result.exit_code == 1
        assert "base declaration:" in result.output
        assert not (tmp_path / "out.rs").exists()


if __name__ == "__main__":
    pytest.main([__file__])
