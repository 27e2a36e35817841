"""
Configuration for the derive pipeline.

Covers the driver checks, the renderer and output file handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    atomic_write: bool = True


@dataclass
class RenderConfig:
    """Configuration for rendering derived declarations as text."""

    # Indentation of fields and variants
    indent: str = "    "

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Emit compile_error!("...") for failed specifications instead of skipping them
    emit_compile_errors: bool = True

    # Blank lines between rendered declarations
    blank_lines_between: int = 1


@dataclass
class DeriveConfig:
    """Configuration options for deriving types."""

    # Reject derived types with two fields (or variants) of the same name
    check_duplicate_names: bool = False

    # Renderer configuration
    render: RenderConfig = field(default_factory=RenderConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> DeriveConfig:
        """Create a config from a dictionary.

        Unknown keys are ignored.

        Raises:
            ValueError: If `output.mode` is not a known OutputMode
        """
        config = DeriveConfig()
        for k, v in d.items():
            if k == "render" and isinstance(v, dict):
                known = {f.name for f in fields(RenderConfig)}
                config.render = RenderConfig(**{key: value for key, value in v.items() if key in known})
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "check_duplicate_names": self.check_duplicate_names,
            "render": {
                "indent": self.render.indent,
                "add_generation_comment": self.render.add_generation_comment,
                "emit_compile_errors": self.render.emit_compile_errors,
                "blank_lines_between": self.render.blank_lines_between,
            },
            "output": {
                "mode": self.output.mode.value,
                "atomic_write": self.output.atomic_write,
            },
        }
