import json
import logging
import sys
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .pipeline import AtomicWriter, DeriveConfig, Deriver, OutputMode, TypeDefRenderer
from .pipeline.errors import DeriveError

logger = logging.getLogger(__name__)


def load_job(path: str) -> tuple[str, list[str]]:
    """
    Load a job file.

    A job file is a JSON object with the base declaration under "base" and
    the list of change specifications under "derive".

    Raises:
        click.ClickException: If the file does not have that layout
    """
    with open(path, encoding="utf-8") as f:
        job = json.load(f)

    if not isinstance(job, dict) or not isinstance(job.get("base"), str):
        raise click.ClickException(f"{path}: expected an object with a string `base`")
    specs = job.get("derive", [])
    if not isinstance(specs, list) or not all(isinstance(s, str) for s in specs):
        raise click.ClickException(f"{path}: `derive` must be a list of strings")
    return job["base"], specs


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--check-duplicates",
    is_flag=True,
    default=False,
    help="Reject derived types that declare a field or variant name twice",
)
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite OUTPUT if it exists")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log each derivation")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def struct_derive(config, check_duplicates, force, verbose, path, output):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            try:
                config = DeriveConfig.from_dict(json.load(f))
            except ValueError as e:
                raise click.ClickException(f"{config}: {e}") from e
    else:
        config = DeriveConfig()

    # CLI flags override the config file
    if check_duplicates:
        config.check_duplicate_names = True
    if force:
        config.output.mode = OutputMode.FORCE

    base, specs = load_job(path)
    try:
        deriver = Deriver(base, config)
    except DeriveError as e:
        raise click.ClickException(f"base declaration: {e}") from e

    results = deriver.derive_all(specs)
    renderer = TypeDefRenderer(config.render)
    out = renderer.render_results(results, reconstruct_command_line(struct_derive))

    output_path = Path(output)
    writer = AtomicWriter()
    try:
        if config.output.mode == OutputMode.ERROR_IF_EXISTS:
            writer.write_if_not_exists(output_path, out)
        elif config.output.atomic_write:
            writer.write(output_path, out)
        else:
            output_path.write_text(out, encoding="utf-8")
    except FileExistsError as e:
        raise click.ClickException(str(e)) from e
    logger.debug("Wrote %d declaration(s) to %s", len(results), output_path)

    failures = [r for r in results if not r.ok]
    for result in failures:
        label = f"`{result.name}`" if result.name else f"#{result.index}"
        click.echo(f"error: specification {label}: {result.error}", err=True)
    if failures:
        sys.exit(1)
