import json
import logging
from pathlib import Path

import click

from .pipeline import CompilerConfig, ModuleGenerator, TypeAstLoader


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--maybe", "-m", "maybe_type_names", multiple=True, help="Type name treated as a Maybe wrapper")
@click.option("--skip-parse-jsdoc", is_flag=True, default=False, help="Ignore annotation tags")
@click.option("--types-import-path", default=None, type=str, help="Module the enums are imported from")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def types_to_zod(config, maybe_type_names, skip_parse_jsdoc, types_import_path, verbose, path, output):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    with open(path) as f:
        document = json.load(f)

    if config is not None:
        with open(config) as f:
            config = CompilerConfig.from_dict(json.load(f))
    else:
        config = CompilerConfig()

    # CLI flags override the config file
    if maybe_type_names:
        config.maybe.type_names.update(maybe_type_names)
    if skip_parse_jsdoc:
        config.skip_parse_annotations = True
    if types_import_path is not None:
        config.types_import_path = types_import_path

    source = TypeAstLoader().load(document, path=document.get("path", str(Path(path).with_suffix(".ts"))))
    result = ModuleGenerator(config).generate(source, output_path=output)

    with open(output, "w") as f:
        f.write(result.code)

    for error in result.errors:
        click.echo(f"Error: {error}", err=True)
    for cycle in result.cycles:
        click.echo(f"Circular dependency: {' -> '.join(cycle)}", err=True)
    if result.has_errors:
        raise SystemExit(1)
