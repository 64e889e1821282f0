import sys

import click
import numpy as np
import pandas as pd

from specfunpy import log
from specfunpy.api import OPERATIONS
from specfunpy.config import Config
from specfunpy.errors import DomainError, ResultOverflowError, SpecialFunctionError

_log = log.numerics_logger(__name__)


def _parse(kind: str, text: str, dtype):
    try:
        match kind:
            case "i":
                return int(text)
            case "v":
                return [dtype(part) for part in text.split(",") if part.strip()]
            case _:
                return dtype(text)
    except ValueError:
        raise click.UsageError(f"Cannot read {text!r} as {_KIND_NAMES[kind]}") from None


_KIND_NAMES = {
    "i": "a non-negative integer",
    "f": "a real number",
    "v": "a comma separated list of reals",
}


def _operation(name: str):
    if name not in OPERATIONS:
        raise click.UsageError(
            f"Unknown operation {name!r}; run 'specfunpy list' to see all operations"
        )
    return OPERATIONS[name]


@click.group()
@click.option(
    "--config",
    "path_config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a json or yaml config file.",
)
@click.option(
    "--log-level",
    type=str,
    default=None,
    help="Log level (DEBUG, NUMERICS, INFO, WARNING, ...). Overrides the config.",
)
@click.pass_context
def cli(ctx: click.Context, path_config: str | None, log_level: str | None) -> None:
    try:
        config = Config(path_config)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc
    try:
        log.configure(log_level or config.log_level)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level") from exc
    ctx.obj = config


@cli.command(name="list")
def list_operations() -> None:
    """List the operations and their argument kinds."""
    for name, operation in OPERATIONS.items():
        kinds = ", ".join(_KIND_NAMES[kind] for kind in operation.kinds)
        click.echo(f"{name}({kinds})")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("name")
@click.argument("args", nargs=-1)
@click.option(
    "--precision",
    "-p",
    type=str,
    default=None,
    help="Precision width (reduced, standard, extended or an alias).",
)
@click.pass_obj
def evaluate(config: Config, name: str, args: tuple[str, ...], precision: str | None) -> None:
    """Evaluate NAME at ARGS and print the value."""
    operation = _operation(name)
    if len(args) != len(operation.kinds):
        raise click.UsageError(
            f"{name} takes {len(operation.kinds)} argument(s), got {len(args)}"
        )
    try:
        policy = config.policy(precision)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--precision") from exc
    values = [_parse(kind, text, policy.dtype) for kind, text in zip(operation.kinds, args)]
    try:
        result = operation.engine(*values, policy=policy)
    except SpecialFunctionError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(str(result))


@cli.command()
@click.option("--precision", "-p", type=str, default=None, help="Precision width.")
@click.pass_obj
def policy(config: Config, precision: str | None) -> None:
    """Print the precision policy in effect."""
    try:
        record = config.policy(precision)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--precision") from exc
    for field, value in vars(record).items():
        if field == "dtype":
            value = np.dtype(value).name
        elif field == "width":
            value = value.value
        click.echo(f"{field}: {value}")


@cli.command()
@click.argument("name")
@click.option("--start", type=float, required=True, help="First grid point.")
@click.option("--stop", type=float, required=True, help="Last grid point.")
@click.option("--num", type=click.IntRange(min=1), default=50, show_default=True)
@click.option(
    "--fixed",
    multiple=True,
    help="Value of a non-swept argument, in order; repeat for each argument.",
)
@click.option("--precision", "-p", type=str, default=None, help="Precision width.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="CSV file to write; standard output when omitted.",
)
@click.pass_obj
def grid(
    config: Config,
    name: str,
    start: float,
    stop: float,
    num: int,
    fixed: tuple[str, ...],
    precision: str | None,
    output: str | None,
) -> None:
    """Evaluate NAME over an evenly spaced grid of its last real argument."""
    operation = _operation(name)
    kinds = operation.kinds
    if "f" not in kinds or "v" in kinds:
        raise click.UsageError(f"{name} has no real argument that can be swept")
    swept = kinds.rindex("f")
    if len(fixed) != len(kinds) - 1:
        raise click.UsageError(
            f"{name} needs {len(kinds) - 1} --fixed value(s), got {len(fixed)}"
        )
    try:
        policy = config.policy(precision)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--precision") from exc

    others = [kind for position, kind in enumerate(kinds) if position != swept]
    parsed = [_parse(kind, text, policy.dtype) for kind, text in zip(others, fixed)]
    points = np.linspace(start, stop, num, dtype=policy.dtype)

    values = np.full(points.shape, np.nan, dtype=policy.dtype)
    failures = 0
    for i, point in enumerate(points):
        args = list(parsed)
        args.insert(swept, point)
        try:
            values[i] = operation.engine(*args, policy=policy)
        except (DomainError, ResultOverflowError) as exc:
            failures += 1
            _log.debug("%s at %s: %s", name, point, exc)
        except SpecialFunctionError as exc:
            raise click.ClickException(str(exc)) from exc
    if failures:
        _log.warning("%s: %d of %d grid points have no finite value", name, failures, num)

    frame = pd.DataFrame({"x": points, name: values})
    if output is None:
        frame.to_csv(sys.stdout, index=False)
    else:
        frame.to_csv(output, index=False)
        click.echo(f"Wrote {num} rows to {output}")
