import asyncio
import functools
from typing import Any, Callable, Coroutine, Optional, TypeVar

import click

from scalables._cogs.clients import auth
from scalables._cogs.clients import errors as api_errors
from scalables._cogs.configs import configuration
from scalables._cogs.helpers import versions
from scalables._cogs.structs import bodies, errors
from scalables._core.actions import loggers
from scalables._core.engines import coordination

_T = TypeVar('_T')


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def networking_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to build the settings from the CLI options in all commands."""
    @click.option('--request-timeout', type=float, default=None)
    @click.option('--connect-timeout', type=float, default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(request_timeout: Optional[float], connect_timeout: Optional[float],
                *args: Any, **kwargs: Any) -> Any:
        settings = configuration.ScalablesSettings()
        settings.networking.request_timeout = request_timeout
        settings.networking.connect_timeout = connect_timeout
        return fn(*args, settings=settings, **kwargs)

    return wrapper


def run(
        settings: configuration.ScalablesSettings,
        fn: Callable[..., Coroutine[Any, Any, _T]],
) -> _T:
    """ Run an async operation with a fresh provider; report the errors CLI-style. """
    async def _run() -> _T:
        async with auth.ClientProvider(settings=settings) as provider:
            return await fn(provider=provider)

    try:
        return asyncio.run(_run())
    except (errors.ScalablesError, api_errors.APIError) as e:
        raise click.ClickException(str(e)) from e


@click.version_option(version=versions.version or 'unknown', prog_name='scalables')
@click.group(name='scalables', context_settings=dict(
    auto_envvar_prefix='SCALABLES',
))
def main() -> None:
    pass


@main.command()
@logging_options
@networking_options
@click.option('-n', '--namespace', default='default', show_default=True)
@click.argument('kind')
@click.argument('name')
def inspect(
        settings: configuration.ScalablesSettings,
        namespace: str,
        kind: str,
        name: str,
) -> None:
    """ Show a workload's replicas, pods, and conflicting autoscalers. """
    inspection = run(settings, functools.partial(
        coordination.inspect, kind, namespace, name))
    workload = inspection.workload
    click.echo(f"{workload.kind.lower()}/{workload.name} in namespace {workload.namespace}")
    click.echo(f"Replicas: {workload.desired_replicas} desired, "
               f"{workload.current_replicas} current, {workload.ready_replicas} ready")
    if inspection.conflict is not None:
        click.echo(f"Conflict: {inspection.conflict} "
                   f"(horizontalpodautoscaler/{inspection.conflict.autoscaler})")
    click.echo(f"Pods: {len(inspection.pods)}")
    for pod in inspection.pods:
        pod_name = bodies.get_field(pod, 'metadata', 'name', default='?')
        phase = bodies.get_field(pod, 'status', 'phase', default='Unknown')
        click.echo(f"  {pod_name}  {phase}")


@main.command()
@logging_options
@networking_options
@click.option('-n', '--namespace', default='default', show_default=True)
@click.argument('kind')
@click.argument('name')
@click.argument('replicas', type=click.IntRange(min=0))
def scale(
        settings: configuration.ScalablesSettings,
        namespace: str,
        kind: str,
        name: str,
        replicas: int,
) -> None:
    """ Scale a workload to the given replicas, unless an HPA manages it. """
    updated = run(settings, functools.partial(
        coordination.rescale, kind, namespace, name, replicas))
    if updated:
        click.echo(f"{kind.lower()}/{name} scaled to {replicas} replicas.")
    else:
        click.echo(f"{kind.lower()}/{name} already has {replicas} replicas.")
