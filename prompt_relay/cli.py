"""CLI application for relaying prompts to chat-completion APIs"""
import click
import logging
import sys
from typing import Optional

from . import __version__
from .config import RelaySettings, load_env, load_settings, timeout_from_env, verbose_from_env
from .relay import (
    PromptRelay,
    describe_error,
    is_success,
    resolve_model,
    run_async,
    run_relay,
    run_relay_config,
    run_relay_secret,
)


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit(output: str):
    """Write the single result string and exit with its outcome"""
    click.echo(output)
    sys.exit(0 if is_success(output) else 1)


def _settings(ctx: click.Context, as_output: bool = False) -> RelaySettings:
    """
    Load settings on first use

    Args:
        ctx: Click context
        as_output: Report a loading failure as the command's single output line
    """
    if "settings" not in ctx.obj:
        try:
            settings = load_settings(ctx.obj["config_file"])
        except ValueError as e:
            if as_output:
                _emit(describe_error(e))
            click.echo(f"✗ Error loading settings: {e}", err=True)
            sys.exit(1)
        if settings.verbose and not ctx.obj["verbose"]:
            ctx.obj["verbose"] = True
            logging.getLogger().setLevel(logging.DEBUG)
        ctx.obj["settings"] = settings
    return ctx.obj["settings"]


def _relay_for(ctx: click.Context, provider: Optional[str], timeout: Optional[float] = None) -> PromptRelay:
    return PromptRelay(profile=provider, timeout=timeout, verbose=ctx.obj["verbose"])


@click.group()
@click.version_option(version=__version__)
@click.option('--config-file', type=click.Path(), envvar='RELAY_CONFIG_FILE', help='YAML settings file')
@click.option('-v', '--verbose', is_flag=True, help='Log request diagnostics (keys are masked)')
@click.pass_context
def cli(ctx, config_file: Optional[str], verbose: bool):
    """Prompt Relay - send one prompt to a chat-completion API"""
    load_env()
    verbose = verbose or verbose_from_env()
    _setup_logging(verbose)
    ctx.obj = {"config_file": config_file, "verbose": verbose}


# Commands taking credentials as input never load settings; the provider
# falls back to RELAY_PROVIDER, resolved inside the relay boundary.

@cli.command()
@click.argument('endpoint')
@click.argument('api_key')
@click.argument('model')
@click.argument('prompt')
@click.option('--provider', type=click.Choice(['openai', 'anthropic']), help='Provider profile')
@click.pass_context
def ask(ctx, endpoint: str, api_key: str, model: str, prompt: str, provider: Optional[str]):
    """Relay PROMPT to MODEL at ENDPOINT using API_KEY"""
    relay = _relay_for(ctx, provider, timeout_from_env())
    _emit(run_async(run_relay(endpoint, api_key, model, prompt, relay=relay)))


@cli.command(name='ask-config')
@click.argument('config_json')
@click.argument('model')
@click.argument('prompt')
@click.option('--provider', type=click.Choice(['openai', 'anthropic']), help='Provider profile')
@click.pass_context
def ask_config(ctx, config_json: str, model: str, prompt: str, provider: Optional[str]):
    """Relay PROMPT using a {"openai": {"url", "apiKey"}} configuration string"""
    relay = _relay_for(ctx, provider, timeout_from_env())
    _emit(run_async(run_relay_config(config_json, model, prompt, relay=relay)))


@cli.command(name='ask-secret')
@click.argument('model')
@click.argument('prompt')
@click.option('--secret', envvar='RELAY_SECRET', default='', help='Secret payload JSON (or RELAY_SECRET)')
@click.option('--provider', type=click.Choice(['openai', 'anthropic']), default='anthropic',
              help='Provider profile')
@click.pass_context
def ask_secret(ctx, model: str, prompt: str, secret: str, provider: str):
    """Relay PROMPT using credentials from a secret payload"""
    relay = _relay_for(ctx, provider, timeout_from_env())
    _emit(run_async(run_relay_secret(secret, model, prompt, relay=relay)))


def _ask_with_settings(ctx: click.Context, model: str, prompt: str):
    settings = _settings(ctx, as_output=True)
    relay = _relay_for(ctx, settings.provider, settings.timeout)
    _emit(run_async(run_relay(settings.api_url, settings.api_key, resolve_model(model), prompt, relay=relay)))


@cli.command(name='ask-default')
@click.argument('model')
@click.argument('prompt')
@click.pass_context
def ask_default(ctx, model: str, prompt: str):
    """Relay PROMPT to MODEL using the configured endpoint and key"""
    _ask_with_settings(ctx, model, prompt)


@cli.command()
@click.argument('prompt')
@click.pass_context
def gpt4(ctx, prompt: str):
    """Ask GPT-4 a question"""
    _ask_with_settings(ctx, "gpt4", prompt)


@cli.command()
@click.argument('prompt')
@click.pass_context
def gpt3n5(ctx, prompt: str):
    """Ask GPT-3.5 a question"""
    _ask_with_settings(ctx, "gpt3n5", prompt)


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Show current configuration"""
    settings = _settings(ctx)

    click.echo("Current Configuration")
    click.echo("=" * 40)
    for key, value in settings.as_dict.items():
        click.echo(f"{key}: {value if value not in (None, '') else 'Not set'}")


@config.command()
@click.pass_context
def check(ctx):
    """Check configuration validity"""
    settings = _settings(ctx)

    click.echo("Checking configuration...")

    errors = settings.problems()
    warnings = []
    if settings.timeout is None:
        warnings.append("No request timeout configured (RELAY_TIMEOUT)")

    if errors:
        click.echo("\n✗ Errors:")
        for error in errors:
            click.echo(f"  - {error}")

    if warnings:
        click.echo("\n⚠ Warnings:")
        for warning in warnings:
            click.echo(f"  - {warning}")

    if not errors and not warnings:
        click.echo("✓ Configuration is valid")

    sys.exit(1 if errors else 0)


if __name__ == '__main__':
    cli()
