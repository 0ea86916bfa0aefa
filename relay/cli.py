import asyncio
import click
import sys

from relay.main import DEFAULT_CONFIG_PATH, build_outputs, load_config, main as run_relay

@click.group()
def cli():
    """Relay Discord messages to configurable outputs.

    Messages from every guild and direct message the bot can see are
    written to the outputs listed in the configuration file.
    """

@cli.command()
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True,
              help="Path to the YAML configuration file.")
@click.option("--token", default=None, help="Bot authentication token, overrides the configuration.")
def run(config_path, token):
    """Connect to Discord and relay messages until interrupted."""
    sys.exit(asyncio.run(run_relay(config_path, token)))

@cli.command("check-config")
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True,
              help="Path to the YAML configuration file.")
def check_config(config_path):
    """Validate the configuration and list the outputs."""
    try:
        config = load_config(config_path)
        outputs = build_outputs(config)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Configuration error: {e}")
        sys.exit(2)

    click.echo(f"Configuration OK: {config_path}")
    click.echo("=" * 60)
    for output in outputs:
        click.echo(f"  {output.name} ({type(output).__name__})")

def main():
    """Entry point for the relay command."""
    cli()

if __name__ == "__main__":
    main()
