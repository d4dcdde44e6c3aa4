"""
BUIDL CLI - Command Line Interface for the BUIDL token ledger

Main entry point for all CLI commands.
"""

import json
import click
from pathlib import Path

from buidl.utils.logger import setup_logging, get_logger

logger = get_logger("cli")

# Hardhat accounts #1 and #2, used by the demo next to the configured owner
RANDOM_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
ANOTHER_ADDRESS = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


def _format_result(result) -> str:
    """One-line human summary of a CallResult."""
    if result.success:
        if result.value is None:
            return f"✓ {result.op}"
        return f"✓ {result.op} -> {result.value}"
    return f"✗ {result.op}: {result.kind.value} ({result.reason})"


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="Load BUIDL_* settings from a .env file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file):
    """BUIDL token ledger - ERC-20 accounting engine"""
    import logging
    from buidl.core.config import load_config

    try:
        config = load_config(env_file)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="configuration")

    level = logging.DEBUG if debug else config.level
    setup_logging(level=level, log_dir=str(config.log_dir), log_to_file=config.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Info Command
# =============================================================================


@cli.command("info")
@click.pass_context
def info(ctx):
    """Show token configuration"""
    config = ctx.obj["config"]
    click.echo("BUIDL Token")
    click.echo("-" * 40)
    click.echo(f"  Name: {config.name}")
    click.echo(f"  Symbol: {config.symbol}")
    click.echo(f"  Decimals: {config.decimals}")
    click.echo(f"  Initial supply: {config.initial_supply}")
    click.echo(f"  Owner: {config.owner}")
    click.echo(f"  Mint restricted: {'yes' if config.restrict_mint else 'no'}")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.pass_context
def demo(ctx):
    """Walk through mint, burn, approve and transfer on a fresh ledger"""
    from buidl.core.service import LedgerService

    config = ctx.obj["config"]
    owner = config.owner

    def fresh():
        return LedgerService.from_config(config)

    click.echo("=" * 60)
    click.echo(f"  {config.symbol} LEDGER - DEMO")
    click.echo("=" * 60)
    click.echo()

    click.echo(f"📦 Each step starts from a fresh ledger: supply={config.initial_supply}, owner={owner[:10]}...")
    click.echo()

    steps = [
        ("mint -1", [("mint", owner, {"amount": -1})]),
        ("mint 10", [("mint", owner, {"amount": 10})]),
        ("burn -1", [("burn", owner, {"amount": -1})]),
        ("burn 100 from an empty account", [("burn", RANDOM_ADDRESS, {"amount": 100})]),
        ("burn 100", [("burn", owner, {"amount": 100})]),
        ("approve 10", [("approve", owner, {"spender": RANDOM_ADDRESS, "amount": 10})]),
        ("transfer 10", [("transfer", owner, {"to": RANDOM_ADDRESS, "amount": 10})]),
        ("transfer more than owned", [
            ("transfer", owner, {"to": RANDOM_ADDRESS, "amount": config.initial_supply + 1}),
        ]),
        ("transferFrom after the owner burned everything", [
            ("approve", owner, {"spender": RANDOM_ADDRESS, "amount": 10}),
            ("burn", owner, {"amount": config.initial_supply}),
            ("transferFrom", RANDOM_ADDRESS, {"from": owner, "to": ANOTHER_ADDRESS, "amount": 10}),
        ]),
        ("transferFrom within allowance", [
            ("approve", owner, {"spender": RANDOM_ADDRESS, "amount": 10}),
            ("transferFrom", RANDOM_ADDRESS, {"from": owner, "to": ANOTHER_ADDRESS, "amount": 10}),
        ]),
    ]

    for title, calls in steps:
        service = fresh()
        click.echo(f"🔹 {title}")
        for op, caller, params in calls:
            result = service.call(op, caller, **params)
            click.echo(f"    {_format_result(result)}")
        ledger = service.ledger
        click.echo(
            f"    supply={ledger.total_supply} "
            f"owner={ledger.balance_of(owner)} "
            f"random={ledger.balance_of(RANDOM_ADDRESS)} "
            f"another={ledger.balance_of(ANOTHER_ADDRESS)} "
            f"allowance(owner, random)={ledger.allowance(owner, RANDOM_ADDRESS)}"
        )
        click.echo()

    click.echo("✅ Demo complete!")


# =============================================================================
# Run Command
# =============================================================================


@cli.command("run")
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--initial-supply", type=int, default=None, help="Override the configured initial supply")
@click.option("--owner", default=None, help="Override the configured owner address")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any call failed")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def run(ctx, script, initial_supply, owner, strict, as_json):
    """Replay a JSON list of calls against a fresh ledger

    Each entry looks like {"op": "transfer", "caller": "0x...",
    "params": {"to": "0x...", "amount": 10}}.
    """
    from dataclasses import replace
    from pydantic import ValidationError
    from buidl.core.service import LedgerService

    config = ctx.obj["config"]
    try:
        if initial_supply is not None:
            config = replace(config, initial_supply=initial_supply)
        if owner is not None:
            config = replace(config, owner=owner)
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        calls = json.loads(script.read_text())
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the digit limit
        raise click.ClickException(f"{script}: invalid JSON ({e})")
    if not isinstance(calls, list):
        raise click.ClickException(f"{script}: expected a JSON list of calls")

    service = LedgerService.from_config(config)
    results = []
    failures = 0

    for i, call in enumerate(calls):
        try:
            result = service.execute(call)
        except (KeyError, TypeError, ValidationError) as e:
            raise click.ClickException(f"call {i}: malformed request ({e})")
        results.append(result)
        if not result.success:
            failures += 1
        if not as_json:
            click.echo(f"[{i}] {_format_result(result)}")

    snapshot = service.ledger.snapshot()
    if as_json:
        click.echo(json.dumps({
            "results": [r.to_dict() for r in results],
            "total_supply": snapshot.total_supply,
            "balances": dict(snapshot.balances),
        }, indent=2, default=str))
    else:
        click.echo("-" * 40)
        click.echo(f"  Total supply: {snapshot.total_supply}")
        for account, balance in sorted(snapshot.balances.items()):
            click.echo(f"  {account}: {balance}")
        click.echo(f"  {len(results) - failures} applied, {failures} rejected")

    logger.debug(f"Replayed {len(results)} calls from {script}")
    if strict and failures:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
