"""CLI entry point for the FX trade journal."""

from __future__ import annotations

import json
import math
import sys
from datetime import datetime

import click

from .core.config import Settings, load_settings
from .core.durations import epoch_ms, humanize_duration
from .core.errors import CooldownActiveError, JournalError
from .core.models import ClosedTrade, Summary
from .journal import (
    ConsecutiveLossGuard,
    TradeExporter,
    apply_tags,
    goal_projection,
    identity_key,
    long_term_projection,
    parse,
    parse_tag_input,
    remove_trades,
    summarize,
    tag_analysis,
)
from .journal.formatting import (
    fmt_date,
    fmt_int,
    fmt_num,
    fmt_rate,
    fmt_signed,
    fmt_signed_int,
)
from .observability.logger import get_logger, new_run_id, setup_logging
from .storage.ledger_store import LedgerStore


class _Context:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.store = LedgerStore.from_config(settings.storage)


pass_ctx = click.make_pass_decorator(_Context)


@click.group()
@click.option("--config", default="configs/default.toml", help="Config file path")
@click.option("--data-dir", default=None, help="Override storage.data_dir")
@click.pass_context
def main(ctx: click.Context, config: str, data_dir: str | None) -> None:
    """FX trade-log journal."""
    overrides: dict = {}
    if data_dir:
        overrides["storage"] = {"data_dir": data_dir}
    try:
        settings = load_settings(config_path=config, overrides=overrides)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    new_run_id()
    get_logger(__name__).debug(
        "cli_start",
        command=ctx.invoked_subcommand,
        data_dir=settings.storage.data_dir,
    )
    ctx.obj = _Context(settings)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _load(app: _Context) -> list[ClosedTrade]:
    try:
        return app.store.load()
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc


def _print_summary(summary: Summary) -> None:
    click.echo(f"  Trades:       {summary.count}")
    click.echo(f"  Win rate:     {fmt_rate(summary.win_rate)}")
    click.echo(f"  Total pips:   {fmt_signed(summary.total_pips, 1)}")
    click.echo(f"  Avg pips:     {fmt_signed(summary.avg_pips, 1)}")
    click.echo(f"  Total P&L:    {fmt_signed_int(summary.total_qty_pl)}")
    click.echo(f"  Expectancy:   {fmt_signed_int(summary.expectancy_qty)}")
    payoff = f"{summary.payoff:.2f}" if math.isfinite(summary.payoff) else "-"
    click.echo(f"  Payoff:       {payoff}")
    click.echo(f"  Max DD:       {fmt_num(summary.max_dd)} pips")
    click.echo(f"  Avg hold:     {summary.avg_hold or '-'}")


def _print_trades(trades: list[ClosedTrade]) -> None:
    for t in trades:
        click.echo(
            f"  {fmt_date(t.exit_at):19s}  {t.symbol:8s} {t.side.value:4s} "
            f"{t.size:>6g}  {fmt_signed(t.pips, 1):>7s} pips  "
            f"{fmt_signed_int(int(t.pl_text)) if t.pl_text else '-':>8s}  "
            f"{t.hold or '':10s} {','.join(t.tags)}"
        )
        click.echo(f"      key={identity_key(t)}")


@main.command("parse")
@click.argument("source", default="-")
@click.option("--json", "as_json", is_flag=True, help="Emit the parse result as JSON")
def parse_cmd(source: str, as_json: bool) -> None:
    """Parse a broker log (file or '-' for stdin) without saving."""
    result = parse(_read_text(source))
    if as_json:
        click.echo(result.model_dump_json(by_alias=True, indent=2))
        return
    click.echo(f"Closed trades: {len(result.closed_trades)}")
    _print_trades(result.closed_trades)
    click.echo(f"Open positions: {len(result.open_positions)}")
    for pos in result.open_positions:
        click.echo(f"  {pos.symbol} {pos.side.value} {pos.size:g} @ {pos.entry_price}")
    for err in result.errors:
        click.echo(f"warning: {err}", err=True)
    click.echo("Summary:")
    _print_summary(summarize(result.closed_trades))


@main.command("import")
@click.argument("source", default="-")
@pass_ctx
def import_cmd(app: _Context, source: str) -> None:
    """Parse a broker log and merge its trades into the ledger.

    Refused while a losing-streak cooldown is running.
    """
    cfg = app.settings.discipline
    guard = ConsecutiveLossGuard(
        limit=cfg.consecutive_loss_limit, cooldown_minutes=cfg.cooldown_minutes
    )
    now = datetime.now()
    try:
        until = app.store.active_cooldown(now)
        if until is not None:
            raise CooldownActiveError(until)
        outcome = app.store.import_text(_read_text(source))
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    for err in outcome.parsed.errors:
        click.echo(f"warning: {err}", err=True)
    click.echo(outcome.message)
    if not outcome.added:
        return
    alert = guard.check(app.store.load(), now=now)
    if alert:
        app.store.save_cooldown(alert.until)
        click.echo(
            f"{alert.streak} losses in a row: take a break until "
            f"{alert.until:%H:%M}."
        )


@main.command()
@click.option("--by-tag", is_flag=True, help="Also summarise each tag")
@pass_ctx
def summary(app: _Context, by_tag: bool) -> None:
    """Show performance statistics for the saved ledger."""
    trades = _load(app)
    click.echo("Ledger:")
    _print_summary(summarize(trades))
    if by_tag:
        for row in tag_analysis(trades):
            click.echo(f"\n[{row.tag_name}]")
            _print_summary(row.summary)


@main.command("list")
@pass_ctx
def list_cmd(app: _Context) -> None:
    """List ledger trades with their identity keys."""
    _print_trades(_load(app))


@main.command()
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="csv")
@click.option(
    "--period",
    type=click.Choice(["daily", "weekly", "monthly"]),
    default=None,
    help="Emit a periodic report instead of the trade list",
)
@pass_ctx
def export(app: _Context, fmt: str, period: str | None) -> None:
    """Export the ledger as CSV / JSON, or a periodic report as JSON."""
    trades = _load(app)
    exporter = TradeExporter()
    if period:
        report = exporter.periodic_report(trades, period=period)
        click.echo(json.dumps(report, indent=2, ensure_ascii=False))
    elif fmt == "json":
        click.echo(exporter.to_json(trades))
    else:
        click.echo(exporter.to_csv(trades), nl=False)


@main.command()
@pass_ctx
def snapshot(app: _Context) -> None:
    """Save the ledger as one snapshot per trading day."""
    trades = _load(app)
    if not trades:
        click.echo("No trades to save.")
        return
    snaps = app.store.save_daily_snapshots(trades)
    total = sum(s.count for s in snaps)
    click.echo(f"Saved {len(snaps)} days, {total} trades.")


@main.command()
@click.option("--reset", is_flag=True, help="Delete all saved snapshots")
@pass_ctx
def snapshots(app: _Context, reset: bool) -> None:
    """List saved daily snapshots (newest first)."""
    if reset:
        removed = app.store.reset_history()
        click.echo(f"Removed {removed} snapshots.")
        return
    for snap in app.store.list_snapshots():
        click.echo(
            f"  {snap.date_key}  {snap.count:3d} trades  "
            f"win {fmt_rate(snap.summary.win_rate)}  "
            f"P&L {fmt_signed_int(snap.summary.total_qty_pl)}"
        )


@main.command()
@pass_ctx
def projection(app: _Context) -> None:
    """Project the account balance and the days left to the target."""
    trades = _load(app)
    account = app.settings.account
    total = summarize(trades).total_qty_pl
    proj = long_term_projection(trades, account.start_balance)
    click.echo(f"Current balance: {fmt_int(account.start_balance + total)}")
    if proj is not None:
        click.echo(f"Avg daily P&L:   {fmt_signed_int(proj.avg_daily_pl)}")
        for label, point in (("1 week", proj.weekly), ("1 month", proj.monthly), ("1 year", proj.yearly)):
            click.echo(f"  {label:8s} {fmt_int(point.balance)} ({fmt_signed_int(point.gain)})")
    goal = goal_projection(account.target_balance, account.start_balance, total, proj)
    days = "-" if goal.days == float("inf") else f"{goal.days:g}"
    click.echo(f"Target {fmt_int(account.target_balance)}: {goal.status.value} (days: {days})")


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--tags", required=True, help="Comma-separated tags ('' clears)")
@pass_ctx
def tag(app: _Context, keys: tuple[str, ...], tags: str) -> None:
    """Replace the tags of the trades with the given identity KEYS."""
    try:
        updated = apply_tags(_load(app), set(keys), parse_tag_input(tags))
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    app.store.save(updated)
    click.echo(f"Updated tags on {len(set(keys))} trades.")


@main.command()
@click.argument("keys", nargs=-1, required=True)
@pass_ctx
def delete(app: _Context, keys: tuple[str, ...]) -> None:
    """Remove the trades with the given identity KEYS from the ledger."""
    try:
        remaining = remove_trades(_load(app), set(keys))
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    app.store.save(remaining)
    click.echo(f"Deleted {len(set(keys))} trades.")


@main.command()
@pass_ctx
def cooldown(app: _Context) -> None:
    """Show the running cooldown, or the current losing streak."""
    now = datetime.now()
    until = app.store.active_cooldown(now)
    if until is not None:
        left = humanize_duration(epoch_ms(until) - epoch_ms(now))
        click.echo(f"Cooldown active until {until:%H:%M:%S} ({left} left).")
        return
    streak = ConsecutiveLossGuard.losing_streak(_load(app))
    click.echo(f"Losing streak: {streak} (limit {app.settings.discipline.consecutive_loss_limit})")
