"""Application entry point: one headless global stats run."""

import argparse
import logging
import sys
from pathlib import Path

import orjson
from PySide6.QtCore import QCoreApplication, QTimer

from agent_session_stats.models.provider_stats_model import ProviderStatsModel
from agent_session_stats.services.config_manager import ConfigManager
from agent_session_stats.services.providers import CLAUDE_CODE, CODEX
from agent_session_stats.services.stats_cache import StatsCache
from agent_session_stats.services.stats_engine import GlobalStatsEngine
from agent_session_stats.services.stats_manager import StatsManager
from agent_session_stats.types.stats import GlobalAggregate

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="agent-session-stats",
        description="Aggregate message, token and cost totals across local AI agent session logs.",
    )
    parser.add_argument("--json", action="store_true", help="print the final aggregate as JSON")
    parser.add_argument("--claude-dir", type=Path, help="Claude Code projects directory")
    parser.add_argument("--codex-dir", type=Path, help="Codex sessions directory")
    parser.add_argument("--cache-file", type=Path, help="stats cache file")
    parser.add_argument("--clear-cache", action="store_true", help="discard the cache and rescan everything")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def format_table(stats: GlobalAggregate, show_costs: bool = True) -> str:
    """Render the final aggregate as a plain-text table."""
    model = ProviderStatsModel()
    model.set_snapshot(stats)

    lines = [f"{'Provider':<14}{'Sessions':>10}{'Messages':>12}{'Input':>16}{'Output':>16}{'Cost':>12}"]
    for row in range(model.rowCount()):
        index = model.index(row, 0)
        label = model.data(index, ProviderStatsModel.ProviderLabelRole)
        sessions = model.data(index, ProviderStatsModel.SessionCountRole)
        messages = model.data(index, ProviderStatsModel.MessageCountRole)
        input_tokens = model.data(index, ProviderStatsModel.InputTokensRole)
        output_tokens = model.data(index, ProviderStatsModel.OutputTokensRole)
        if show_costs and model.data(index, ProviderStatsModel.HasCostDataRole):
            cost = f"${model.data(index, ProviderStatsModel.CostUsdRole):,.2f}"
        else:
            cost = "-"
        lines.append(
            f"{label:<14}{sessions:>10,}{messages:>12,}"
            f"{input_tokens:>16,}{output_tokens:>16,}{cost:>12}"
        )
    total_cost = f"${stats.total_cost_usd:,.2f}" if stats.has_cost_data and show_costs else "-"
    lines.append(
        f"{'Total':<14}{stats.total_sessions:>10,}{stats.total_messages:>12,}"
        f"{stats.total_input_tokens:>16,}{stats.total_output_tokens:>16,}{total_cost:>12}"
    )
    return "\n".join(lines)


def _print_progress(stats: GlobalAggregate):
    if stats.is_complete or not stats.total_to_process:
        return
    print(
        f"Processed {stats.processed_count}/{stats.total_to_process} sessions "
        f"({stats.total_sessions} total)",
        file=sys.stderr,
    )


def run(argv: list[str] | None = None) -> int:
    """Compute global stats once and print them."""
    args = _parse_args(argv)

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv)
    app.setApplicationName("Agent Session Stats")
    app.setOrganizationName("agent-session-stats")

    config = ConfigManager()
    debug = args.verbose or config.get_bool("advanced/debugLogging")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    roots = config.provider_roots()
    if args.claude_dir:
        roots[CLAUDE_CODE] = args.claude_dir.expanduser()
    if args.codex_dir:
        roots[CODEX] = args.codex_dir.expanduser()

    cache = StatsCache(args.cache_file.expanduser() if args.cache_file else config.cache_file())
    if args.clear_cache:
        cache.clear()

    engine = GlobalStatsEngine(
        roots=roots,
        cache=cache,
        progress_interval=config.get_int("stats/progressInterval"),
        pricing_model=config.get_string("stats/pricingModel"),
    )
    manager = StatsManager(engine)
    manager.stats_updated.connect(_print_progress)

    def _quit_when_idle():
        if not manager.loading:
            app.quit()

    manager.loading_changed.connect(_quit_when_idle)

    QTimer.singleShot(0, manager.refresh)
    app.exec()
    manager.cleanup()

    result = manager.latest
    if result is None:
        logger.error("Global stats run produced no result")
        return 1

    if args.json:
        print(orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2).decode())
    else:
        print(format_table(result, show_costs=config.get_bool("stats/showCosts")))
    return 0
