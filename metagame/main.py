"""
CLI entry point for the metagame analyzer.
"""
import argparse
import logging
import sys
from pathlib import Path

from . import settings
from .exceptions import MetagameError


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Tournament Metagame Analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m metagame.main classify                      # Classify all decklists
  python -m metagame.main matchups --top-n 8            # Matchup matrix, top 8 + Other
  python -m metagame.main aggregate "Mono Red" -o 2     # Consensus list, 2nd order
  python -m metagame.main web                           # Start JSON API
        """
    )
    parser.add_argument(
        "--tournaments", "-t",
        type=Path,
        default=Path(settings.TOURNAMENTS_DIR),
        help=f"Directory of tournament JSON files (default: {settings.TOURNAMENTS_DIR})"
    )
    parser.add_argument(
        "--archetypes", "-a",
        type=Path,
        default=Path(settings.ARCHETYPES_FILE),
        help=f"Archetype definition YAML (default: {settings.ARCHETYPES_FILE})"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("classify", help="Classify decklists into archetypes")

    matchups_parser = subparsers.add_parser("matchups", help="Show matchup matrix and archetype stats")
    matchups_parser.add_argument("--top-n", type=int, default=0, help="Keep only the top N archetypes (default: all)")
    matchups_parser.add_argument("--min-share", type=float, default=0.0, help="Fold archetypes below this share into Other")
    matchups_parser.add_argument("--include-mirrors", action="store_true", help="Count mirror matches")
    matchups_parser.add_argument("--exclude-playoffs", action="store_true", help="Skip playoff rounds")
    matchups_parser.add_argument("--csv", type=Path, help="Write the win-rate matrix to a CSV file")

    aggregate_parser = subparsers.add_parser("aggregate", help="Build the consensus decklist for an archetype")
    aggregate_parser.add_argument("archetype", help="Archetype name")
    aggregate_parser.add_argument("--order", "-o", type=int, choices=[1, 2, 3], default=1, help="NOKA order (default: 1)")

    subparsers.add_parser("attribution", help="Compare classified and self-reported archetypes")

    validate_parser = subparsers.add_parser("validate", help="Validate an archetype YAML file")
    validate_parser.add_argument("file", type=Path, nargs="?", help="File to validate (default: --archetypes)")

    web_parser = subparsers.add_parser("web", help="Start the JSON API")
    web_parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    web_parser.add_argument("--port", "-p", type=int, default=5000, help="Port to bind to (default: 5000)")
    web_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(levelname)s: %(message)s",
    )

    commands = {
        "classify": run_classify,
        "matchups": run_matchups,
        "aggregate": run_aggregate,
        "attribution": run_attribution,
        "validate": run_validate,
        "web": run_web,
    }
    if args.command not in commands:
        parser.print_help()
        return 0

    try:
        return commands[args.command](args) or 0
    except MetagameError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


def _data_manager(args):
    from .web.data_manager import DataManager

    DataManager.reset()
    return DataManager(tournaments_dir=args.tournaments, archetypes_file=args.archetypes)


def run_classify(args):
    """Classify decklists and print a per-archetype summary."""
    from collections import Counter

    manager = _data_manager(args)
    results = manager.get_classifications()

    archetypes = Counter()
    methods = Counter()
    for batch in results.values():
        for r in batch:
            archetypes[r.archetype] += 1
            methods[r.method] += 1

    total = sum(methods.values())
    print(f"\n📊 Classification Summary")
    print("=" * 50)
    print(f"Tournaments: {len(results)}")
    print(f"Decklists:   {total}")
    for method in ("signature", "knn", "unknown"):
        print(f"   {method:10}: {methods[method]}")

    print(f"\n🏷️  Archetypes:")
    for name, count in sorted(archetypes.items(), key=lambda x: (-x[1], x[0])):
        print(f"   {name:30} {count:4}")


def run_matchups(args):
    """Print the matchup matrix and archetype stats."""
    import pandas as pd

    from .analyzer.matchups import MatrixOptions, matrix_to_dataframe, stats_to_dataframe
    from .utils.format import pct

    manager = _data_manager(args)
    options = MatrixOptions(
        exclude_mirrors=not args.include_mirrors,
        min_metagame_share=args.min_share,
        top_n=args.top_n,
        exclude_playoffs=args.exclude_playoffs,
    )
    report = manager.matchup_report(options)

    print(f"\n🏆 Archetype Stats")
    print("=" * 50)
    for s in report.stats:
        print(f"   {s.name:30} Share: {pct(s.metagame_share):>6} | Win rate: {pct(s.overall_winrate):>6} "
              f"| {s.wins}-{s.losses}-{s.draws} (IDs: {s.intentional_draws}, byes: {s.byes})")

    df = matrix_to_dataframe(report.matrix)
    print(f"\n⚔️  Matchup Matrix (row vs column)")
    print(df.apply(lambda col: col.map(lambda v: pct(None if pd.isna(v) else v))).to_string())

    if args.csv:
        df.to_csv(args.csv)
        stats_to_dataframe(report.stats).to_csv(args.csv.with_name(f"{args.csv.stem}_stats.csv"), index=False)
        print(f"\n✅ Saved to: {args.csv}")


def run_aggregate(args):
    """Print the consensus decklist for an archetype."""
    manager = _data_manager(args)
    deck = manager.aggregate(args.archetype, order=args.order)

    if deck.deck_count == 0:
        print(f"❌ No decklists found for {args.archetype}")
        return 1

    print(f"\n🃏 {args.archetype} (order {args.order}, {deck.deck_count} decklists)")
    best = manager.best_decklist(args.archetype)
    if best is not None:
        print(f"🥇 Best finish: {best.player_name} (#{best.player_rank}, {best.tournament_name}), "
              f"{best.decklist.mainboard_size} main / {best.decklist.sideboard_size} side")
    print("=" * 50)
    for entry in deck.mainboard:
        print(f"   {entry.quantity} {entry.card_name}")
    if deck.sideboard:
        print("\n   Sideboard")
        for entry in deck.sideboard:
            print(f"   {entry.quantity} {entry.card_name}")


def run_attribution(args):
    """Print classified vs reported archetype agreement."""
    from .analyzer.attribution import agreement_rate
    from .utils.format import pct

    manager = _data_manager(args)
    matrix = manager.attribution()
    if matrix is None:
        print("⚠️ No classified decklists found.")
        return 0

    print(f"\n🔍 Attribution ({matrix.grand_total} decklists, agreement {pct(agreement_rate(matrix))})")
    print("=" * 50)
    for i, classified in enumerate(matrix.classified_archetypes):
        top = sorted(
            ((matrix.cells[i][j], reported) for j, reported in enumerate(matrix.reported_archetypes) if matrix.cells[i][j]),
            key=lambda x: (-x[0], x[1]),
        )[:3]
        reported = ", ".join(f"{name} ({count})" for count, name in top)
        print(f"   {classified:30} {matrix.row_totals[i]:4}  <- {reported}")


def run_validate(args):
    """Validate an archetype YAML file."""
    from .data.archetypes import validate_archetype_yaml

    path = args.file or args.archetypes
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"❌ File not found: {path}", file=sys.stderr)
        return 1

    result = validate_archetype_yaml(content)
    for warning in result.warnings:
        print(f"⚠️  {warning}")
    for error in result.errors:
        print(f"❌ {error}")

    if result.ok:
        print(f"✅ {path}: {result.archetype_count} archetypes")
        return 0
    return 1


def run_web(args):
    """Run the web interface."""
    from .web import app as web_app

    web_app.data_manager = _data_manager(args)

    print(f"🌐 Starting web interface at http://{args.host}:{args.port}")
    web_app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    sys.exit(main())
