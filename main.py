"""Main entry point for the ecosystem game.

This module provides command-line options to run the game:
- Web mode (default): FastAPI backend for the drag-and-drop UI
- Headless mode: plays a full game automatically and logs each day
"""

import argparse
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
)

logger = logging.getLogger(__name__)


def run_web_server():
    """Run the web server the UI talks to."""
    from ecosim.config.server import SEPARATOR_WIDTH

    try:
        import uvicorn

        from ecosim_server.main import app
    except ImportError as e:
        logger.error("Error: Required dependencies not installed: %s", e)
        logger.error("Install with: pip install -e .")
        sys.exit(1)

    port = app.state.context.api_port
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("ECOSYSTEM GAME - WEB SERVER")
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("API docs available at http://localhost:%d/docs", port)
    logger.info("Press Ctrl+C to stop the server")
    logger.info("=" * SEPARATOR_WIDTH)

    uvicorn.run(app, host="0.0.0.0", port=port)


def run_headless(seed=None, days=None):
    """Play one game with the greedy placement policy.

    Args:
        seed: Optional random seed for reproducible drafts
        days: Optional override for the game length
    """
    from ecosim.autoplay import play_headless
    from ecosim.config import GameConfig
    from ecosim.config.server import SEPARATOR_WIDTH
    from ecosim.session import GameSession

    config = GameConfig(total_days=days) if days else GameConfig()
    session = GameSession(config=config, seed=seed)
    won = play_headless(session)

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("%s with %d points", "WON" if won else "LOST", session.total_score)
    counts = session.store.level_counts()
    for level, count in counts.items():
        logger.info("  %-10s %d alive", level.value, count)
    logger.info("=" * SEPARATOR_WIDTH)
    return 0 if won else 1


def main():
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Ecosystem Day-Simulation Game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run web server (default)
  python main.py

  # Play one automatic game
  python main.py --headless

  # Reproducible short game
  python main.py --headless --seed 42 --days 5
        """,
    )
    parser.add_argument(
        "--headless", action="store_true", help="Play automatically without a UI"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic drafts (optional)"
    )
    parser.add_argument(
        "--days", type=int, default=None, help="Game length in days (default: 12)"
    )
    args = parser.parse_args()

    if args.headless:
        sys.exit(run_headless(seed=args.seed, days=args.days))
    run_web_server()


if __name__ == "__main__":
    main()
