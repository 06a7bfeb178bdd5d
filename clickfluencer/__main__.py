"""Entry point for Clickfluencer."""

import logging

from clickfluencer.app import ClickfluencerApp
from clickfluencer.engine.runtime import GameEngine
from clickfluencer.engine.storage import SAVE_DIR, FileStore

LOG_FILE = SAVE_DIR / "clickfluencer.log"


def setup_logging(level: int = logging.INFO) -> None:
    """Log to a file so output never lands on the TUI."""
    SAVE_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=LOG_FILE,
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> None:
    setup_logging()
    engine, _ = GameEngine.from_store(FileStore(SAVE_DIR))
    app = ClickfluencerApp(engine)
    app.run()


if __name__ == "__main__":
    main()
