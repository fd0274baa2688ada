"""Application entry point for QuizBank backend server."""

from quizbank.app import App
from quizbank.config import Config
from quizbank.logging import setup_logging
from quizbank.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
