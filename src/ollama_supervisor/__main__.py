import argparse
import logging
import sys

from ollama_supervisor.cancellation import CancellationToken, install_signal_handlers
from ollama_supervisor.settings import settings
from ollama_supervisor.status import write_status_file
from ollama_supervisor.supervisor import OllamaSupervisor

logger = logging.getLogger("ollama_supervisor")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Install, start and supervise Ollama with the required model"
    )
    parser.add_argument(
        "--model",
        default=settings.model,
        help=f"The model to check/pull (default: {settings.model})",
    )
    parser.add_argument(
        "--url",
        default=settings.ollama_url,
        help=f"The Ollama API URL (default: {settings.ollama_url})",
    )
    parser.add_argument(
        "--status-file",
        default=settings.status_file,
        help=f"Where to write the status snapshot (default: {settings.status_file})",
    )
    parser.add_argument(
        "--no-pull", action="store_true", help="Don't pull the model if it's missing"
    )
    return parser.parse_args(argv)


def main(argv=None, supervisor: OllamaSupervisor = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s: %(message)s")

    token = supervisor.token if supervisor else CancellationToken()
    install_signal_handlers(token)

    supervisor = supervisor or OllamaSupervisor(
        model=args.model, api_url=args.url, token=token, auto_pull=not args.no_pull
    )

    success = supervisor.initialize()
    write_status_file(supervisor.get_status(), args.status_file)

    if not success:
        logger.error("Failed to start Ollama service")
        if supervisor.token.cancelled:
            supervisor.shutdown()
        return 1

    logger.info(f"Ollama is now serving {supervisor.model}")
    logger.info(f"Check {args.status_file} for current status")
    logger.info("Press Ctrl+C to stop the service")

    supervisor.supervise()
    supervisor.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
