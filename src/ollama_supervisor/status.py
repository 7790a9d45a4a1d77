import json
import logging
from pathlib import Path
from typing import Union

from ollama_supervisor.params import Status

logger = logging.getLogger(__name__)


def write_status_file(status: Status, path: Union[str, Path]) -> bool:
    """Overwrite `path` with the status snapshot as indented JSON.

    Failures are logged and reported as False; they never abort the run.
    """
    path = Path(path)
    try:
        path.write_text(json.dumps(status.to_json_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not write status file {path}: {e}")
        return False

    logger.info(f"Updated status file: {path}")
    return True

