"""Loading and validating the repository list file."""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from mrmm.errors import InvalidRepositoryError, RepositoryListError
from mrmm.models import RepositoryTarget

logger = logging.getLogger(__name__)


def read_repository_list(path: Union[str, Path]) -> List[str]:
    """Read repository entries, one per line, exactly as they appear.

    Blank lines are kept so validation can reject them.

    Raises:
        RepositoryListError: If the file cannot be read.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            entries = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise RepositoryListError(f"Aborting. Couldn't open {path}: {e}") from e

    logger.debug("Read %d repository entries from %s", len(entries), path)
    return entries


def parse_targets(entries: Iterable[str]) -> List[RepositoryTarget]:
    """Turn entries into targets, rejecting the whole list on the first bad entry.

    Raises:
        InvalidRepositoryError: Naming the first entry not in org/repo format.
    """
    targets = []
    for entry in entries:
        try:
            targets.append(RepositoryTarget.parse(entry))
        except InvalidRepositoryError:
            logger.debug("Rejecting repository list, bad entry %r", entry)
            raise
    return targets


def load_targets(path: Union[str, Path]) -> List[RepositoryTarget]:
    """Read and validate a repository list file."""
    return parse_targets(read_repository_list(path))
