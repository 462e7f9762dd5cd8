"""Git history queries."""

import logging
import subprocess
from typing import Optional, Set

from ..exceptions import RangeResolutionError


def rev_list(git_directory: str, from_tag: str, to_tag: str,
             log: Optional[logging.Logger] = None) -> Set[str]:
    """Return the hashes of commits reachable from `to_tag` but not `from_tag`.

    Runs `git rev-list from..to` in `git_directory`; raise RangeResolutionError
    when git fails, is not installed, or the directory does not exist.
    """
    args = ["rev-list", f"{from_tag}..{to_tag}"]
    try:
        proc = subprocess.run(["git"] + args, cwd=git_directory, check=True,
                              capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or "").strip()
        if log:
            log.warning("Git %s failed: %s", args, err)
        raise RangeResolutionError(f"git {' '.join(args)} in {git_directory}: {err}") from e
    except FileNotFoundError as e:
        raise RangeResolutionError(f"git not found or missing directory {git_directory}") from e
    except NotADirectoryError as e:
        raise RangeResolutionError(f"{git_directory} is not a directory") from e

    return {line.strip() for line in proc.stdout.splitlines() if line.strip()}
