"""Spotlight supplemental search.

Name-based scanning only looks at the immediate children of known
locations. The Spotlight index can reveal leftovers elsewhere in the home
directory. The query is bounded: when mdfind does not finish within the
timeout it is killed and whatever it reported so far is used.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..utils.constants import TIMEOUT_SPOTLIGHT
from ..utils.paths import standardize_path
from .identifiers import normalize

logger = logging.getLogger(__name__)

MDFIND = "/usr/bin/mdfind"


def _quote(value: str) -> str:
    """Escape a value for use inside a Spotlight query string literal."""
    return value.replace('\\', '\\\\').replace('"', '\\"').replace('*', '\\*')


def build_query(app_name: str, bundle_id: str) -> Optional[str]:
    """Build the mdfind query matching display name or path.

    Comparisons are case- and diacritic-insensitive ("cd").

    Examples:
        >>> build_query("Notes", "")
        'kMDItemDisplayName == "*Notes*"cd || kMDItemPath == "*Notes*"cd'
    """
    clauses = []
    for value in dict.fromkeys(v for v in (app_name, bundle_id) if v):
        literal = _quote(value)
        clauses.append(f'kMDItemDisplayName == "*{literal}*"cd')
        clauses.append(f'kMDItemPath == "*{literal}*"cd')
    return ' || '.join(clauses) if clauses else None


def _parse_output(output: Optional[bytes], complete: bool) -> list[str]:
    if not output:
        return []
    text = output.decode(errors='replace')
    lines = text.split('\n')
    if not complete and not text.endswith('\n'):
        # The last line was cut off by the timeout
        lines = lines[:-1]
    return [line for line in lines if line.strip()]


def filter_strict(paths: list[str], app_name: str, bundle_id: str) -> list[str]:
    """Keep paths whose normalized file name equals the app name or bundle id."""
    wanted = {token for token in (normalize(app_name), normalize(bundle_id)) if token}
    return [p for p in paths if normalize(Path(p).name) in wanted]


def query(
    app_name: str,
    bundle_id: str,
    timeout: float = TIMEOUT_SPOTLIGHT,
    strict: bool = True,
    enabled: bool = True,
    home: Optional[Path] = None,
) -> list[str]:
    """Search the Spotlight index for paths mentioning the app.

    Args:
        app_name: Application name
        bundle_id: Bundle identifier
        timeout: Upper bound in seconds on the query
        strict: Only keep exact normalized file-name matches
        enabled: When False, return immediately without querying
        home: Search scope (defaults to the current user's home)

    Returns:
        Standardized paths, in the order Spotlight reported them
    """
    if not enabled:
        return []

    predicate = build_query(app_name, bundle_id)
    if predicate is None:
        return []

    scope = str(home or Path.home())
    cmd = [MDFIND, '-onlyin', scope, predicate]

    try:
        result = subprocess.run(cmd, capture_output=True, timeout=timeout)
        if result.returncode != 0:
            logger.warning(
                "mdfind exited with %d: %s",
                result.returncode,
                result.stderr.decode(errors='replace').strip(),
            )
        paths = _parse_output(result.stdout, complete=True)
    except subprocess.TimeoutExpired as e:
        # subprocess.run kills the child before re-raising
        logger.info("Spotlight query timed out after %.1fs, using partial results", timeout)
        paths = _parse_output(e.stdout, complete=False)
    except (FileNotFoundError, OSError) as e:
        logger.warning("Spotlight query unavailable: %s", e)
        return []

    if strict:
        paths = filter_strict(paths, app_name, bundle_id)

    return list(dict.fromkeys(standardize_path(p) for p in paths))
