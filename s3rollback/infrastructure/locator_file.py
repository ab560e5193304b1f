"""
Locator File Reader

Architectural Intent:
- Reads the operator-supplied batch file: UTF-8, one s3:// locator per line
- Blank lines are dropped here; validation of each locator happens in the
  domain parser so that the whole batch is checked before any write
"""

import logging
from pathlib import Path

from s3rollback.domain.errors import InputFileError

logger = logging.getLogger(__name__)


def read_locator_lines(path: Path) -> list[str]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(f"Cannot read locator file {path}: {e}") from e

    lines = [line.strip() for line in content.splitlines()]
    lines = [line for line in lines if line]
    logger.debug("Read %d locator(s) from %s", len(lines), path)
    return lines
