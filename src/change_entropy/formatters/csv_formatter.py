"""CSV result writer for change-entropy."""

import csv
import io
import os
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Union

from ..logging_config import get_logger

logger = get_logger(__name__)

Row = Sequence[Union[str, int, float]]


class CsvResultWriter:
    """Write result rows to a CSV file.

    The file is written next to its destination under a temporary name and
    renamed into place, so a failed run never leaves a partial results file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def format(self, rows: Iterable[Row]) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        for row in rows:
            writer.writerow(row)
        return output.getvalue()

    def write(self, rows: Iterable[Row]) -> Path:
        content = self.format(rows)
        directory = self.path.resolve().parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(directory)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info("Results written to %s", self.path)
        return self.path
