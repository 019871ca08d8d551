"""Job configuration store backed by ``<directory>/<project>.xml`` files.

``pull`` writes the documents fetched from Jenkins here and ``push`` reads
them back.  The store does not parse the XML; documents are opaque text.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JobConfigStore:
    """Reads and writes job ``config.xml`` documents under *directory*.

    Parameters
    ----------
    directory:
        Base directory, resolved against the working directory.  Created
        on first write if missing.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory).resolve()

    def path_for(self, project: str) -> Path:
        """Return the file that holds *project*'s configuration."""
        return self.directory / f"{project}.xml"

    def read(self, project: str) -> str:
        """Return the stored document for *project*.

        Raises
        ------
        FileNotFoundError
            If the project has never been pulled.
        """
        path = self.path_for(project)
        logger.debug("Reading %s config from %s", project, path)
        return path.read_text(encoding="utf-8")

    def write(self, project: str, config_xml: str) -> Path:
        """Store *config_xml* for *project* and return the file path."""
        path = self.path_for(project)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config_xml, encoding="utf-8")
        logger.debug("Wrote %s config to %s", project, path)
        return path
