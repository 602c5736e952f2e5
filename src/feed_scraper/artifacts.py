"""Per-request output artifact management."""

from pathlib import Path

from .errors import ArtifactIOError
from .logging_config import create_execution_logger


class ArtifactStore:
    """Hands out one CSV path per request inside a single directory."""

    def __init__(self, directory: Path, download_name: str = "WebScrape.csv"):
        self.directory = Path(directory)
        self.download_name = download_name
        self.logger = create_execution_logger("artifacts")

    def new_path(self, request_id: str) -> Path:
        """Return the artifact path for ``request_id``, creating the directory.

        Raises:
            ArtifactIOError: If the directory cannot be created
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(
                f"Failed to create artifact directory {self.directory}: {e}",
                error=str(e),
            )
            raise ArtifactIOError(
                f"Cannot create artifact directory {self.directory}: {e}"
            ) from e

        return self.directory / f"{request_id}-{self.download_name}"

    def discard(self, path: Path) -> None:
        """Delete an artifact once it has been sent."""
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(
                f"Failed to remove artifact {path}: {e}", error=str(e)
            )
