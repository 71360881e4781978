import logging
import secrets
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from app.config import get_settings
from app.core.constants import PROJECT_ROOT, UPLOAD_FAILED_MESSAGE
from app.core.errors import DependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    filename: str
    url: str
    path: Path


def resolve_upload_dir(value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


class LocalFileStorage:
    """Writes uploads to a local directory served under ``url_prefix``."""

    def __init__(self, root: Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def generate_filename(self, original_name: Optional[str]) -> str:
        # Millisecond timestamp plus a random suffix; the extension is kept.
        suffix = Path(original_name or "").suffix
        return "{}-{}{}".format(int(time.time() * 1000), secrets.token_hex(4), suffix)

    def url_for(self, filename: str) -> str:
        return "{}/{}".format(self.url_prefix, filename)

    def save(self, original_name: Optional[str], source: BinaryIO) -> StoredFile:
        filename = self.generate_filename(original_name)
        dest = self.root / filename
        try:
            self.ensure_root()
            with dest.open("xb") as handle:
                shutil.copyfileobj(source, handle)
        except OSError as exc:
            logger.exception("Storing upload %r as %s failed", original_name, dest)
            raise DependencyError(UPLOAD_FAILED_MESSAGE) from exc
        logger.info("Stored upload %r as %s", original_name, filename)
        return StoredFile(filename=filename, url=self.url_for(filename), path=dest)


def get_storage() -> LocalFileStorage:
    settings = get_settings()
    return LocalFileStorage(
        resolve_upload_dir(settings.UPLOAD_DIR),
        settings.UPLOAD_URL_PREFIX,
    )


__all__ = ["LocalFileStorage", "StoredFile", "get_storage", "resolve_upload_dir"]
