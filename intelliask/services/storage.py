import hashlib
from pathlib import Path

# most filesystems cap a file name at 255 bytes
MAX_FILENAME_BYTES = 200
_PREFIX_BYTES = 100


def _bounded_name(key: str) -> str:
    """
    Long keys become "<first 100 bytes>-<sha256 of key>" so the file name
    stays under the filesystem limit and still maps 1:1 to the key.
    """
    encoded = key.encode("utf-8")
    if len(encoded) <= MAX_FILENAME_BYTES:
        return key
    prefix = encoded[:_PREFIX_BYTES].decode("utf-8", errors="ignore")
    return f"{prefix}-{hashlib.sha256(encoded).hexdigest()}"


class FileStorage:
    """
    String values stored as UTF-8 files under a root directory, one file per key.

    The root directory is created on first write, so a fresh deployment
    needs no setup. Nothing is cached in memory: a restart loses nothing.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        # keys come from URLs; they must not escape the root
        if not key or key in (".", "..") or "/" in key or "\\" in key or "\x00" in key:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / _bounded_name(key)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        path = self._path(key)
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_text(value, encoding="utf-8")


class MemoryStorage:
    """Dict-backed storage with the same interface. Used by tests."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def exists(self, key: str) -> bool:
        return key in self.data

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value
