import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path

from utils.errors import StorageError

logger = logging.getLogger(__name__)


def read_json_document(path):
    """Read and parse a JSON document.

    Raises FileNotFoundError when the file is absent and StorageError when it
    exists but cannot be read or parsed, so callers can tell the two apart.
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        raise
    except (OSError, ValueError) as e:
        raise StorageError(f"Could not read {path.name}: {e}") from e


@contextmanager
def _atomic_file(path):
    """Yield a temp file next to ``path`` and move it into place on success."""
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise


def write_json_document(path, data, indent=2):
    """Rewrite a JSON document atomically.

    Readers see either the previous or the new content, never a partial file.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with _atomic_file(path) as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error writing {path}: {str(e)}")
        raise StorageError(f"Could not write {path.name}: {e}") from e
