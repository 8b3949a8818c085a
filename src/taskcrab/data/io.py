import tempfile, json, os
from typing import Any, Optional, Union
from pathlib import Path
from taskcrab.recovery import CorruptionError, FileOperationError, FatalError
from taskcrab.logs import get_logger

log = get_logger("data.io")

def _cleanup(temp_path : Optional[str]):
    if temp_path is None or not os.path.exists(temp_path):
        return
    try:
        os.unlink(temp_path)
        log.debug(f"Cleaned up temporary file: {temp_path}")
    except OSError as cleanup_error:
        log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def _create_dirs(file_path : Path):
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def atomic_write(file_path : Union[Path, str], data : Any, create_dirs : bool = False) -> bool:
    """
    Serialize data as pretty-printed JSON and replace file_path with it atomically.

    The content goes to a temporary file next to the target, is flushed to disk
    and then renamed over the target, so readers see either the old snapshot or
    the new one and never a truncated file.

    Raises:
        FatalError: data cannot be serialized
        FileOperationError: the file or its directory cannot be written
    """
    file_path = Path(file_path)
    temp_path = None

    try:
        if create_dirs:
            _create_dirs(file_path)

        # Bad data must never reach a temp file
        payload = json.dumps(data, indent=2, ensure_ascii=False)

        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            temp_file.write(payload)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        os.replace(temp_path, file_path)
        temp_path = None
        log.debug(f"Successfully saved JSON file: {file_path}")
        return True

    except (TypeError, ValueError) as e:
        _cleanup(temp_path)
        error_msg = (f"Data serialization failed for {file_path}. "
                    f"In-memory data may contain non-serializable types: {e}")
        log.critical(error_msg)
        raise FatalError(error_msg) from e

    except FileOperationError:
        _cleanup(temp_path)
        raise

    except OSError as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving JSON file {file_path}: {e}"
        raise FileOperationError(error_msg) from e

def load_json_file(file_path : Union[Path, str]) -> Any:
    """
    Load and parse a JSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Parsed data, or None if the file doesn't exist or holds only whitespace

    Raises:
        CorruptionError: the file is not valid JSON
        FileOperationError: the file exists but cannot be read
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise CorruptionError(f"File {file_path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise FileOperationError(f"Failed to read file {file_path}: {e}") from e

    if not content.strip():
        return None

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise CorruptionError(f"JSON syntax error in {file_path}: {e}") from e
