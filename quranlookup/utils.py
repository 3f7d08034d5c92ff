# quranlookup/utils.py
import os
import logging

import platformdirs

logger = logging.getLogger(__name__)

# --- platformdirs app identity ---
APP_NAME = "QuranLookup"
APP_AUTHOR = "QuranLookup"

# Points every app path below one directory
HOME_ENV_VAR = "QURANLOOKUP_HOME"

APP_PATH_KINDS = ('cache', 'config', 'data')


def get_app_path(kind: str, filename: str = '') -> str:
    """
    Get the absolute path to a writable application file or directory.

    Args:
        kind: One of 'cache', 'config' or 'data'. Picks the platformdirs
              directory the file belongs in.
        filename: File name inside that directory. Leave empty for the
                  directory itself.

    Returns:
        Absolute path as a string. The containing directory is created.
    """
    if kind not in APP_PATH_KINDS:
        raise ValueError(f"Unknown path kind: {kind!r}")

    override = os.environ.get(HOME_ENV_VAR)
    if override:
        base_path = os.path.join(override, kind)
    elif kind == 'cache':
        base_path = platformdirs.user_cache_dir(APP_NAME, APP_AUTHOR)
    elif kind == 'config':
        base_path = platformdirs.user_config_dir(APP_NAME, APP_AUTHOR)
    else:
        base_path = platformdirs.user_data_dir(APP_NAME, APP_AUTHOR)

    os.makedirs(base_path, exist_ok=True)
    full_path = os.path.join(base_path, filename) if filename else base_path
    logger.debug("Resolved %s path: %s", kind, full_path)
    return full_path

