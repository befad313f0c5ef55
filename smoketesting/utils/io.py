import logging
import os
import shutil


def ensure_dir(directory, mode=0o777):
    """
    Ensure that the provided directory and all of its parent directories exist.
    This function is safe to execute on existing directories (no op).

    :param directory: The directory to create (if it does not exist).
    :param mode: The permission flags to use (if it does not exist).
    """
    if directory:
        os.makedirs(directory, mode, exist_ok=True)
    return directory


def delete_path(path):
    """
    Recursively deletes ``path``. Missing paths are ignored.

    :return: True iff something has been deleted.
    """
    path_block_list = ["", "*", "/", None]
    if path in path_block_list:
        logging.getLogger(__name__).warning("Refusing to delete path [%s].", path)
        return False
    if not os.path.lexists(path):
        return False
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)
    return True
