import logging
import os
import shutil

from smoketesting import exceptions


def java_path(env=None):
    """
    Resolves the ``java`` executable that runs the node artifact.

    :param env: The environment to consider. Defaults to ``os.environ``.
    :return: The path to ``$JAVA_HOME/bin/java`` if ``JAVA_HOME`` is set, otherwise the ``java`` executable on the ``PATH``.
    """
    logger = logging.getLogger(__name__)
    env = os.environ if env is None else env

    java_home = env.get("JAVA_HOME")
    if java_home:
        candidate = os.path.join(java_home, "bin", "java")
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            logger.info("Using Java runtime in JAVA_HOME [%s].", java_home)
            return candidate
        logger.warning("JAVA_HOME [%s] does not contain an executable java binary. Falling back to PATH.", java_home)

    candidate = shutil.which("java", path=env.get("PATH"))
    if candidate:
        logger.info("Using Java runtime [%s] from PATH.", candidate)
        return candidate
    raise exceptions.SystemSetupError("Cannot find a Java runtime. Please set JAVA_HOME or add java to the PATH.")
