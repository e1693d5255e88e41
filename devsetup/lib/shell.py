from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import ShellChangeError
from ..models import Outcome
from .command import CommandError, CommandRunner

logger = logging.getLogger(__name__)


def is_registered(shells_file: Path, shell_path: str) -> bool:
    if not shells_file.exists():
        return False
    lines = shells_file.read_text(encoding="utf-8").splitlines()
    return shell_path in (ln.strip() for ln in lines)


def set_default_shell(
    runner: CommandRunner,
    shell_path: str,
    *,
    current_shell: Optional[str],
    user: str,
    shells_file: Path = Path("/etc/shells"),
) -> Outcome:
    """Register shell_path in the allowed-shells list and make it the login shell.

    The change only shows up on the next login.
    """

    if current_shell == shell_path:
        logger.info("%s is already the default shell", shell_path)
        return Outcome.SHELL_UNCHANGED

    try:
        if not is_registered(shells_file, shell_path):
            logger.info("Adding %s to %s...", shell_path, shells_file)
            runner.run(["sudo", "tee", "-a", str(shells_file)], input_text=shell_path + "\n")
        runner.run(["sudo", "chsh", "-s", shell_path, user])
    except (CommandError, OSError) as e:
        raise ShellChangeError(f"Failed to set default shell to {shell_path}: {e}") from e

    logger.info("Default shell changed to %s. Changes will take effect on next login.", shell_path)
    return Outcome.SHELL_CHANGED
