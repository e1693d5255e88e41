from __future__ import annotations

import argparse
import logging
import os
from typing import List, Mapping, Optional, Sequence

from .config import LOG_ENV_VAR, SetupPaths, load_catalog
from .context import SetupCtx
from .errors import SetupError
from .lib.command import CommandRunner
from .lib.net import HttpClient
from .logging_utils import configure_logging
from .models import Outcome
from .pipeline import PipelineResult, Step, run_pipeline
from .steps import (
    DetectPlatformStep,
    InstallToolsStep,
    ProvisionConfigsStep,
    SetDefaultShellStep,
    ShellIntegrationStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        DetectPlatformStep(),
        InstallToolsStep("20_install_core", "core"),
        InstallToolsStep("30_install_shell", "shell"),
        InstallToolsStep("40_install_editor", "editor"),
        InstallToolsStep("50_install_terminal", "terminal"),
        InstallToolsStep("60_install_runtime", "runtime"),
        InstallToolsStep("70_install_helper", "helper"),
        ProvisionConfigsStep(),
        ShellIntegrationStep(),
        SetDefaultShellStep(),
    ]


def build_ctx(*, env: Optional[Mapping[str, str]] = None, dry_run: bool = False) -> SetupCtx:
    env = dict(os.environ if env is None else env)
    paths = SetupPaths.from_environ(env)
    return SetupCtx(
        paths=paths,
        catalog=load_catalog(paths),
        runner=CommandRunner(dry_run=dry_run, env=env),
        http=HttpClient(dry_run=dry_run),
        dry_run=dry_run,
    )


def run(ctx: SetupCtx, steps: Optional[Sequence[Step]] = None) -> PipelineResult:
    """Run the whole setup sequence, stopping at the first fatal error."""

    logger.info("Starting environment setup...")
    try:
        result = run_pipeline(ctx=ctx, steps=build_steps() if steps is None else steps)
    except SetupError:
        raise
    except Exception:
        logger.exception("Setup failed in step %s", ctx.current_step)
        raise

    logger.debug("Effects: %s", [e.as_dict() for e in result.effects])
    skipped = [e.subject for e in result.effects if e.outcome == Outcome.SKIPPED]
    if skipped:
        logger.warning("Skipped (no matching release asset): %s", ", ".join(skipped))
    logger.info("Environment setup completed successfully!")
    logger.info("You may need to restart your shell or log out and back in for all changes to take effect.")
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="devsetup", description="Bootstrap this machine's developer environment.")
    p.add_argument("--log", default=None, help=f"Path to the log file (default: ${LOG_ENV_VAR} or ~/.local/state/devsetup/devsetup.log)")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file writes without performing them")
    p.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console")

    args = p.parse_args(argv)

    ctx = build_ctx(dry_run=bool(args.dry_run))
    log_path = args.log or ctx.env.get(LOG_ENV_VAR) or str(ctx.paths.default_log_path)
    configure_logging(log_path=log_path, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        run(ctx)
    except SetupError as e:
        logger.error("%s (step %s)", e, ctx.current_step)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
