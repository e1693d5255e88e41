from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from .context import SetupCtx
from .errors import InstallError
from .lib.command import CommandError
from .lib.releases import find_latest_asset
from .models import InstallMethod, InstallSource, OSFamily, Outcome, PlatformInfo, ToolSpec

logger = logging.getLogger(__name__)


def _local_binary(ctx: SetupCtx, spec: ToolSpec, source: InstallSource) -> Path:
    return ctx.paths.local_bin / (source.binary or spec.command)


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def is_present(ctx: SetupCtx, spec: ToolSpec, platform: PlatformInfo) -> bool:
    """Lightweight probe: PATH lookup, known install paths, then the package manager."""

    for cmd in spec.probe_commands:
        if ctx.runner.which(cmd):
            return True

    for p in spec.probe_paths:
        if _is_executable(Path(p)):
            return True

    source = spec.source_for(platform)
    if source is None:
        return False

    if source.method == InstallMethod.RELEASE_DOWNLOAD and not source.archive:
        if _is_executable(_local_binary(ctx, spec, source)):
            return True

    if source.method == InstallMethod.PACKAGE_MANAGER and platform.os == OSFamily.MACOS:
        return ctx.pkg.is_installed(source.package or spec.name)

    return False


def _install_with_package_manager(ctx: SetupCtx, spec: ToolSpec, source: InstallSource) -> None:
    ctx.pkg.install(source.package or spec.name)


def _install_release_binary(ctx: SetupCtx, spec: ToolSpec, source: InstallSource, platform: PlatformInfo) -> None:
    asset = find_latest_asset(ctx.http, source, platform.arch)
    dest = _local_binary(ctx, spec, source)
    logger.info("Downloading %s from: %s", spec.name, asset.url)
    ctx.http.download(asset.url, dest)
    if not ctx.dry_run:
        dest.chmod(dest.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    if not ctx.on_path(str(ctx.paths.local_bin)):
        logger.warning("%s is not in PATH. Add it to your shell configuration.", ctx.paths.local_bin)


def _warn_if_off_path(ctx: SetupCtx, spec: ToolSpec, source: InstallSource) -> None:
    if source.path_hint and not ctx.on_path(source.path_hint):
        logger.warning("%s installed. Ensure %s is in your PATH", spec.name, source.path_hint)


def _install_release_archive(ctx: SetupCtx, spec: ToolSpec, source: InstallSource, platform: PlatformInfo) -> None:
    if not source.extract_to:
        raise InstallError(f"{spec.name}: archive source needs extract_to")

    asset = find_latest_asset(ctx.http, source, platform.arch)
    logger.info("Downloading %s %s...", spec.name, asset.version)
    with tempfile.TemporaryDirectory(prefix=f"devsetup-{spec.name}-") as tmp:
        archive = ctx.http.download(asset.url, Path(tmp) / asset.name)
        logger.info("Extracting %s...", spec.name)
        try:
            if source.replaces:
                ctx.runner.run(["sudo", "rm", "-rf", source.replaces])
            ctx.runner.run(["sudo", "tar", "-C", source.extract_to, "-xzf", str(archive)])
        except CommandError as e:
            raise InstallError(f"Failed to unpack {asset.name}: {e}") from e

    _warn_if_off_path(ctx, spec, source)


def _install_with_script(ctx: SetupCtx, spec: ToolSpec, source: InstallSource) -> None:
    if not source.url:
        raise InstallError(f"{spec.name}: install-script source needs a url")
    script = ctx.http.get_text(source.url)
    try:
        ctx.runner.run([source.shell], input_text=script)
    except CommandError as e:
        raise InstallError(f"{spec.name} installer failed: {e}") from e

    _warn_if_off_path(ctx, spec, source)


def ensure_installed(ctx: SetupCtx, spec: ToolSpec, platform: PlatformInfo) -> Outcome:
    """Install a tool unless it is already present.

    Raises AssetNotFoundError when no release asset fits the platform; the
    caller decides to skip. Every other InstallError is fatal.
    """

    if is_present(ctx, spec, platform):
        logger.info("%s is already installed", spec.name)
        return Outcome.ALREADY_PRESENT

    source = spec.source_for(platform)
    if source is None:
        raise InstallError(f"No install method for {spec.name} on {platform.os.value}")

    logger.info("Installing %s...", spec.name)
    if source.method == InstallMethod.PACKAGE_MANAGER:
        _install_with_package_manager(ctx, spec, source)
    elif source.method == InstallMethod.RELEASE_DOWNLOAD:
        if source.archive:
            _install_release_archive(ctx, spec, source, platform)
        else:
            _install_release_binary(ctx, spec, source, platform)
    elif source.method == InstallMethod.INSTALL_SCRIPT:
        _install_with_script(ctx, spec, source)
    else:  # pragma: no cover
        raise InstallError(f"Unsupported install method {source.method}")

    logger.info("%s installed successfully", spec.name)
    return Outcome.INSTALLED
