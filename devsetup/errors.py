from __future__ import annotations


class SetupError(Exception):
    """Base class for failures that abort a setup run."""


class UnsupportedPlatformError(SetupError):
    pass


class InstallError(SetupError):
    pass


class AssetNotFoundError(InstallError):
    """No release asset matches the platform; the tool is skipped, not fatal."""


class GitError(SetupError):
    pass


class LinkError(SetupError):
    """Symlink or backup failure on the local filesystem."""


class ShellChangeError(SetupError):
    pass
