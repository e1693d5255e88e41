"""
End-to-end tests of the stage sequence against a fake machine.
"""

import logging
from pathlib import Path

import pytest

import devsetup.main as main_mod
from devsetup.errors import GitError, UnsupportedPlatformError
from devsetup.lib.command import CmdResult
from devsetup.lib.releases import GO_DL_INDEX
from devsetup.logging_utils import GREEN, NC, YELLOW, LevelTagFormatter
from devsetup.models import Effect, Outcome
from devsetup.steps import DetectPlatformStep

PIN = "0dc93fdc1d414e1e14aa29a5cceca9b12ecfc412"


def _fake_machine(runner, http, paths):
    """Wire runner/http so commands change the fake machine like the real ones would."""

    heads = {}
    apt_binaries = {"bat": "batcat"}

    def apt_install(argv, cwd, stdin):
        binary = apt_binaries.get(argv[-1], argv[-1])
        runner.available[binary] = f"/usr/bin/{binary}"

    def git_clone(argv, cwd, stdin):
        dest = Path(argv[3])
        dest.mkdir(parents=True)
        if dest.name == "tmuxfiles":
            (dest / "install.sh").write_text("#!/bin/bash\n")
        heads[str(dest)] = "f" * 40

    def git_in_repo(argv, cwd, stdin):
        path, sub = argv[2], argv[3]
        if sub == "rev-parse":
            if path not in heads:
                return CmdResult(argv, 128, "", "not a git repository")
            return CmdResult(argv, 0, heads[path] + "\n", "")
        if sub == "checkout":
            heads[path] = argv[-1]
        return None

    def astral_installer(argv, cwd, stdin):
        paths.local_bin.mkdir(parents=True, exist_ok=True)
        uv = paths.local_bin / "uv"
        uv.write_text("#!/bin/sh\n")
        uv.chmod(0o755)

    def tee(argv, cwd, stdin):
        f = Path(argv[-1])
        f.parent.mkdir(parents=True, exist_ok=True)
        with open(f, "a") as out:
            out.write(stdin)

    runner.on("sudo", "apt-get", "install", effect=apt_install)
    runner.on("git", "clone", effect=git_clone)
    runner.on("git", "-C", effect=git_in_repo)
    runner.on("sh", effect=astral_installer)
    runner.on("sudo", "tar", effect=lambda argv, cwd, stdin: runner.available.__setitem__("go", "/usr/local/go/bin/go"))
    runner.on("sudo", "tee", effect=tee)

    http.json["https://api.github.com/repos/neovim/neovim/releases/latest"] = {
        "tag_name": "v0.11.4",
        "assets": [{"name": "nvim-linux-x86_64.appimage", "browser_download_url": "https://dl/nvim"}],
    }
    http.json["https://api.github.com/repos/mkasberg/ghostty-ubuntu/releases/latest"] = {
        "tag_name": "1.2.0",
        "assets": [{"name": "ghostty-x86_64.AppImage", "browser_download_url": "https://dl/ghostty"}],
    }
    http.json[GO_DL_INDEX] = [
        {"version": "go1.25.3", "stable": True, "files": [{"filename": "go1.25.3.linux-amd64.tar.gz"}]}
    ]
    http.text["https://astral.sh/uv/install.sh"] = "echo uv\n"
    (paths.assets / "ghostty-config").write_text("theme = dark\n")
    return heads


def _steps():
    return [DetectPlatformStep(os_type="linux", machine="x86_64"), *main_mod.build_steps()[1:]]


class TestFullRun:
    def test_stage_order(self):
        assert [s.step_id for s in main_mod.build_steps()] == [
            "10_detect_platform",
            "20_install_core",
            "30_install_shell",
            "40_install_editor",
            "50_install_terminal",
            "60_install_runtime",
            "70_install_helper",
            "80_provision_configs",
            "85_shell_integration",
            "90_set_default_shell",
        ]

    def test_fresh_machine_then_rerun_is_idempotent(self, make_ctx, runner, http, paths):
        heads = _fake_machine(runner, http, paths)

        first = main_mod.run(make_ctx(platform=None), steps=_steps())
        assert first.ran_steps[-1] == "90_set_default_shell"
        installed = {e.subject for e in first.effects if e.outcome == Outcome.INSTALLED}
        assert {"curl", "git", "bat", "fish", "neovim", "ghostty", "uv"} <= installed
        assert first.count(Outcome.CLONED) == 2
        assert first.count(Outcome.LINKED) == 2
        assert first.count(Outcome.SHELL_CHANGED) == 1
        assert heads[str(paths.dotfiles / "tmuxfiles")] == PIN
        assert (paths.config_home / "nvim").is_symlink()
        assert (paths.config_home / "tmux" / "config").is_symlink()
        assert (paths.config_home / "ghostty" / "config").read_text() == "theme = dark\n"
        assert "alias bat batcat" in (paths.config_home / "fish" / "conf.d" / "aliases.fish").read_text()
        assert "/usr/bin/fish" in paths.shells_file.read_text()

        # Next login: the account shell is now fish.
        runner.env["SHELL"] = "/usr/bin/fish"
        before = len(runner.calls)
        second = main_mod.run(make_ctx(platform=None), steps=_steps())
        new_calls = runner.calls[before:]

        for outcome in (Outcome.INSTALLED, Outcome.CLONED, Outcome.LINKED, Outcome.WRITTEN, Outcome.SHELL_CHANGED):
            assert second.count(outcome) == 0, outcome
        assert not [c for c in new_calls if c[0] == "sudo" or c[:2] == ["git", "clone"]]
        assert heads[str(paths.dotfiles / "tmuxfiles")] == PIN

    def test_missing_asset_does_not_abort_the_run(self, make_ctx, runner, http, paths, caplog):
        _fake_machine(runner, http, paths)
        http.json["https://api.github.com/repos/mkasberg/ghostty-ubuntu/releases/latest"]["assets"] = []

        with caplog.at_level(logging.INFO):
            result = main_mod.run(make_ctx(platform=None), steps=_steps())

        assert Effect("50_install_terminal", "ghostty", Outcome.SKIPPED) in [
            Effect(e.step, e.subject, e.outcome) for e in result.effects
        ]
        assert result.ran_steps[-1] == "90_set_default_shell"
        assert any(r.levelno == logging.ERROR and "ghostty" in r.getMessage() for r in caplog.records)


class _Touch:
    step_id = "01_touch"

    def __init__(self, path):
        self.path = path

    def run(self, ctx):
        self.path.write_text("done\n")
        return [Effect(self.step_id, str(self.path), Outcome.WRITTEN)]


class _Boom:
    step_id = "02_boom"

    def run(self, ctx):
        raise GitError("remote hung up")


class _Never:
    step_id = "03_never"
    ran = False

    def run(self, ctx):
        _Never.ran = True
        return []


class TestFailFast:
    def test_first_fatal_error_aborts_without_rollback(self, make_ctx, tmp_path):
        marker = tmp_path / "marker"
        ctx = make_ctx()
        with pytest.raises(GitError):
            main_mod.run(ctx, steps=[_Touch(marker), _Boom(), _Never()])
        assert marker.read_text() == "done\n"
        assert not _Never.ran
        assert ctx.current_step == "02_boom"

    def test_unsupported_platform_stops_before_installs(self, make_ctx, runner):
        with pytest.raises(UnsupportedPlatformError):
            main_mod.run(make_ctx(platform=None), steps=[DetectPlatformStep(os_type="win32", machine="x86_64"), *main_mod.build_steps()[1:]])
        assert runner.calls == []


class TestMain:
    def test_exit_code_on_setup_error(self, monkeypatch, make_ctx, tmp_path):
        ctx = make_ctx()
        monkeypatch.setattr(main_mod, "build_ctx", lambda **kw: ctx)
        monkeypatch.setattr(main_mod, "configure_logging", lambda **kw: kw["log_path"])

        def fail(ctx, steps=None):
            raise UnsupportedPlatformError("Unsupported OS: win32")

        monkeypatch.setattr(main_mod, "run", fail)
        assert main_mod.main(["--log", str(tmp_path / "x.log")]) == 1

    def test_exit_code_on_success(self, monkeypatch, make_ctx, tmp_path):
        ctx = make_ctx()
        seen = {}
        monkeypatch.setattr(main_mod, "build_ctx", lambda **kw: seen.update(kw) or ctx)
        monkeypatch.setattr(main_mod, "configure_logging", lambda **kw: kw["log_path"])
        monkeypatch.setattr(main_mod, "run", lambda ctx, steps=None: None)
        assert main_mod.main(["--dry-run"]) == 0
        assert seen == {"dry_run": True}


class TestConsoleFormatter:
    def _record(self, level):
        return logging.LogRecord("devsetup", level, __file__, 1, "Installing %s...", ("fish",), None)

    def test_plain_tags(self):
        fmt = LevelTagFormatter(color=False)
        assert fmt.format(self._record(logging.INFO)) == "[INFO] Installing fish..."
        assert fmt.format(self._record(logging.WARNING)) == "[WARN] Installing fish..."
        assert fmt.format(self._record(logging.ERROR)) == "[ERROR] Installing fish..."

    def test_colored_tags(self):
        fmt = LevelTagFormatter(color=True)
        assert fmt.format(self._record(logging.INFO)) == f"{GREEN}[INFO]{NC} Installing fish..."
        assert fmt.format(self._record(logging.WARNING)).startswith(f"{YELLOW}[WARN]")
