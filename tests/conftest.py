"""Shared fixtures: a throwaway Claudia project and stand-ins for external tools."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set

import pytest

from claudia_build.config import load_project_config
from claudia_build.errors import ExternalToolError
from claudia_build.packages.dependencies import ToolProbe
from claudia_build.process_runner import CommandResult

ICO_BYTES = b"\x00\x00\x01\x00\x01\x00\x10\x10" + b"\x00" * 32
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@dataclass
class RecordedCall:
    """One command seen by StubRunner."""

    args: List[str]
    cwd: Optional[Path]
    process_cwd: Path


class StubRunner:
    """Simulates cargo, rustup, bun, git and lipo without running anything.

    Attributes tests can tweak:
        fail_triples: cargo builds for these triples exit non-zero
        no_output_triples: cargo "succeeds" but writes no binary
        installed: rustup's installed-target registry
        git_version / git_commit: git answers (None makes the query fail)
        fail_tools: any command starting with one of these fails
    """

    def __init__(self, project_root: Path, binary_name: str = "claudia"):
        self.project_root = project_root
        self.binary_name = binary_name
        self.calls: List[RecordedCall] = []
        self.fail_triples: Set[str] = set()
        self.no_output_triples: Set[str] = set()
        self.installed: Set[str] = set()
        self.git_version: Optional[str] = None
        self.git_commit: Optional[str] = None
        self.fail_tools: Set[str] = set()

    def run(self, command: Sequence[str], cwd: Optional[Path] = None, capture_output: bool = False) -> CommandResult:
        args = [str(part) for part in command]
        self.calls.append(RecordedCall(args=args, cwd=cwd, process_cwd=Path.cwd().resolve()))
        tool = args[0]

        if tool in self.fail_tools:
            raise ExternalToolError(args, 1, f"{tool} failed")
        if tool == "rustup":
            return self._rustup(args)
        if tool == "cargo":
            return self._cargo(args)
        if tool == "lipo":
            output = Path(args[args.index("-output") + 1])
            output.write_bytes(b"universal-binary")
            return CommandResult(args, 0)
        if tool == "git":
            return self._git(args)
        if tool == "bun" and args[1:4] == ["run", "tauri", "build"]:
            return self._tauri_build(args)
        return CommandResult(args, 0)

    def commands(self, tool: str) -> List[List[str]]:
        return [call.args for call in self.calls if call.args[0] == tool]

    def _rustup(self, args: List[str]) -> CommandResult:
        if args[1:4] == ["target", "list", "--installed"]:
            return CommandResult(args, 0, stdout="".join(f"{t}\n" for t in sorted(self.installed)))
        if args[1:3] == ["target", "add"]:
            self.installed.add(args[3])
        return CommandResult(args, 0)

    def _cargo(self, args: List[str]) -> CommandResult:
        triple = args[args.index("--target") + 1]
        if triple in self.fail_triples:
            raise ExternalToolError(args, 101, f"could not compile for {triple}")
        if triple not in self.no_output_triples:
            suffix = ".exe" if "windows" in triple else ""
            # cargo runs inside the native crate directory
            output = Path.cwd() / "target" / triple / "release" / f"{self.binary_name}{suffix}"
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(f"binary for {triple}".encode())
        return CommandResult(args, 0)

    def _git(self, args: List[str]) -> CommandResult:
        if args[1] == "describe":
            value = self.git_version
        else:
            value = self.git_commit
        if value is None:
            raise ExternalToolError(args, 128, "fatal: No names found, cannot describe anything.")
        return CommandResult(args, 0, stdout=value + "\n")

    def _tauri_build(self, args: List[str]) -> CommandResult:
        triple = args[args.index("--target") + 1]
        bundle_dir = self.project_root / "src-tauri" / "target" / triple / "release" / "bundle"
        for fmt in args[args.index("--bundles") + 1].split(","):
            if fmt == "deb":
                path = bundle_dir / "deb" / "claudia_0.1.0_amd64.deb"
            elif fmt == "appimage":
                path = bundle_dir / "appimage" / "claudia_0.1.0_amd64.AppImage"
            elif fmt == "dmg":
                path = bundle_dir / "dmg" / "Claudia_0.1.0_x64.dmg"
            else:
                path = bundle_dir / "msi" / "Claudia_0.1.0_x64_en-US.msi"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"installer")
        # Packager side files that are not installers
        (bundle_dir / "deb" / "control").parent.mkdir(parents=True, exist_ok=True)
        (bundle_dir / "deb" / "control").write_text("Package: claudia\n")
        return CommandResult(args, 0)


class FakeProbe(ToolProbe):
    """Every tool is available except those listed in ``missing``."""

    def __init__(self, missing: Sequence[str] = ()):
        self.missing = set(missing)
        self.queries: List[str] = []

    def is_available(self, tool_name: str) -> bool:
        self.queries.append(tool_name)
        return tool_name not in self.missing


@pytest.fixture
def project_dir(tmp_path):
    """A minimal Claudia checkout with a valid icon."""
    root = tmp_path / "claudia"
    icons = root / "src-tauri" / "icons"
    icons.mkdir(parents=True)
    (icons / "icon.ico").write_bytes(ICO_BYTES)
    (root / "README.md").write_text("# Claudia\n")
    (root / "LICENSE").write_text("AGPL-3.0\n")
    return root.resolve()


@pytest.fixture
def config(project_dir, monkeypatch):
    """Project configuration isolated from CLAUDIA_* environment variables."""
    monkeypatch.delenv("CLAUDIA_DIST_DIR", raising=False)
    monkeypatch.delenv("CLAUDIA_COMMAND_TIMEOUT", raising=False)
    return load_project_config(project_dir)


@pytest.fixture
def runner(project_dir):
    return StubRunner(project_dir)


@pytest.fixture
def probe():
    return FakeProbe()
