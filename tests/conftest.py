from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


USE_LINE = "use Digest::SHA qw/sha1_base64/;"
OTHER_LINE = "my $d = Digest::SHA->new;"


@dataclass(slots=True)
class SampleRepo:
    """Fixture payload representing the synthetic repository under test."""

    root: Path

    def run_cli(self, *args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
        """Invoke ``python -m git_complete.cli`` with the provided arguments."""

        env = os.environ.copy()
        pythonpath = str(SRC)
        if env.get("PYTHONPATH"):
            pythonpath = os.pathsep.join([pythonpath, env["PYTHONPATH"]])
        env["PYTHONPATH"] = pythonpath

        command = [sys.executable, "-m", "git_complete.cli", *args]
        return subprocess.run(  # noqa: S603 - command constructed from known values
            command,
            cwd=cwd or self.root,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )


def run_git(repo_root: Path, *cmd: str) -> None:
    subprocess.run(
        ["git", *cmd],
        cwd=repo_root,
        check=True,
        capture_output=True,
        text=True,
    )


@pytest.fixture()
def sample_repo(tmp_path: Path) -> SampleRepo:
    """Create a git repository holding a handful of Perl files.

    ``USE_LINE`` occurs five times and ``OTHER_LINE`` once.
    """

    repo_root = tmp_path / "sample-repo"
    repo_root.mkdir()

    run_git(repo_root, "init")
    run_git(repo_root, "config", "user.email", "dev@example.com")
    run_git(repo_root, "config", "user.name", "Sample Developer")

    lib = repo_root / "lib"
    lib.mkdir()
    for name in ("a", "b", "c"):
        (lib / f"{name}.pl").write_text(f"{USE_LINE}\nuse strict;\n", encoding="utf-8")
    (lib / "d.pl").write_text(f"{USE_LINE}\nuse warnings;\n", encoding="utf-8")
    (lib / "e.pl").write_text(f"{USE_LINE}\n{OTHER_LINE}\n", encoding="utf-8")

    run_git(repo_root, "add", ".")
    run_git(repo_root, "commit", "-m", "Initial sample repo state")

    return SampleRepo(root=repo_root)
