from pathlib import Path
from typing import Dict, List, Optional

import pytest

from che_launcher.docker_utils import DockerFacade
from che_launcher.process_utils import CommandResult, ProcessFacade
from che_launcher.tools.common import LINUX, MAC


class FakeProcess(ProcessFacade):
    """Records commands instead of running them.

    responses maps a command line (arguments joined by spaces) to the result
    it should produce; anything else succeeds with no output.
    """

    calls: List[List[str]] = []
    envs: List[Dict[str, str]] = []
    responses: Dict[str, CommandResult] = {}

    def run(
        self,
        args: List[str],
        capture: bool = True,
        input_text: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> CommandResult:
        self.calls.append(list(args))
        self.envs.append(dict(self.env))
        return self.responses.get(" ".join(args), CommandResult(returncode=0))

    def commands(self):
        return [" ".join(args) for args in self.calls]


def make_executable(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def fake_process():
    return FakeProcess(calls=[], envs=[], responses={})


@pytest.fixture
def linux_docker(tmp_path, fake_process):
    """A native docker facade whose client binary exists."""
    return DockerFacade(
        os_type=LINUX,
        docker=make_executable(tmp_path / "bin" / "docker"),
        process=fake_process,
    )


@pytest.fixture
def mac_docker(tmp_path, fake_process):
    """A docker-machine facade whose binaries all exist."""
    return DockerFacade(
        os_type=MAC,
        docker=make_executable(tmp_path / "bin" / "docker"),
        docker_machine=make_executable(tmp_path / "bin" / "docker-machine"),
        vboxmanage=make_executable(tmp_path / "bin" / "VBoxManage"),
        machine_storage=tmp_path / "machines",
        process=fake_process,
    )


@pytest.fixture
def executable(tmp_path):
    """Factory creating an executable file under tmp_path/bin."""

    def _executable(name: str):
        return make_executable(tmp_path / "bin" / name)

    return _executable
