"""Docker and docker-machine utilities."""

from __future__ import annotations

import shlex
import shutil
import sys
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel

from che_launcher.log import get_logger
from che_launcher.process_utils import CommandResult, ProcessFacade
from che_launcher.tools.common import (
    CONTAINER_PORT_RANGE,
    LINUX,
    MAC,
    WIN,
    uses_docker_machine,
)
from che_launcher.utils import LauncherError

logger = get_logger(__name__, sys.stdout)


def parse_env_exports(text: str) -> Dict[str, str]:
    """Read the `export NAME="value"` lines printed by `docker-machine env`."""
    exports = {}
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("export "):
            continue
        name, sep, value = line[len("export ") :].partition("=")
        if not sep:
            continue
        parts = shlex.split(value)
        exports[name.strip()] = parts[0] if parts else ""
    return exports


class DockerFacade(BaseModel):
    """Docker facade."""

    os_type: str
    docker: str
    docker_machine: str = ""
    vboxmanage: str = ""
    machine_storage: Path = Path.home() / ".docker" / "machine" / "machines"
    process: ProcessFacade

    @classmethod
    def from_env(
        cls, os_type: str, env: Mapping[str, str], process: ProcessFacade
    ) -> "DockerFacade":
        """Locate docker, docker-machine and VBoxManage for the host OS."""
        if os_type == WIN:
            toolbox = env.get("DOCKER_TOOLBOX_INSTALL_PATH", "")
            if not toolbox:
                raise LauncherError(
                    "!!! DOCKER_TOOLBOX_INSTALL_PATH environment variable not set. "
                    "Add it or rerun Docker Toolbox installation.!!!"
                )
            docker_machine = f"{toolbox}\\docker-machine.exe"
            docker = f"{toolbox}\\docker.exe"
        elif os_type == MAC:
            docker_machine = "/usr/local/bin/docker-machine"
            docker = "/usr/local/bin/docker"
        else:
            assert os_type == LINUX
            docker_machine = ""
            docker = "/usr/bin/docker"

        vboxmanage = ""
        if uses_docker_machine(os_type=os_type):
            vbox = env.get("VBOX_MSI_INSTALL_PATH", "")
            vboxmanage = (
                f"{vbox}VBoxManage.exe" if vbox else "/usr/local/bin/VBoxManage"
            )

        return cls(
            os_type=os_type,
            docker=docker,
            docker_machine=docker_machine,
            vboxmanage=vboxmanage,
            process=process,
        )

    @property
    def uses_machine(self):
        return uses_docker_machine(os_type=self.os_type)

    def _docker(self, *args: str, capture: bool = True) -> CommandResult:
        return self.process.run([self.docker, *args], capture=capture)

    def _machine(self, *args: str, input_text: Optional[str] = None) -> CommandResult:
        return self.process.run([self.docker_machine, *args], input_text=input_text)

    def ensure_machine(self, vm: str) -> "DockerFacade":
        """Create and start the VirtualBox VM if needed.

        Returns a facade whose processes see the docker-machine environment
        (DOCKER_HOST, DOCKER_CERT_PATH, ...).
        """
        if not Path(self.docker_machine).is_file():
            raise LauncherError(
                "!!! Could not find docker-machine executable. Win: "
                "DOCKER_TOOLBOX_INSTALL_PATH env variable not set. Add it or rerun "
                "Docker Toolbox installation. Mac: Expected docker-machine at "
                "/usr/local/bin/docker-machine. !!!"
            )

        if not Path(self.vboxmanage).is_file():
            raise LauncherError(
                "!!! Could not find VirtualBox. Win: VBOX_MSI_INSTALL_PATH env "
                "variable not set. Add it or rerun Docker Toolbox installation. "
                "Mac: Expected Virtual Box at /usr/local/bin/VBoxManage. !!!"
            )

        if not self.process.run([self.vboxmanage, "showvminfo", vm]).ok:
            self.create_machine(vm=vm)
        else:
            logger.info("Docker machine named %s already exists...", vm)

        status = self._machine("status", vm).output.strip()
        if status != "Running":
            logger.info("Docker machine named %s is not running.", vm)
            logger.info("Starting docker machine named %s...", vm)
            res = self._machine("start", vm)
            if not res.ok:
                raise LauncherError(
                    f"!!! Could not start docker machine named {vm}: {res.output.strip()}"
                )
            res = self._machine("regenerate-certs", vm, input_text="y\n")
            if not res.ok:
                logger.debug("regenerate-certs failed: %s", res.output.strip())

        logger.info("Setting environment variables for machine %s...", vm)
        res = self._machine("env", "--shell=bash", vm)
        if not res.ok:
            raise LauncherError(
                f"!!! Could not read the environment of docker machine {vm}: "
                f"{res.output.strip()}"
            )

        exports = parse_env_exports(res.output)
        logger.debug(exports)

        return self.model_copy(update={"process": self.process.with_env(exports)})

    def create_machine(self, vm: str):
        """Recreate the VM from scratch."""
        logger.info("Creating docker machine named %s...", vm)

        self._machine("rm", "-f", vm)
        shutil.rmtree(self.machine_storage / vm, ignore_errors=True)

        res = self._machine("create", "-d", "virtualbox", vm)
        if not res.ok:
            raise LauncherError(
                f"!!! Could not create docker machine named {vm}: {res.output.strip()}"
            )

    def machine_ip(self, vm: str) -> str:
        return self._machine("ip", vm).output.strip()

    def check_client(self):
        """Verify the docker binary exists, runs and reaches its daemon."""
        if not Path(self.docker).is_file():
            raise LauncherError(
                "!!! Could not find Docker client. Expected at Windows: "
                "%DOCKER_TOOLBOX_INSTALL_PATH%\\docker.exe, Mac: /usr/local/bin/docker, "
                "Linux: /usr/bin/docker."
            )

        if not self._docker().ok:
            raise LauncherError(
                "!!! We found the 'docker' binary, but running 'docker' failed. "
                "Is a docker symlink broken?"
            )

        if not self._docker("ps").ok:
            raise LauncherError(
                "!!! Running 'docker' succeeded, but 'docker ps' failed. "
                "This usually means that docker cannot reach its daemon."
            )

    def inspect(self, name: str) -> CommandResult:
        return self._docker("inspect", name)

    def start(self, name: str) -> CommandResult:
        return self._docker("start", name)

    def stop(self, name: str) -> CommandResult:
        return self._docker("stop", name)

    def kill(self, name: str) -> CommandResult:
        return self._docker("kill", name)

    def remove(self, name: str) -> CommandResult:
        return self._docker("rm", name)

    def exec(self, name: str, command: List[str]) -> CommandResult:
        return self._docker("exec", name, *command)

    def run_container(
        self, name: str, image: str, port: int, machine_host: str
    ) -> CommandResult:
        """Run the container attached to the console."""
        return self._docker(
            "run",
            "--privileged",
            "-e",
            f"DOCKER_MACHINE_HOST={machine_host}",
            "--name",
            name,
            "-it",
            "-p",
            f"{port}:{port}",
            "-p",
            CONTAINER_PORT_RANGE,
            image,
            capture=False,
        )
