"""Launcher configuration."""

from __future__ import annotations

from typing import Dict, List, Mapping

from pydantic import BaseModel

from che_launcher.tools.common import DEFAULT_MACHINE, DEFAULT_PORT, RUN
from che_launcher.utils import to_posix_path

# colon style options of the historic launcher: prefix -> click option
_COLON_OPTIONS = {
    "-i": "--tag",
    "--image": "--tag",
    "-p": "--port",
    "--port": "--port",
    "-r": "--remote",
    "--remote": "--remote",
    "-m": "--machine",
    "--machine": "--machine",
}


class LauncherOptions(BaseModel):
    """Command line options of the che command."""

    use_docker: bool = False
    docker_tag: str = "latest"
    port: int = DEFAULT_PORT
    ip: str = ""
    machine: str = DEFAULT_MACHINE
    debug: bool = False
    action: str = RUN

    def describe(self) -> List[str]:
        return [
            f"USE_DOCKER: {str(self.use_docker).lower()}",
            f"CHE_DOCKER_TAG: {self.docker_tag}",
            f"CHE_PORT: {self.port}",
            f'CHE_IP: "{self.ip}"',
            f"CHE_DOCKER_MACHINE: {self.machine}",
            "USE_HELP: false",
            f"CHE_SERVER_ACTION: {self.action}",
            f"USE_DEBUG: {str(self.debug).lower()}",
        ]


def get_variable(name: str, env: Mapping[str, str], default: str = "") -> str:
    """Return the variable value, or default when it is unset or empty."""
    return env.get(name) or default


def normalize_args(args: List[str]) -> List[str]:
    """Rewrite -p:8080 style arguments into their click equivalents."""
    normalized = []
    for arg in args:
        prefix, sep, value = arg.partition(":")
        if not sep or prefix not in _COLON_OPTIONS:
            normalized.append(arg)
            continue

        option = _COLON_OPTIONS[prefix]
        if option == "--tag":
            normalized.append("--image")
        if value:
            normalized += [option, value]

    return normalized


def derive_environment(
    env: Mapping[str, str], options: LauncherOptions, che_home_default: str
) -> Dict[str, str]:
    """Return a copy of env completed with the Che and Tomcat variables."""
    derived = dict(env)

    che_home = get_variable("CHE_HOME", env=env, default=che_home_default)
    che_home = to_posix_path(che_home)
    derived["CHE_HOME"] = che_home

    if options.ip:
        derived["DOCKER_MACHINE_HOST"] = options.ip

    if derived.get("JAVA_HOME"):
        derived["JAVA_HOME"] = to_posix_path(derived["JAVA_HOME"])

    derived["CHE_LOCAL_CONF_DIR"] = get_variable(
        "CHE_LOCAL_CONF_DIR", env=env, default=f"{che_home}/conf/"
    )

    catalina_home = to_posix_path(f"{che_home}/tomcat")
    derived["CATALINA_HOME"] = catalina_home
    derived["CATALINA_BASE"] = f"{che_home}/tomcat"
    derived["ASSEMBLY_BIN_DIR"] = f"{catalina_home}/bin"

    derived["CHE_LOGS_DIR"] = get_variable(
        "CHE_LOGS_DIR", env=env, default=f"{catalina_home}/logs/"
    )

    return derived
