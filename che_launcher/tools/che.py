"""Start or stop the Che application server."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict

import click

from che_launcher.catalina_utils import CatalinaFacade
from che_launcher.config import LauncherOptions, derive_environment, normalize_args
from che_launcher.docker_utils import DockerFacade
from che_launcher.log import get_logger, set_debug
from che_launcher.process_utils import ProcessFacade
from che_launcher.tools.common import (
    ACTIONS,
    CONTAINER_NAME,
    DEFAULT_MACHINE,
    DEFAULT_PORT,
    RUN,
    START,
    STOP,
    client_connect_banner,
    container_command,
    detect_os,
    error_guidance,
    get_image,
)
from che_launcher.utils import LauncherError, strip_url

logger = get_logger(__name__, sys.stdout)


class ColonCommand(click.Command):
    """Accept the historic -p:8080 style options next to the click ones."""

    def parse_args(self, ctx, args):
        return super().parse_args(ctx, normalize_args(args))


@click.command(
    "che",
    cls=ColonCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "-i",
    "--image",
    "use_docker",
    is_flag=True,
    default=False,
    help="Launch Che within a Docker container (-i:tag selects the image tag).",
)
@click.option(
    "--tag",
    required=False,
    type=str,
    default="latest",
    help="Tag of the codenvy/che image.",
)
@click.option(
    "-p",
    "--port",
    required=False,
    type=int,
    default=DEFAULT_PORT,
    help="Port that Che server will use for HTTP requests.",
)
@click.option(
    "-r",
    "--remote",
    "ip",
    required=False,
    type=str,
    default="",
    help="IP address of the Che server when clients are not localhost.",
)
@click.option(
    "-m",
    "--machine",
    required=False,
    type=str,
    default="",
    help="docker-machine VM name for Win & Mac (default: $CHE_DOCKER_MACHINE_NAME or default).",
)
@click.option(
    "-d",
    "--debug",
    required=False,
    is_flag=True,
    default=False,
    help="Print command line options and start the app server in debug mode.",
)
@click.argument("action", required=False, default=RUN, type=click.Choice(ACTIONS))
def main(
    use_docker: bool,
    tag: str,
    port: int,
    ip: str,
    machine: str,
    debug: bool,
    action: str,
):
    """Start or stop the Che application server.

    Set CHE_HOME to the Che install directory when che is installed as a
    package; otherwise the parent of the directory holding the launcher is
    used, which for a pip installed script is not the Che install.
    """
    machine = (
        os.getenv("CHE_DOCKER_MACHINE_NAME", DEFAULT_MACHINE) if not machine else machine
    )

    options = LauncherOptions(
        use_docker=use_docker,
        docker_tag=tag,
        port=port,
        ip=ip,
        machine=machine,
        debug=debug,
        action=action,
    )

    set_debug(debug)
    if debug:
        for line in options.describe():
            click.echo(line)

    try:
        returncode = run_launcher(
            options=options,
            platform=sys.platform,
            env=dict(os.environ),
            process=ProcessFacade(),
            che_home_default=get_che_home_default(argv0=sys.argv[0]),
        )
    except LauncherError as e:
        click.echo(error_guidance(str(e)))
        sys.exit(1)

    sys.exit(returncode)


def get_che_home_default(argv0: str):
    """The launcher lives in CHE_HOME/bin."""
    return str(Path(argv0).resolve().parent.parent)


def run_launcher(
    options: LauncherOptions,
    platform: str,
    env: Dict[str, str],
    process: ProcessFacade,
    che_home_default: str,
):
    """Prepare docker and launch or stop the server. Return an exit code."""
    os_type = detect_os(platform=platform)
    logger.debug("os: %s", os_type)

    env = derive_environment(
        env=env, options=options, che_home_default=che_home_default
    )
    process = process.with_env(env)

    docker = get_docker_ready(
        docker=DockerFacade.from_env(os_type=os_type, env=env, process=process),
        options=options,
    )
    catalina = CatalinaFacade.from_env(env=env, process=docker.process)

    if options.action == STOP:
        return stop_che_server(docker=docker, catalina=catalina, options=options)

    return launch_che_server(docker=docker, catalina=catalina, options=options)


def get_docker_ready(docker: DockerFacade, options: LauncherOptions) -> DockerFacade:
    """Make sure docker works, natively or in a docker-machine VM."""
    if docker.uses_machine:
        docker = docker.ensure_machine(vm=options.machine)

    docker.check_client()

    if docker.uses_machine:
        logger.info(
            "Docker is configured to use vbox docker-machine named %s with IP %s...",
            options.machine,
            docker.machine_ip(vm=options.machine),
        )
    else:
        logger.info("Docker is natively installed and reachable...")

    return docker


def get_machine_host(docker: DockerFacade):
    """Host of the docker daemon as seen by the clients."""
    if docker.uses_machine:
        return strip_url(docker.process.env.get("DOCKER_HOST", "")).host
    return "localhost"


def launch_che_server(
    docker: DockerFacade, catalina: CatalinaFacade, options: LauncherOptions
):
    host = get_machine_host(docker=docker)

    click.echo(
        client_connect_banner(
            host=host if options.use_docker else "localhost", port=options.port
        )
    )

    if not options.use_docker:
        return catalina.call(
            action=options.action, port=options.port, debug=options.debug
        ).returncode

    logger.info("Starting Che server in docker container named %s.", CONTAINER_NAME)

    if not docker.inspect(name=CONTAINER_NAME).ok:
        return kill_and_launch_docker(docker=docker, options=options, host=host)

    logger.info("Found a container named %s. Attempting restart.", CONTAINER_NAME)

    if not docker.start(name=CONTAINER_NAME).ok:
        logger.info(
            "Initial start of docker container failed... Attempting docker restart and exec."
        )
        res = docker.exec(
            name=CONTAINER_NAME, command=container_command(action=START)
        )
        if not res.ok:
            return kill_and_launch_docker(docker=docker, options=options, host=host)

    logger.info("Docker container named %s successfully started.", CONTAINER_NAME)
    return 0


def kill_and_launch_docker(docker: DockerFacade, options: LauncherOptions, host: str):
    """Replace any old che container by a fresh one attached to the console."""
    logger.info(
        "Either che container does not exist, or duplicate conflict was discovered."
    )
    logger.info(
        "Removing any old containers and launching a new one using image %s",
        get_image(tag=options.docker_tag),
    )

    for res in (docker.kill(name=CONTAINER_NAME), docker.remove(name=CONTAINER_NAME)):
        if not res.ok:
            logger.debug(res.output.strip())

    if not docker.uses_machine:
        host = docker.process.env.get("DOCKER_MACHINE_HOST", "")

    return docker.run_container(
        name=CONTAINER_NAME,
        image=get_image(tag=options.docker_tag),
        port=options.port,
        machine_host=host,
    ).returncode


def stop_che_server(
    docker: DockerFacade, catalina: CatalinaFacade, options: LauncherOptions
):
    if not options.use_docker:
        logger.info("Stopping Che server running on localhost:%s", options.port)
        return catalina.call(
            action=STOP, port=options.port, debug=options.debug, capture=True
        ).returncode

    logger.info("Stopping Che server running in docker container.")
    res = docker.exec(name=CONTAINER_NAME, command=container_command(action=STOP))
    if not res.ok:
        logger.debug(res.output.strip())

    logger.info("Stopping docker container named %s.", CONTAINER_NAME)
    res = docker.stop(name=CONTAINER_NAME)
    if not res.ok:
        logger.debug(res.output.strip())

    return 0
