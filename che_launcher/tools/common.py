"""Common definitions."""

from __future__ import annotations

from che_launcher.utils import LauncherError

# operating systems
WIN = "win"
MAC = "mac"
LINUX = "linux"

OS_TYPES = [WIN, MAC, LINUX]

# server actions
RUN = "run"
START = "start"
STOP = "stop"

ACTIONS = [RUN, START, STOP]

# docker
CONTAINER_NAME = "che"
IMAGE = "codenvy/che"
DEFAULT_MACHINE = "default"
DEFAULT_PORT = 8080
CONTAINER_PORT_RANGE = "32768-32788:32768-32788"
CONTAINER_CHE_SCRIPT = "/home/user/che/bin/che.sh"

WRONG = """
Looks like something went wrong. Possible issues:
  1. (Win | Mac) VirtualBox not installed          ==> Rerun Docker Toolbox installation
  2. (Win | Mac) Docker Machine not installed      ==> Rerun Docker Toolbox installation
  3. (Win | Mac) Docker is not reachable           ==> Docker VM failed to start
  4. (Win | Mac) Docker ok, but docker ps fails    ==> Docker environment variables not set properly
  5. (Linux) Docker is not reachable               ==> Install: wget -qO- https://get.docker.com/ | sh
  6. Could not find the Che app server             ==> Did /tomcat get moved away from CHE_HOME?
  7. Did you use the right parameter syntax?       ==> See usage

We have seen issues with VirtualBox on windows where your VM gets corrupted when your computer is
suspended while the VM is still running. This will appear as SSH or ethernet connection issues.
This is rare, but if encountered, current known solution is to uninstall VirtualBox and Docker
Toolbox, and then reinstall.
"""

CHE_VARIABLES = """
Che Environment Variables:
  (REQUIRED) JAVA_HOME                             ==> Location of Java runtime
  (REQUIRED: WIN|MAC) DOCKER_TOOLBOX_INSTALL_PATH  ==> Location of Docker Toolbox
  (REQUIRED: WIN|MAC) VBOX_MSI_INSTALL_PATH        ==> Location of VirtualBox
  (OPTIONAL) CHE_HOME                              ==> Directory where Che is installed
                                                       (REQUIRED when che is installed as a package)
  (OPTIONAL) CHE_LOCAL_CONF_DIR                    ==> Directory with custom Che .properties files
  (OPTIONAL) CHE_LOGS_DIR                          ==> Directory for Che output logs
  (OPTIONAL) CHE_DOCKER_MACHINE_NAME               ==> Default docker-machine VM name
"""

USAGE = """
Usage:
  che [-i] [-i:tag] [-p:port] [-r:ip] [-m:vm] [-d] [run | start | stop]

     -i,      --image        Launches Che within a Docker container using latest image
     -i:tag,  --image:tag    Launches Che within a Docker container using specific image tag
     -p:port, --port:port    Port that Che server will use for HTTP requests; default=8080
     -r:ip,   --remote:ip    If Che clients are not localhost, set to IP address of Che server
     -m:vm,   --machine:vm   For Win & Mac, sets the docker-machine VM name to vm; default=default
     -h,      --help         Show this help
     -d,      --debug        Use debug mode (prints command line options + app server debug)
     run                     Starts Che application server in current console
     start                   Starts Che application server in new console
     stop                    Stops Che application server

The -r flag sets the DOCKER_MACHINE_HOST system environment variable. Set this to the IP address
of the node that is running your Docker daemon. Only necessary to set this if on Linux and your
browser clients are not localhost, ie they are remote. This property automatically set for Che on
Windows and Mac."""


def is_valid_os_type(os_type: str):
    return os_type in OS_TYPES


def uses_docker_machine(os_type: str):
    """Mac and Windows run docker inside a VirtualBox docker-machine."""
    assert is_valid_os_type(os_type=os_type)
    return os_type in (WIN, MAC)


def detect_os(platform: str) -> str:
    """Map a sys.platform value to WIN, MAC or LINUX."""
    if platform.startswith("linux"):
        return LINUX
    if platform.startswith("darwin"):
        return MAC
    if platform in ("cygwin", "msys", "win32"):
        return WIN
    if platform.startswith("freebsd"):
        return LINUX

    raise LauncherError(
        "We could not detect your operating system. Che is unlikely to work properly."
    )


def get_image(tag: str):
    return f"{IMAGE}:{tag}"


def client_connect_banner(host: str, port: int):
    return f"""

############## HOW TO CONNECT YOUR CHE CLIENT ###############
After Che server has booted, you can connect your clients by:
1. Open browser to http://{host}:{port}, or:
2. Open native chromium app.
#############################################################

"""


def error_guidance(msg: str):
    """The diagnosis followed by the generic troubleshooting texts."""
    return f"\n{msg}\n{WRONG} {CHE_VARIABLES} {USAGE}"


def container_command(action: str):
    """Command run inside the che container to start or stop its server."""
    return [
        "bash",
        "-c",
        f"sudo service docker {action} && {CONTAINER_CHE_SCRIPT} {action}",
    ]
