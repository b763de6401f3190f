"""Unit tests for che_launcher.tools.common module."""

import pytest

from che_launcher.tools.common import (
    LINUX,
    MAC,
    WIN,
    client_connect_banner,
    container_command,
    detect_os,
    error_guidance,
    get_image,
    uses_docker_machine,
)
from che_launcher.utils import LauncherError


class TestDetectOs:
    """Tests for detect_os."""

    @pytest.mark.parametrize(
        "platform,expected",
        [
            ("linux", LINUX),
            ("linux2", LINUX),
            ("freebsd13", LINUX),
            ("darwin", MAC),
            ("cygwin", WIN),
            ("msys", WIN),
            ("win32", WIN),
        ],
    )
    def test_known_platforms(self, platform, expected):
        assert detect_os(platform=platform) == expected

    def test_unknown_platform(self):
        with pytest.raises(LauncherError, match="could not detect your operating"):
            detect_os(platform="sunos5")


def test_uses_docker_machine():
    assert uses_docker_machine(os_type=WIN)
    assert uses_docker_machine(os_type=MAC)
    assert not uses_docker_machine(os_type=LINUX)


def test_get_image():
    assert get_image(tag="nightly") == "codenvy/che:nightly"


def test_client_connect_banner():
    banner = client_connect_banner(host="192.168.99.100", port=9000)
    assert "Open browser to http://192.168.99.100:9000, or:" in banner


def test_error_guidance():
    text = error_guidance("!!! Could not find Docker client.")
    assert text.startswith("\n!!! Could not find Docker client.\n")
    assert "Possible issues" in text
    assert "Che Environment Variables" in text
    assert "Usage:" in text


def test_container_command():
    assert container_command(action="stop") == [
        "bash",
        "-c",
        "sudo service docker stop && /home/user/che/bin/che.sh stop",
    ]


def test_error_guidance_requires_che_home_for_packaged_installs():
    text = error_guidance("!!! Could not find the Che app server.")
    assert "REQUIRED when che is installed as a package" in text
