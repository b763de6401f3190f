"""Bundled Tomcat utilities."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel

from che_launcher.log import get_logger
from che_launcher.process_utils import CommandResult, ProcessFacade
from che_launcher.utils import LauncherError

logger = get_logger(__name__, sys.stdout)


class CatalinaFacade(BaseModel):
    """Catalina facade."""

    assembly_bin_dir: str
    process: ProcessFacade

    @classmethod
    def from_env(
        cls, env: Mapping[str, str], process: ProcessFacade
    ) -> "CatalinaFacade":
        return cls(assembly_bin_dir=env["ASSEMBLY_BIN_DIR"], process=process)

    @property
    def script(self):
        return str(Path(self.assembly_bin_dir) / "catalina.sh")

    def call(
        self, action: str, port: int, debug: bool = False, capture: bool = False
    ) -> CommandResult:
        """Run catalina.sh with the server action, in jpda mode when debugging."""
        if not Path(self.assembly_bin_dir).is_dir():
            raise LauncherError(
                f"!!! Could not find the Che app server at {self.assembly_bin_dir}."
            )

        # port mapping is read by server.xml when tomcat boots
        defaults = {}
        if not self.process.env.get("JAVA_OPTS"):
            defaults["JAVA_OPTS"] = f"-Dport.http={port}"
        if not self.process.env.get("SERVER_PORT"):
            defaults["SERVER_PORT"] = str(port)

        args = [self.script, "jpda", action] if debug else [self.script, action]
        logger.debug(args)

        return self.process.with_env(defaults).run(args, capture=capture)
