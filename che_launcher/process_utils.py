"""External process utilities."""

from __future__ import annotations

import subprocess
import sys
from typing import Dict, List, Optional

from pydantic import BaseModel

from che_launcher.log import get_logger

logger = get_logger(__name__, sys.stdout)


class CommandResult(BaseModel):
    """Exit code and merged stdout/stderr of a finished command."""

    returncode: int
    output: str = ""

    @property
    def ok(self):
        return self.returncode == 0


class ProcessFacade(BaseModel):
    """Process facade."""

    env: Dict[str, str] = {}

    def with_env(self, extra: Dict[str, str]) -> "ProcessFacade":
        """Return a copy whose environment includes extra."""
        return self.model_copy(update={"env": {**self.env, **extra}})

    def run(
        self,
        args: List[str],
        capture: bool = True,
        input_text: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> CommandResult:
        """Run a command and wait for it.

        Without capture the child shares the console, which is what the
        interactive `docker run -it` and `catalina.sh run` need.
        """
        logger.debug(" ".join(args))

        try:
            proc = subprocess.run(
                args,
                env=self.env or None,
                cwd=cwd,
                input=input_text,
                text=True,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.STDOUT if capture else None,
                check=False,
            )
        except OSError as e:
            logger.debug("%s: %s", args[0], e)
            return CommandResult(returncode=127, output=str(e))

        return CommandResult(returncode=proc.returncode, output=proc.stdout or "")
