from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

from eczemadex.cli.context import CLIContext
from eczemadex.core.config import load_paths


@pytest.fixture()
def cli_context():
    def _build(home: Path) -> CLIContext:
        return CLIContext(paths=load_paths(home), console=Console())

    return _build
