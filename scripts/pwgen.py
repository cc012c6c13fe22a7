#!/usr/bin/env python3
from __future__ import annotations

import sys

from _bootstrap import bootstrap_repo_path

bootstrap_repo_path()

from secretforge.cli.secretforge_cli import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
