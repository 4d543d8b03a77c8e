#!/usr/bin/env python3
"""Configure one joint from a machine file.

Loads ``[JOINT_<n>]`` into an in-memory controller, exactly as it would
be applied at startup, and reports failures to the log.  Useful for
checking a machine file before bringing the controller up.

Usage::

    python -m motion_control.scripts.configure_joint 0 machine.ini
    configure-joint 2 /path/to/machine.yaml

Exit status is 0 when the joint was configured and activated, 1
otherwise.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from motion_control.hardware.controller import InMemoryJointController
from motion_control.joints.loader import ini_joint
from motion_control.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the script; returns ``0`` on success and ``-1`` on failure."""
    parser = argparse.ArgumentParser(
        description="Configure one joint from a machine file",
    )
    parser.add_argument("joint", type=int, help="Zero-based joint index")
    parser.add_argument("config", type=str, help="Machine file (INI or YAML)")
    args = parser.parse_args(argv)

    setup_logging(log_level="INFO", context={"app": "configure_joint"})

    controller = InMemoryJointController(
        comp_dir=Path(args.config).resolve().parent,
    )
    return ini_joint(args.joint, args.config, controller)


def run() -> None:
    """Console-script entry point (exit status 0 or 1)."""
    sys.exit(0 if main() == 0 else 1)


if __name__ == "__main__":
    run()
