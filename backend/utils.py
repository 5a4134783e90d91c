"""
System command utilities for the Wirt API gateway
"""
import subprocess
from typing import List, Tuple
import logging

logger = logging.getLogger("uvicorn")


def run_command(cmd: List[str], use_sudo: bool = False) -> Tuple[bool, str]:
    """
    Execute a system command

    Args:
        cmd: Command and arguments as list
        use_sudo: Whether to prepend sudo to the command

    Returns:
        Tuple of (success: bool, output: str) where output holds
        stdout followed by stderr
    """
    if use_sudo:
        cmd = ["sudo"] + cmd
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        logger.error(f"Could not execute {cmd[0]}: {e}")
        return False, str(e)
    output = result.stdout + result.stderr
    return result.returncode == 0, output
