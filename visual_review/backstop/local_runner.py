"""Local BackstopJS runner.

Points the checked-in scenarios at other environments by swapping the
``stage--`` / ``main--`` host prefixes, runs ``npx backstop <command>``, and
always puts the original configuration and cookie files back afterwards.
"""

from __future__ import annotations

import json
import logging
import shutil
import signal
import subprocess
import threading
from pathlib import Path
from typing import Optional

from visual_review.models.config import RunnerConfig
from visual_review.url_utils import MAIN_MARKER, STAGE_MARKER, swap_marker

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130
EXIT_TERMINATED = 143


def rewrite_scenarios(
    config: dict, url_pattern: Optional[str], ref_pattern: Optional[str]
) -> bool:
    """Swap prefixes in scenario URLs in place. Returns True if anything changed."""
    modified = False
    for scenario in config.get("scenarios") or []:
        url = scenario.get("url")
        new_url = swap_marker(url, STAGE_MARKER, url_pattern)
        if new_url != url:
            logger.info("  URL: %s -> %s", url, new_url)
            scenario["url"] = new_url
            modified = True

        ref = scenario.get("referenceUrl")
        new_ref = swap_marker(ref, MAIN_MARKER, ref_pattern)
        if new_ref != ref:
            logger.info("  Ref: %s -> %s", ref, new_ref)
            scenario["referenceUrl"] = new_ref
            modified = True
    return modified


def _swap_field(item: dict, key: str, url_pattern: Optional[str],
                ref_pattern: Optional[str], label: str) -> bool:
    modified = False
    for marker, pattern in ((STAGE_MARKER, url_pattern), (MAIN_MARKER, ref_pattern)):
        value = item.get(key)
        new_value = swap_marker(value, marker, pattern)
        if new_value != value:
            logger.info("  %s: %s -> %s", label, value, new_value)
            item[key] = new_value
            modified = True
    return modified


def rewrite_storage_state(
    state: dict, url_pattern: Optional[str], ref_pattern: Optional[str]
) -> bool:
    """Swap prefixes in cookie domains and localStorage origins in place."""
    modified = False
    for cookie in state.get("cookies") or []:
        if _swap_field(cookie, "domain", url_pattern, ref_pattern, "Cookie domain"):
            modified = True
    for origin in state.get("origins") or []:
        if _swap_field(origin, "origin", url_pattern, ref_pattern, "localStorage origin"):
            modified = True
    return modified


def _read_json(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, data: dict) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _raise_terminated(signum, frame) -> None:
    raise SystemExit(EXIT_TERMINATED)


class LocalRunner:
    """Runs one BackstopJS command against temporarily rewritten config files."""

    def __init__(self, config: RunnerConfig):
        self.config = config

    @property
    def _files(self) -> list[Path]:
        return [self.config.config_path, self.config.cookies_path]

    def backup(self) -> bool:
        try:
            shutil.copyfile(self.config.config_path,
                            RunnerConfig.backup_path(self.config.config_path))
            logger.info("Backed up %s", self.config.config_path.name)

            if self.config.cookies_path.exists():
                shutil.copyfile(self.config.cookies_path,
                                RunnerConfig.backup_path(self.config.cookies_path))
                logger.info("Backed up %s", self.config.cookies_path.name)
        except OSError as e:
            logger.error("Failed to backup configuration files: %s", e)
            return False
        return True

    def restore(self) -> None:
        """Copy backups over the working files and delete them. Never raises."""
        for path in self._files:
            backup = RunnerConfig.backup_path(path)
            try:
                if backup.exists():
                    shutil.copyfile(backup, path)
                    backup.unlink()
                    logger.info("Restored original %s", path.name)
            except OSError as e:
                logger.error("Failed to restore %s: %s", path.name, e)

    def update_cookies(self) -> bool:
        path = self.config.cookies_path
        if not path.exists():
            logger.info("No %s file found, skipping cookie updates", path.name)
            return True
        try:
            state = _read_json(path)
            if rewrite_storage_state(state, self.config.url_pattern, self.config.ref_pattern):
                _write_json(path, state)
                logger.info("Updated %s with new URLs", path.name)
        except (OSError, ValueError) as e:
            logger.error("Failed to update %s: %s", path.name, e)
            return False
        return True

    def update_config(self) -> bool:
        path = self.config.config_path
        try:
            config = _read_json(path)
            if rewrite_scenarios(config, self.config.url_pattern, self.config.ref_pattern):
                _write_json(path, config)
                logger.info("Updated %s with new URLs", path.name)
            else:
                logger.info("No %s URL replacements needed", path.name)
        except (OSError, ValueError) as e:
            logger.error("Failed to update %s: %s", path.name, e)
            return False
        return self.update_cookies()

    def run_backstop(self) -> int:
        command = self.config.command
        logger.info("Running backstop %s...", command)
        try:
            completed = subprocess.run(["npx", "backstop", command], check=False)
        except OSError as e:
            logger.error("Failed to run backstop %s: %s", command, e)
            return 1

        code = completed.returncode
        if code < 0:
            # Killed by signal -code; report it the way a shell would
            logger.error("Backstop %s killed by signal %d", command, -code)
            return 128 - code

        if code == 0:
            logger.info("Backstop %s completed successfully", command)
        else:
            logger.error("Backstop %s failed with exit code %d", command, code)
        return code

    def run(self) -> int:
        """Execute the configured command and return the process exit code."""
        logger.info("Command: %s", self.config.command)
        if self.config.url_pattern:
            logger.info("URL pattern: %s -> %s", STAGE_MARKER, self.config.url_pattern)
        if self.config.ref_pattern:
            logger.info("Reference pattern: %s -> %s", MAIN_MARKER, self.config.ref_pattern)

        previous_handler = None
        if threading.current_thread() is threading.main_thread():
            previous_handler = signal.signal(signal.SIGTERM, _raise_terminated)

        rewrites = self.config.has_patterns
        try:
            if rewrites:
                if not self.backup():
                    return 1
                logger.info("Updating configuration...")
                if not self.update_config():
                    return 1
            return self.run_backstop()
        except KeyboardInterrupt:
            logger.warning("Interrupted! Cleaning up...")
            return EXIT_INTERRUPTED
        finally:
            if rewrites:
                logger.info("Cleaning up...")
                self.restore()
            if previous_handler is not None:
                signal.signal(signal.SIGTERM, previous_handler)
