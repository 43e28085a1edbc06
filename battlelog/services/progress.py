from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for the batch import (tqdm, TTY only).

The bar shows:
- File progress: current / total files imported
- The name of the file being parsed
- Running record total as postfix

Outside a TTY (CI, redirected output) no bar is created so logs stay free
of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker using tqdm for the batch import.

    One bar per run, advanced once per file. In non-TTY environments the
    tracker keeps counting but draws nothing.
    """

    def __init__(self, total_files: int, *, description: str = "Importing files") -> None:
        """Initialize progress tracker.

        Args:
            total_files: Total number of files to import
            description: Description for the progress bar
        """
        self.total_files = total_files
        self.description = description
        self.current_file = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_file(self, file_path: Path) -> None:
        """Start importing a file.

        Args:
            file_path: Path to the file being parsed
        """
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, records: int = 0) -> None:
        """Finish importing a file.

        Args:
            records: Records imported so far across all files (shown as postfix)
        """
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            if records:
                self.pbar.set_postfix(records=records)

    def close(self) -> None:
        """Close the progress bar."""
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
