from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

from hucompare.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


def test_init_with_tty_enabled():
    with patch("hucompare.services.progress.is_tty_enabled", return_value=True), \
         patch("hucompare.services.progress.tqdm") as mock_tqdm:
        tracker = ProgressTracker(3)
        assert tracker.enabled is True
        mock_tqdm.assert_called_once_with(
            total=3,
            desc="Scoring references",
            unit="file",
            disable=False,
            leave=False,
            position=0,
            ncols=80,
            ascii=True,
        )


def test_disabled_without_tty():
    with patch("hucompare.services.progress.is_tty_enabled", return_value=False):
        with ProgressTracker(2) as tracker:
            tracker.start_file(Path("a.csv"))
            tracker.finish_file(success=False)
            assert tracker.pbar is None
        assert tracker.current_file == 1
        assert tracker.failed_files == 1


def test_updates_bar_per_file():
    mock_pbar = Mock()
    with patch("hucompare.services.progress.is_tty_enabled", return_value=True), \
         patch("hucompare.services.progress.tqdm", return_value=mock_pbar):
        tracker = ProgressTracker(2)
        tracker.start_file(Path("data/ref.csv"))
        mock_pbar.set_description.assert_called_with("Scoring references (ref.csv)")
        tracker.finish_file(success=False)
        mock_pbar.update.assert_called_once_with(1)
        mock_pbar.set_postfix.assert_called_once_with(unusable=1)
        tracker.close()
        mock_pbar.close.assert_called_once()
        assert tracker.pbar is None
