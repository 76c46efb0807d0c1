"""Pytest configuration and shared fixtures."""

import io
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from media_uploader.models import OutputMode, UploaderConfig
from media_uploader.presenter import Presenter

SERVER = "https://media.test"


class CapturedPresenter(Presenter):
    """Presenter writing to in-memory buffers."""

    def __init__(self, mode: OutputMode) -> None:
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        super().__init__(
            mode,
            console=Console(file=self.stdout, width=200),
            err_console=Console(file=self.stderr, width=200),
        )

    @property
    def out_lines(self) -> list[str]:
        return self.stdout.getvalue().splitlines()

    @property
    def err_text(self) -> str:
        return self.stderr.getvalue()


@pytest.fixture
def server() -> str:
    """Return the base address of the fake server."""
    return SERVER


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Create a temporary directory structure with media files.

    Structure:
        temp_dir/
            a.png
            b.gif
            same_as_a.png
            nested/
                c.jpg
                deeper/
                    d.mp4
    """
    (tmp_path / "a.png").write_bytes(b"fake png content")
    (tmp_path / "b.gif").write_bytes(b"fake gif content")
    (tmp_path / "same_as_a.png").write_bytes(b"fake png content")

    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "c.jpg").write_bytes(b"fake jpg content")

    deeper = nested / "deeper"
    deeper.mkdir()
    (deeper / "d.mp4").write_bytes(b"fake mp4 content")

    return tmp_path


@pytest.fixture
def make_config(server: str) -> Callable[..., UploaderConfig]:
    """Build an UploaderConfig pointing at the fake server."""

    def _make(**kwargs) -> UploaderConfig:
        kwargs.setdefault("server", server)
        return UploaderConfig(**kwargs)

    return _make


@pytest.fixture
def presenter() -> CapturedPresenter:
    """Non-interactive presenter capturing its output."""
    return CapturedPresenter(OutputMode.NON_INTERACTIVE)


@pytest.fixture
def interactive_presenter() -> CapturedPresenter:
    """Interactive presenter capturing its output."""
    return CapturedPresenter(OutputMode.INTERACTIVE)
