"""Integration test fixtures.

Provides an AppState wired to the local filesystem host over ``tmp_path``,
with notices captured in memory instead of printed.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from mdzview.codec import compress
from mdzview.config import Settings
from mdzview.controller import OutlineController
from mdzview.local import create_local_state

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from mdzview.state import AppState


@pytest.fixture()
def write_mdz(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write gzip-compressed markdown under the vault root."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(compress(text))
        return path

    return _write


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def app_state(tmp_path: Path, settings: Settings) -> AppState:
    return create_local_state(tmp_path, settings, stream=io.StringIO())


@pytest.fixture()
def controller(app_state: AppState) -> Iterator[OutlineController]:
    controller = OutlineController(app_state)
    controller.attach()
    yield controller
    controller.detach()
