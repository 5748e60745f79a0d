"""Application state container.

AppState is created once when the host starts the integration (see
``local.create_local_state`` for the filesystem host) and handed to the
controller, which passes the pieces on to documents and panels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdzview.config import Settings
    from mdzview.metadata import CompressedMetadataProvider
    from mdzview.protocols import NotifierProtocol, VaultProtocol, WorkspaceProtocol


@dataclass
class AppState:
    """Holds all shared runtime collaborators."""

    settings: Settings
    vault: VaultProtocol
    workspace: WorkspaceProtocol
    notifier: NotifierProtocol
    # Override-then-delegate decorator around the host's own metadata provider
    metadata: CompressedMetadataProvider
