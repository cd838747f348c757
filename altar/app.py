"""
Altar HTTP app for the workspace tools.

Serve the factory with an ASGI server:
    altar.app:create_app (factory)
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from enclave import Config
from enclave.shared.gate import GateLogger
from enclave.ToolGate import Dispatcher
from enclave.WorkspaceGate import WorkspaceGate

from altar.api.files import create_router

_log = GateLogger.get("Altar")


def create_app(settings: Optional[Config.Settings] = None) -> FastAPI:
    """
    Build the FastAPI app with the workspace established up front.

    Raises:
        WorkspaceUnavailable: If no workspace directory can be created; the
            app is never returned half-initialized.
    """
    settings = settings or Config.load_settings()
    GateLogger.set_level(settings.log_level)

    gate = WorkspaceGate.from_settings(settings)
    dispatcher = Dispatcher(gate)

    app = FastAPI(title="Enclave")
    app.state.dispatcher = dispatcher
    app.include_router(create_router(dispatcher))

    _log.info(f"Altar serving workspace at {gate.workspace.root}")
    return app
