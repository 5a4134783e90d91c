"""
Configuration update API routes
"""
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from models import UpdateRequest
from update_manager import ConfigUpdater

router = APIRouter()


def get_updater(request: Request) -> ConfigUpdater:
    return request.app.state.updater


@router.post("/update", response_class=PlainTextResponse)
async def update_config(
    update: UpdateRequest, updater: ConfigUpdater = Depends(get_updater)
):
    """
    Install a signed WireGuard config and restart the interface.
    The message is written verbatim to the config file.
    """
    await updater.apply(update)
    return "Config updated"


@router.options("/update")
async def update_options():
    """CORS preflight"""
    return Response(status_code=200)
