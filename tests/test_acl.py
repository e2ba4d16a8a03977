from __future__ import annotations

import asyncio

from proxylink.core.acl import AclUrlWorkflow
from proxylink.core.events import NOTIFICATION, EventChannel, Notification
from proxylink.core.mediator import MAIN_SERVICE, CommandMediator
from proxylink.core.transports import InProcessTransport


def _select(code: int, result=None):  # noqa: ANN001
    transport = InProcessTransport()

    async def handler(_params):  # noqa: ANN001
        return {"code": code, "result": result}

    transport.register(MAIN_SERVICE, "setAclUrl", handler)
    events = EventChannel()
    notes: list[Notification] = []
    events.subscribe(NOTIFICATION, notes.append)
    written: list[str] = []

    async def write(url: str) -> None:
        written.append(url)

    workflow = AclUrlWorkflow(CommandMediator(transport), events, write)
    response = asyncio.run(workflow.select())
    return response, notes, written


def test_selected_url_is_written() -> None:
    response, notes, written = _select(200, {"url": "/home/me/rules.acl"})
    assert response.ok
    assert written == ["/home/me/rules.acl"]
    assert notes == [Notification("successful_operation", "success")]


def test_user_cancel_has_its_own_message() -> None:
    _response, notes, written = _select(404)
    assert written == []
    assert notes == [Notification("user_canceled", "error")]


def test_other_failures_use_generic_message() -> None:
    _response, notes, written = _select(500)
    assert written == []
    assert notes == [Notification("failed_operation", "error")]
