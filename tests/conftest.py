# -*- coding: Utf-8 -*-

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from netsock.impl.base import ImplFactorySlot

import pytest

if TYPE_CHECKING:
    from pytest import MonkeyPatch


################################## Auto used fixtures for all session test ##################################


@pytest.fixture(autouse=True)
def __reset_impl_factories(monkeypatch: MonkeyPatch) -> None:
    """
    Implementation factories can be installed only once per process: give each test its own slots
    """
    import netsock.client
    import netsock.server

    monkeypatch.setattr(netsock.client, "_IMPL_FACTORY", ImplFactorySlot("client"))
    monkeypatch.setattr(netsock.server, "_IMPL_FACTORY", ImplFactorySlot("server"))


@pytest.fixture(scope="session")
def netsock_rootdir() -> Path:
    import netsock

    return Path(netsock.__file__).parent
