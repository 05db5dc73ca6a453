"""Shared test fixtures."""

from __future__ import annotations

import io
from typing import Callable, Iterable
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from rich.console import Console


@pytest.fixture
def make_client_error() -> Callable[..., ClientError]:
    """Factory for botocore ClientError instances."""

    def _make(code: str = "ValidationError", message: str = "Something went wrong", operation: str = "Delete") -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)

    return _make


@pytest.fixture
def console() -> Console:
    """Rich console that records output instead of printing it."""
    return Console(file=io.StringIO(), record=True, width=200, highlight=False)


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def stub_paginators() -> Callable[..., dict[str, MagicMock]]:
    """Factory wiring client.get_paginator(operation) to canned pages.

    Pages may be any iterable, including a generator that raises part way.
    Returns the paginator mocks by operation name for call assertions.
    """

    def _stub(client: MagicMock, pages_by_operation: dict[str, Iterable[dict]]) -> dict[str, MagicMock]:
        paginators = {}
        for operation_name, pages in pages_by_operation.items():
            paginator = MagicMock()
            paginator.paginate.return_value = pages
            paginators[operation_name] = paginator
        client.get_paginator.side_effect = lambda operation_name: paginators[operation_name]
        return paginators

    return _stub
