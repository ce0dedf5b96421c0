"""
api/deps.py
-----------
FastAPI dependencies shared by the routers.

Tests swap any of these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Callable, Iterator

from fastapi import Depends

from wahotrip.db.connection import get_conn
from wahotrip.llm import LLMClient, make_llm_client
from wahotrip.modules.observability.logger import StructuredLogger
from wahotrip.modules.planning.generation_pipeline import GenerationPipeline
from wahotrip.modules.state.app_state import StateStore, get_state_store
from wahotrip.modules.tool_usage.resource_tool import ResourceTool

_events: StructuredLogger | None = None
_llm: LLMClient | None = None


def get_store() -> StateStore:
    return get_state_store()


def get_conn_factory() -> Callable:
    return get_conn


def get_db(conn_factory: Callable = Depends(get_conn_factory)) -> Iterator:
    """One pooled connection per request; committed on success, rolled back on error."""
    with conn_factory() as conn:
        yield conn


def get_resource_tool(conn_factory: Callable = Depends(get_conn_factory)) -> ResourceTool:
    return ResourceTool(conn_factory)


def get_events() -> StructuredLogger:
    global _events
    if _events is None:
        _events = StructuredLogger()
    return _events


def get_llm() -> LLMClient:
    global _llm
    if _llm is None:
        _llm = make_llm_client()
    return _llm


def get_pipeline(
    resource_tool: ResourceTool = Depends(get_resource_tool),
    events: StructuredLogger = Depends(get_events),
    llm: LLMClient = Depends(get_llm),
) -> GenerationPipeline:
    return GenerationPipeline(llm=llm, resource_tool=resource_tool, events=events)
