"""Graph API: load, inspect, analyze, path queries, DOT and tree views."""

from __future__ import annotations

import asyncio
from dataclasses import replace

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from depmap.analysis import Enrichment, analyze, find_path
from depmap.config import AnalysisConfig, ConfigError
from depmap.exporter import classify_node, render_dot, render_tree
from depmap.metadata import MetadataError
from depmap.pipeline import load_graph, make_runner
from depmap.web.state import GraphSession, state

router = APIRouter(prefix="/api")


class LoadRequest(BaseModel):
    manifest_path: str | None = None
    metadata_file: str | None = None


class AnalysisRequest(BaseModel):
    session_id: str
    enrich: bool = False
    largest_limit: int | None = Field(None, ge=0)


class PathRequest(BaseModel):
    session_id: str
    from_name: str
    to_name: str


def _get_session(session_id: str) -> GraphSession:
    session = state.get_session(session_id)
    if session is None:
        raise HTTPException(404, "Graph session not found")
    return session


@router.post("/graph")
async def load(req: LoadRequest):
    try:
        config = state.config or AnalysisConfig()
        if req.manifest_path or req.metadata_file:
            config = replace(config, manifest_path=req.manifest_path, metadata_file=req.metadata_file)
        graph = await asyncio.to_thread(load_graph, config)
    except (MetadataError, ConfigError) as e:
        raise HTTPException(400, str(e))

    session = GraphSession(graph=graph, config=config)
    state.add_session(session)
    root = graph.root_node
    return {
        "session_id": session.id,
        "nodes": len(graph.nodes),
        "edges": len(graph.edges),
        "root": root.label if root else None,
    }


@router.get("/graph/{session_id}")
async def get_graph(session_id: str):
    session = _get_session(session_id)
    graph = session.graph
    return {
        "session_id": session.id,
        "created": session.timestamp,
        "root": graph.root,
        "nodes": [
            {
                "index": i,
                "id": n.package_id,
                "name": n.name,
                "version": n.version,
                "source": n.source,
                "license": n.license,
                "features": sorted(n.features),
                "size_bytes": n.size_bytes,
                "is_dev": n.is_dev,
                "is_build": n.is_build,
                "depth": n.depth,
                "class": classify_node(n, session.config.deep_threshold).value,
            }
            for i, n in enumerate(graph.nodes)
        ],
        "edges": [
            {"source": e.source, "target": e.target, "kind": e.kind.value}
            for e in graph.edges
        ],
        "analysis": session.report.to_dict() if session.report else None,
    }


@router.delete("/graph/{session_id}")
async def delete_graph(session_id: str):
    if not state.delete_session(session_id):
        raise HTTPException(404, "Graph session not found")
    return {"deleted": session_id}


@router.post("/analysis")
async def analyze_graph(req: AnalysisRequest):
    session = _get_session(req.session_id)
    enrichment = None
    if req.enrich:
        enrichment = Enrichment(make_runner(session.config), cargo=session.config.cargo)

    largest_limit = req.largest_limit
    if largest_limit is None:
        largest_limit = session.config.largest_limit
    report = await asyncio.to_thread(
        analyze, session.graph, enrichment, largest_limit,
    )
    session.report = report
    return report.to_dict()


@router.post("/path")
async def get_path(req: PathRequest):
    session = _get_session(req.session_id)
    return {
        "from": req.from_name,
        "to": req.to_name,
        "path": find_path(session.graph, req.from_name, req.to_name),
    }


@router.get("/dot/{session_id}", response_class=PlainTextResponse)
async def get_dot(session_id: str):
    session = _get_session(session_id)
    return render_dot(session.graph, session.config.deep_threshold)


@router.get("/tree/{session_id}")
async def get_tree(session_id: str):
    session = _get_session(session_id)
    return {"lines": render_tree(session.graph, deep_threshold=session.config.deep_threshold)}
