"""
Sourcing pipeline: JD analysis -> per-platform search -> result parsing ->
synthetic top-up -> deduplicated staging.

The stages are LangGraph nodes. Collaborators that are not plain data (the
search client and the dedup gate) travel in ``config["configurable"]`` so
one compiled graph serves every request.
"""
import asyncio
import os
from typing import Any, Dict, List, NamedTuple, Optional, Set, TypedDict

from dotenv import load_dotenv
from langchain_core.runnables import RunnableConfig
from langgraph.graph import StateGraph, END

from recruitops.helpers.constants import (
    ACTIVITY_ACTIONS, MIN_REAL_RESULTS, SOURCE_SYNTHETIC,
)
from recruitops.models.models import CandidateDraft, JDAnalysis, SearchResult
from recruitops.services.activity import log_activity
from recruitops.services.dedup import DedupGate, identity_key
from recruitops.services.keywords import analyze_job_description
from recruitops.services.mock_candidates import generate_mock_candidates
from recruitops.services.result_parser import DEFAULT_PLATFORMS, PLATFORMS, parse_result
from recruitops.services.search import BraveSearchClient, build_query
from recruitops.utils.logging_config import get_logger

load_dotenv()
logger = get_logger(__name__)

PLATFORM_TIMEOUT = float(os.getenv("PLATFORM_TIMEOUT", "15"))
SOURCED_TAGS: List[str] = list(PLATFORMS) + [SOURCE_SYNTHETIC]


class PlatformSearch(NamedTuple):
    platform: str
    keywords: List[str]
    results: List[SearchResult]
    error: Optional[str] = None


class SourcingState(TypedDict, total=False):
    jd: str
    limit: int
    platforms: List[str]
    clear_previous: bool
    analysis: JDAnalysis
    cleared: int
    searches: List[PlatformSearch]
    failed_platforms: List[str]
    candidates: List[CandidateDraft]
    used_mock: bool
    staged: List[Dict[str, Any]]
    skipped: int


def _collaborators(config: RunnableConfig) -> Dict[str, Any]:
    return (config or {}).get("configurable", {})


async def node_analyze(state: SourcingState):
    return {"analysis": analyze_job_description(state["jd"])}


async def node_clear(state: SourcingState, config: RunnableConfig):
    """Unscoped bulk delete of earlier sourced rows, only when asked for.

    Not isolated from readers: a concurrent listing may briefly see an
    empty staging table.
    """
    if not state.get("clear_previous"):
        return {"cleared": 0}
    gate: DedupGate = _collaborators(config)["gate"]
    result = await gate.collection.delete_many({"source": {"$in": SOURCED_TAGS}})
    logger.warning(f"Cleared {result.deleted_count} previously sourced staging rows")
    return {"cleared": result.deleted_count}


async def _search_platform(client: BraveSearchClient, platform_name: str, terms: List[str],
                           timeout: float) -> PlatformSearch:
    query = build_query(PLATFORMS[platform_name], terms)
    try:
        results = await asyncio.wait_for(asyncio.to_thread(client.search, query), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{platform_name} search timed out after {timeout}s for [{', '.join(terms)}]")
        return PlatformSearch(platform_name, terms, [], error="timeout")
    except Exception as e:
        logger.warning(f"{platform_name} search failed for [{', '.join(terms)}]: {e}")
        return PlatformSearch(platform_name, terms, [], error=str(e))
    logger.info(f"{platform_name} search for [{', '.join(terms)}] returned {len(results)} results")
    return PlatformSearch(platform_name, terms, results)


async def node_search(state: SourcingState, config: RunnableConfig):
    collab = _collaborators(config)
    client: BraveSearchClient = collab["search_client"]
    timeout = collab.get("platform_timeout", PLATFORM_TIMEOUT)
    keyword_sets = state["analysis"].keyword_sets

    if not client.configured:
        logger.info("BRAVE_SEARCH_API_KEY not set - skipping live search, synthetic candidates will fill the queue")
        return {"searches": [], "failed_platforms": []}

    # platform i gets combination i mod n so each platform sees a different query
    searches = await asyncio.gather(*[
        _search_platform(client, name, keyword_sets[i % len(keyword_sets)], timeout)
        for i, name in enumerate(state["platforms"])
    ])
    failed = [s.platform for s in searches if s.error]
    await log_activity(
        ACTIVITY_ACTIONS["search"],
        state["analysis"].role,
        details={s.platform: {"query": s.keywords, "results": len(s.results), "error": s.error} for s in searches},
        entity_type="search",
    )
    return {"searches": list(searches), "failed_platforms": failed}


async def node_parse(state: SourcingState, config: RunnableConfig):
    gate: DedupGate = _collaborators(config)["gate"]
    limit = state["limit"]
    candidates: List[CandidateDraft] = []

    for search in state.get("searches", []):
        platform = PLATFORMS[search.platform]
        for result in search.results:
            if len(candidates) >= limit:
                break
            draft = parse_result(result, platform, search.keywords)
            if draft is None:
                continue
            if not gate.claim(identity_key(draft)):
                continue
            candidates.append(draft)

    logger.info(f"Parsed {len(candidates)} real candidates from {len(state.get('searches', []))} platform searches")
    return {"candidates": candidates}


async def node_fallback(state: SourcingState, config: RunnableConfig):
    gate: DedupGate = _collaborators(config)["gate"]
    candidates = list(state.get("candidates", []))
    if len(candidates) >= MIN_REAL_RESULTS:
        return {"used_mock": False}

    added = 0
    for mock in generate_mock_candidates(state["analysis"].keyword_sets, state["jd"]):
        if len(candidates) >= state["limit"]:
            break
        if gate.claim(identity_key(mock)):
            candidates.append(mock)
            added += 1

    logger.info(f"Only {len(candidates) - added} real candidates; added {added} synthetic placeholders")
    return {"candidates": candidates, "used_mock": added > 0}


async def node_persist(state: SourcingState, config: RunnableConfig):
    gate: DedupGate = _collaborators(config)["gate"]
    staged = await gate.stage_all(state.get("candidates", []))

    analysis = state["analysis"]
    await log_activity(
        ACTIVITY_ACTIONS["sourcing"],
        analysis.role,
        details={
            "keyword_sets": analysis.keyword_sets,
            "sourced": len(staged),
            "skipped": gate.skipped,
            "used_mock": state.get("used_mock", False),
            "failed_platforms": state.get("failed_platforms", []),
        },
        entity_type="sourcing_run",
    )
    return {"staged": staged, "skipped": gate.skipped}


def build_graph():
    g = StateGraph(SourcingState)
    g.add_node("analyze", node_analyze)
    g.add_node("clear", node_clear)
    g.add_node("search", node_search)
    g.add_node("parse", node_parse)
    g.add_node("fallback", node_fallback)
    g.add_node("persist", node_persist)
    g.set_entry_point("analyze")
    g.add_edge("analyze", "clear")
    g.add_edge("clear", "search")
    g.add_edge("search", "parse")
    g.add_edge("parse", "fallback")
    g.add_edge("fallback", "persist")
    g.add_edge("persist", END)
    return g.compile()


SOURCING_GRAPH = build_graph()


async def run_sourcing(
    jd: str,
    limit: int = 10,
    platforms: Optional[List[str]] = None,
    clear_previous: bool = False,
    search_client: Optional[BraveSearchClient] = None,
    collection=None,
    seen: Optional[Set[str]] = None,
    platform_timeout: float = PLATFORM_TIMEOUT,
) -> Dict[str, Any]:
    """Run one sourcing request end to end and return the final state.

    ``seen`` is the request-scoped identity-key set; pass one in to share it
    with a caller that stages more candidates in the same run.
    """
    if collection is None:
        from recruitops.services.db import unvetted_coll
        collection = unvetted_coll

    gate = DedupGate(collection, seen=seen if seen is not None else set())
    state: SourcingState = {
        "jd": jd,
        "limit": limit,
        "platforms": platforms or DEFAULT_PLATFORMS,
        "clear_previous": clear_previous,
    }
    config = {"configurable": {
        "search_client": search_client or BraveSearchClient(),
        "gate": gate,
        "platform_timeout": platform_timeout,
    }}
    return await SOURCING_GRAPH.ainvoke(state, config=config)
