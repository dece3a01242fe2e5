"""API route definitions."""

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from clubstats.analysis.datasets import DatasetKind, get_dataset
from clubstats.analysis.loader import DatasetLoadError, get_loader
from clubstats.analysis.table import filter_options, filter_rows, sort_rows

router = APIRouter()


class DatasetTable(BaseModel):
    columns: list[str]
    rows: list[dict[str, Any]]
    total: int


class FilterOptions(BaseModel):
    leagues: list[str]
    seasons: list[Any]


async def _load(kind: DatasetKind) -> list[dict]:
    try:
        return await get_loader().load_and_derive(kind)
    except DatasetLoadError:
        raise HTTPException(status_code=502, detail="Failed to load dataset")


@router.get("/datasets/{kind}/columns")
def dataset_columns(kind: DatasetKind):
    """Ordered column names for a dataset."""
    return {"columns": list(get_dataset(kind).columns)}


@router.get("/datasets/{kind}/filters", response_model=FilterOptions)
async def dataset_filters(kind: DatasetKind):
    """League and season values available for filtering."""
    rows = await _load(kind)
    return filter_options(rows)


@router.get("/datasets/{kind}", response_model=DatasetTable)
async def dataset_rows(
    kind: DatasetKind,
    league: Optional[str] = Query(None, description="League acronym, or 'all'"),
    season: Optional[str] = Query(None, description="Season year, or 'all'"),
    sort_by: Optional[str] = Query(None, description="Column to sort by (e.g., wRC+)"),
    descending: bool = Query(False),
):
    """Derived rows for the club, filtered and optionally sorted."""
    config = get_dataset(kind)
    if sort_by and sort_by not in config.columns:
        raise HTTPException(status_code=400, detail=f"Unknown column: {sort_by}")

    rows = filter_rows(await _load(kind), league=league, season=season)
    if sort_by:
        rows = sort_rows(rows, sort_by, config.sort_keys, descending=descending)

    return {"columns": list(config.columns), "rows": rows, "total": len(rows)}


@router.post("/cache/clear")
def clear_cache():
    """Drop cached rosters and league baselines so the next request refetches."""
    get_loader().clear_cache()
    return {"status": "cleared"}
