"""/v1/snapshots and /v1/form-state - Save and reload entries snapshots"""

import logging
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from treasury_pooling.api.v1.schemas import (
    ClientEntrySchema,
    DerivedStateResponse,
    EntriesRequest,
    FormStateResponse,
    SnapshotListItem,
    SnapshotListResponse,
    SnapshotResponse,
    WhatIfParamsSchema,
)
from treasury_pooling.api.v1.liquidity import recompute
from treasury_pooling.api.dependencies import get_reference_data, get_request_id, resolve_what_if_params
from treasury_pooling.domain.exceptions import InvalidSnapshotError, SnapshotNotFoundError
from treasury_pooling.domain.reference_data import ReferenceData
from treasury_pooling.infrastructure.database.models import SavedSnapshot
from treasury_pooling.infrastructure.database.session import get_db
from treasury_pooling.infrastructure.database.repositories import (
    FormStateRepository,
    SnapshotRepository,
    entries_from_snapshot,
)
from treasury_pooling.infrastructure.observability.logging import log_snapshot_operation
from treasury_pooling.infrastructure.observability.metrics import snapshot_operation_counter

router = APIRouter()


def _to_response(snapshot: SavedSnapshot) -> SnapshotResponse:
    return SnapshotResponse(
        name=snapshot.name,
        saved_at=snapshot.saved_at.isoformat(),
        entries=[ClientEntrySchema.from_domain(e) for e in entries_from_snapshot(snapshot.data)],
    )


@router.put("/snapshots/{name}", response_model=SnapshotResponse)
def save_snapshot(
    name: str,
    request_body: EntriesRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Save entries under a name, replacing any snapshot already stored there.

    The write is a single transaction: readers see the old or the new snapshot, never a mix.
    """
    request_id = get_request_id(request)
    try:
        snapshot = SnapshotRepository(db).save(name, request_body.to_domain())
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Snapshot save failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    snapshot_operation_counter.labels(operation="save").inc()
    log_snapshot_operation(request_id, "save", name)
    return _to_response(snapshot)


@router.get("/snapshots", response_model=SnapshotListResponse)
def list_snapshots(db: Session = Depends(get_db)):
    """Saved snapshots, most recent first"""
    snapshots = SnapshotRepository(db).list_all()
    return SnapshotListResponse(
        snapshots=[
            SnapshotListItem(
                name=s.name,
                saved_at=s.saved_at.isoformat(),
                entry_count=len(s.data) if isinstance(s.data, list) else 0,
            )
            for s in snapshots
        ]
    )


@router.get("/snapshots/{name}", response_model=SnapshotResponse)
def get_snapshot(name: str, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        response = _to_response(SnapshotRepository(db).get(name))
    except SnapshotNotFoundError as e:
        logging.warning(f"Snapshot not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Snapshot not found")
    except InvalidSnapshotError as e:
        logging.warning(f"Invalid snapshot: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    snapshot_operation_counter.labels(operation="load").inc()
    log_snapshot_operation(request_id, "load", name)
    return response


@router.delete("/snapshots/{name}", status_code=204)
def delete_snapshot(name: str, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        SnapshotRepository(db).delete(name)
        db.commit()
    except SnapshotNotFoundError as e:
        db.rollback()
        logging.warning(f"Snapshot not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Snapshot not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Snapshot delete failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    snapshot_operation_counter.labels(operation="delete").inc()
    log_snapshot_operation(request_id, "delete", name)
    return Response(status_code=204)


@router.post("/snapshots/{name}/summary", response_model=DerivedStateResponse, response_model_exclude_none=True)
def summarize_snapshot(
    name: str,
    request: Request,
    what_if: Optional[WhatIfParamsSchema] = None,
    db: Session = Depends(get_db),
    reference: ReferenceData = Depends(get_reference_data),
):
    """Load a saved snapshot and recompute its derived state"""
    request_id = get_request_id(request)
    try:
        entries = SnapshotRepository(db).load_entries(name)
    except SnapshotNotFoundError as e:
        logging.warning(f"Snapshot not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Snapshot not found")
    except InvalidSnapshotError as e:
        logging.warning(f"Invalid snapshot: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    state = recompute(entries, resolve_what_if_params(what_if), reference, request_id)
    return DerivedStateResponse.model_validate(asdict(state))


@router.put("/form-state", response_model=FormStateResponse)
def save_form_state(request_body: EntriesRequest, request: Request, db: Session = Depends(get_db)):
    """Store the unnamed working copy of the form"""
    request_id = get_request_id(request)
    entries = request_body.to_domain()
    try:
        state = FormStateRepository(db).save_current(entries)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Form state save failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    snapshot_operation_counter.labels(operation="save_current").inc()
    return FormStateResponse(
        saved_at=state.saved_at.isoformat(),
        entries=[ClientEntrySchema.from_domain(e) for e in entries],
    )


@router.get("/form-state", response_model=FormStateResponse)
def get_form_state(request: Request, db: Session = Depends(get_db)):
    state = FormStateRepository(db).load_current()
    if state is None:
        raise HTTPException(status_code=404, detail="No form state saved")

    try:
        entries = entries_from_snapshot(state.data)
    except InvalidSnapshotError as e:
        logging.warning(f"Invalid form state: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    snapshot_operation_counter.labels(operation="load_current").inc()
    return FormStateResponse(
        saved_at=state.saved_at.isoformat(),
        entries=[ClientEntrySchema.from_domain(e) for e in entries],
    )
