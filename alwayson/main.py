import os
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from .lockdown.exceptions import (
    InvalidIndexError,
    InvalidLockdownProfileError,
    StaleSelectionError,
    StoreReadError,
    StoreWriteError,
)
from .lockdown.manager import LockdownManager
from .logging_utility import logger


app = FastAPI(title="Always-on VPN Lockdown")


@lru_cache()
def get_manager() -> LockdownManager:
    return LockdownManager.from_config(
        os.environ.get("ALWAYSON_CONFIG", "config/alwayson_lockdown.conf")
    )


class CandidateOut(BaseModel):
    index: int
    id: str
    kind: str
    label: str


class CandidatesOut(BaseModel):
    candidates: List[CandidateOut]
    active_index: int


class Selection(BaseModel):
    index: int
    candidate_id: Optional[str] = None


@app.get("/lockdown", response_model=CandidatesOut)
def list_candidates(manager: LockdownManager = Depends(get_manager)):
    """List lockdown candidates and the currently active one"""
    try:
        candidates = manager.get_candidates()
    except Exception as e:
        logger.error(f"Error listing lockdown candidates: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to list lockdown candidates")

    return CandidatesOut(
        candidates=[
            CandidateOut(index=i, id=c.id, kind=c.kind.value, label=c.label)
            for i, c in enumerate(candidates.candidates)
        ],
        active_index=candidates.active_index,
    )


@app.post("/lockdown")
def select_candidate(selection: Selection, manager: LockdownManager = Depends(get_manager)):
    """Make the selected candidate the always-on VPN"""
    try:
        changed = manager.select(selection.index, selection.candidate_id)
    except (InvalidIndexError, InvalidLockdownProfileError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StaleSelectionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreWriteError as e:
        logger.error(f"Store write failed during lockdown commit: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to save lockdown selection; no VPN may be active")
    except StoreReadError as e:
        logger.error(f"Store read failed during lockdown commit: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to read lockdown stores")
    except Exception as e:
        logger.error(f"Error committing lockdown selection: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to save lockdown selection")

    if changed:
        return {"status": "success", "message": f"Lockdown VPN set to candidate {selection.index}"}
    return {"status": "unchanged", "message": f"Candidate {selection.index} already active"}
