"""Reading routes: generate, per-user history, telemetry summary."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from deps import get_generator
from generation import GenerationState, ReadingGenerator, ReadingValidationError
from schemas import ReadingHistoryItem, ReadingHistoryResponse, ReadingRequest, ReadingResponse
from telemetry import read_telemetry_summary, record_reading_outcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/readings", tags=["readings"])


# Sync on purpose: the per-user lock blocks, so this runs in the threadpool.
@router.post("/generate", response_model=ReadingResponse)
def generate_reading(payload: ReadingRequest, generator: ReadingGenerator = Depends(get_generator)):
    try:
        result = generator.generate(
            user_id=payload.user_id,
            symbols=payload.symbols,
            culture_mode=payload.culture_mode,
            lang=payload.lang,
            region=payload.region,
        )
    except ReadingValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception:
        logger.exception("reading generation failed")
        record_reading_outcome("reading_error", payload.user_id)
        raise HTTPException(status_code=500, detail="internal_error")

    record_reading_outcome(
        "reading_accepted" if result.state == GenerationState.ACCEPTED else "reading_fallback",
        payload.user_id,
        attempts=result.attempts,
        exact_combo_recent=result.exact_combo_recent,
        symbol_count=len(payload.symbols or []),
        lang=payload.lang,
    )
    return ReadingResponse(text=result.text)


@router.get("/history/{user_id}", response_model=ReadingHistoryResponse)
def reading_history(
    user_id: str,
    limit: Optional[int] = None,
    generator: ReadingGenerator = Depends(get_generator),
):
    n = generator.config.max_recent if limit is None else max(1, min(limit, 200))
    entries = generator.store.recent_entries(user_id, n)
    return ReadingHistoryResponse(
        user_id=user_id,
        count=len(entries),
        entries=[
            ReadingHistoryItem(
                created_at=e.created_at,
                text_hash=f"{e.text_hash:016x}",
                symbol_perm=e.symbol_perm,
            )
            for e in entries
        ],
    )


@router.get("/telemetry/summary")
async def reading_telemetry_summary(hours: int = 24, limit: int = 6):
    return read_telemetry_summary(hours=hours, limit=limit)
