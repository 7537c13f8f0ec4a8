from pydantic import BaseModel
from typing import Optional


# Reading Schemas
class ReadingRequest(BaseModel):
    user_id: Optional[str] = None
    symbols: Optional[list[str]] = None
    culture_mode: bool = False
    lang: str = "tr"
    region: str = "GLOBAL"


class ReadingResponse(BaseModel):
    text: str


class ReadingHistoryItem(BaseModel):
    created_at: int
    text_hash: str  # 16-digit hex
    symbol_perm: str


class ReadingHistoryResponse(BaseModel):
    user_id: str
    count: int
    entries: list[ReadingHistoryItem]
