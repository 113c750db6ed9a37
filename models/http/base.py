from pydantic import BaseModel
from typing import Optional, Self, Dict, Any

class Base(BaseModel):

  def to_dict(self: Self) -> Dict[str, Any]:
    return self.model_dump(mode='json', exclude_none=False)

class ErrorResp(Base):
  error: str
  resolution: Optional[str] = None

class NotFoundResp(ErrorResp):
  error: str = 'NOT_FOUND'

class ConflictResp(ErrorResp):
  error: str = 'CONFLICT'
