from pydantic import BaseModel, Field, field_validator
from typing import Annotated, Self, Optional

from utils.utils import get_ip_version

def validate_addr(value: str | None) -> str | None:
  if value == None:
    return value
  try:
    get_ip_version(value)
  except ValueError:
    raise ValueError('Invalid IP address type. Correct IPv4 or IPv6 address')
  return value.strip()

class AddressQueryReq(BaseModel):
  addr: Annotated[str, Field(
    title='IP address',
    examples=['203.0.113.10', '2001:db8::1']
  )]

  @field_validator('addr')
  @classmethod
  def addr_validator(cls: type[Self], value: str) -> str | None:
    return validate_addr(value)

class AddressRecordReq(BaseModel):
  account_id: Annotated[str, Field(
    title='Account ID',
    min_length=1,
    examples=['6f1c2a9e-3b4d-4c47-9d51-0b2a6f0e7c11']
  )]
  addr: Annotated[str, Field(
    title='IP address recorded as signup IP',
    examples=['203.0.113.10']
  )]

  @field_validator('addr')
  @classmethod
  def addr_validator(cls: type[Self], value: str) -> str | None:
    return validate_addr(value)

class ScreenReq(BaseModel):
  addr: Annotated[Optional[str], Field(
    title='IP address of the signup',
    description='Client reported IP address. When empty the service resolves it through lookup providers',
    examples=['203.0.113.10']
  )] = None

  @field_validator('addr')
  @classmethod
  def addr_validator(cls: type[Self], value: str | None) -> str | None:
    return validate_addr(value)

