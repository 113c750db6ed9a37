from pydantic import Field
from typing import Annotated, Optional

from .ip_control_req import ScreenReq

class AccountsPostReq(ScreenReq):
  id: Annotated[Optional[str], Field(
    title='Account ID',
    description='Account ID from the auth provider. Generated when empty',
    min_length=1
  )] = None
  full_name: Annotated[Optional[str], Field(
    title='Display name',
    min_length=1,
    examples=['Jane Doe']
  )] = None
