from fastapi import APIRouter, status, Query, Body
from fastapi.responses import JSONResponse
from typing import Annotated, Self

from logger.logger import logger

from .base_router import BaseRouter

# base
from models.http.base import ErrorResp
# request models
from models.http.ip_control_req import AddressQueryReq, AddressRecordReq, ScreenReq
# response models
from models.http.ip_control_resp import ResolveResp, CheckResp, CheckAccountResp, RecordResp, ScreenResp

from models.dto.address_dto import ResolvedAddressDto, DuplicateCheckDto
from models.dto.screening_dto import ScreeningDto

class IpControlRouter(BaseRouter):

  @staticmethod
  def screen_resp(screening: ScreeningDto) -> ScreenResp:
    return ScreenResp(
      verdict=screening.verdict.value,
      allowed=screening.allowed,
      addr=screening.address,
      count=screening.count
    )

  def get_router(self: Self) -> APIRouter:
    router: APIRouter = APIRouter(tags=[self.tags.ip_control_tag.name], prefix='/ip')
    logger.info('IpControlRouter init')

    @router.get(
      path='/resolve',
      name='Resolve public IP address',
      description='Asks lookup providers one by one. "available" = false when every provider failed',
      response_model=ResolveResp,
      responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResp}
      }
    )
    async def resolve_address() -> JSONResponse:
      logger.debug(f'Call API route: GET /ip/resolve')
      try:
        resolved: ResolvedAddressDto = await self.ip_control.resolve_address()
        resp: ResolveResp = ResolveResp(
          addr=resolved.address,
          provider=resolved.provider,
          available=resolved.available,
          failed_providers=resolved.failed_providers
        )
        return JSONResponse(resp.to_dict(), status.HTTP_200_OK)
      except Exception as err:
        return self.errorResp(err)

    @router.get(
      path='/check',
      name='Count accounts by signup IP',
      description='Existing accounts registered from the IP address. A failed store query answers zero matches with "failed" = true',
      response_model=CheckResp,
      responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResp}
      }
    )
    async def check_address(query: Annotated[AddressQueryReq, Query()]) -> JSONResponse:
      logger.debug(f'Call API route: GET /ip/check')
      try:
        check: DuplicateCheckDto = await self.ip_control.count_accounts_by_address(address=query.addr)
        resp: CheckResp = CheckResp(
          addr=check.address,
          exists=check.exists,
          count=check.count,
          failed=check.failed,
          accounts=[
            CheckAccountResp(
              id=account.id,
              full_name=account.full_name,
              created_at=None if account.created_at == None else account.created_at.timestamp()
            )
            for account in check.accounts
          ]
        )
        return JSONResponse(resp.to_dict(), status.HTTP_200_OK)
      except Exception as err:
        return self.errorResp(err)

    @router.put(
      path='/record',
      name='Record signup IP for account',
      description='Saves the IP address as account signup IP. "result" = false when the account is missing or the store failed',
      response_model=RecordResp,
      responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResp}
      }
    )
    async def record_address(data: Annotated[AddressRecordReq, Body()]) -> JSONResponse:
      logger.debug(f'Call API route: PUT /ip/record')
      try:
        result: bool = await self.ip_control.record_address(account_id=data.account_id, address=data.addr)
        return JSONResponse(RecordResp(result=result).to_dict(), status.HTTP_200_OK)
      except Exception as err:
        return self.errorResp(err)

    @router.post(
      path='/screen',
      name='Screen signup by IP',
      description='Signup verdict: allow, block (address already has accounts) or unknown (address not resolved)',
      response_model=ScreenResp,
      responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResp}
      }
    )
    async def screen_signup(data: Annotated[ScreenReq, Body()]) -> JSONResponse:
      logger.debug(f'Call API route: POST /ip/screen')
      try:
        screening: ScreeningDto = await self.ip_control.screen_signup(address=data.addr)
        return JSONResponse(self.screen_resp(screening).to_dict(), status.HTTP_200_OK)
      except Exception as err:
        return self.errorResp(err)

    return router
