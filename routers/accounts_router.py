from fastapi import APIRouter, status, Path, Body
from fastapi.responses import JSONResponse
from uuid import uuid4
from typing import Annotated, Self

from logger.logger import logger

from .base_router import BaseRouter
from .ip_control_router import IpControlRouter

# base
from models.http.base import ErrorResp, NotFoundResp, ConflictResp
# request models
from models.http.accounts_req import AccountsPostReq
# response models
from models.http.accounts_resp import AccountElementResp, AccountCreatedResp

from models.dto.address_dto import AccountDto

class AccountsRouter(BaseRouter):

  @staticmethod
  def account_resp(account: AccountDto) -> AccountElementResp:
    return AccountElementResp(
      id=account.id,
      full_name=account.full_name,
      signup_ip=account.signup_ip,
      created_at=None if account.created_at == None else account.created_at.timestamp(),
      created_at_hum=None if account.created_at == None else account.created_at.strftime('%Y-%m-%d %H:%M:%S')
    )

  def get_router(self: Self) -> APIRouter:
    router: APIRouter = APIRouter(tags=[self.tags.accounts_tag.name], prefix='/accounts')
    logger.info('AccountsRouter init')

    @router.post(
      path='',
      name='Register account',
      description='Screens the signup IP, creates the account when allowed and saves its signup IP',
      response_model=AccountCreatedResp,
      status_code=status.HTTP_201_CREATED,
      responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResp},
        status.HTTP_409_CONFLICT: {'model': ConflictResp}
      }
    )
    async def add_account(data: Annotated[AccountsPostReq, Body()]) -> JSONResponse:
      logger.debug(f'Call API route: POST /accounts')
      try:
        account_id: str = data.id if data.id != None else str(uuid4())
        if await self.ip_control.database.get_account_on_id(id=account_id) != None:
          conflict: ConflictResp = ConflictResp(resolution=f"Account with ID '{account_id}' already exists")
          return JSONResponse(conflict.to_dict(), status.HTTP_409_CONFLICT)
        screening, account = await self.ip_control.register_signup(
          account_id=account_id,
          full_name=data.full_name,
          address=data.addr
        )
        if not screening.allowed:
          conflict = ConflictResp(
            resolution='An account has already been created from this IP address. Please log in or contact support'
          )
          return JSONResponse(conflict.to_dict(), status.HTTP_409_CONFLICT)
        if account == None:
          return JSONResponse(ErrorResp(error='Account was not created').to_dict(), status.HTTP_500_INTERNAL_SERVER_ERROR)
        resp: AccountCreatedResp = AccountCreatedResp(
          account=self.account_resp(account),
          screening=IpControlRouter.screen_resp(screening)
        )
        return JSONResponse(resp.to_dict(), status.HTTP_201_CREATED)
      except Exception as err:
        return self.errorResp(err)

    @router.get(
      path='/{id}',
      name='Get one account on ID',
      response_model=AccountElementResp,
      responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': ErrorResp},
        status.HTTP_404_NOT_FOUND: {'model': NotFoundResp}
      }
    )
    async def get_account_on_id(id: Annotated[str, Path(min_length=1, title='Account ID')]) -> JSONResponse:
      logger.debug(f'Call API route: GET /accounts/{id}')
      try:
        account: AccountDto | None = await self.ip_control.database.get_account_on_id(id=id)
        if account == None:
          not_found_resp: NotFoundResp = NotFoundResp(resolution=f"Account with ID '{id}' not found")
          return JSONResponse(not_found_resp.to_dict(), status.HTTP_404_NOT_FOUND)
        return JSONResponse(self.account_resp(account).to_dict(), status.HTTP_200_OK)
      except Exception as err:
        return self.errorResp(err)

    return router
