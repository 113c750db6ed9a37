from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from datetime import datetime
from time import time
from typing import Self

from logger.logger import logger
from config.config import settings

from .base_router import BaseRouter

from models.http.home_resp import WelcomeResp, HealthResp, ConfigResp

class HomeRouter(BaseRouter):

  start_time: float = time()

  def get_router(self: Self) -> APIRouter:
    router: APIRouter = APIRouter(tags=[self.tags.home_tag.name])
    logger.info('HomeRouter init')

    # Welcome
    ############################################

    @router.get(
      path='/',
      name='Welcome',
      description='Base welcome answer',
      response_model=WelcomeResp
    )
    async def welcome() -> JSONResponse:
      logger.debug(f'Call API route: GET /')
      resp: WelcomeResp = WelcomeResp(version=settings.app_version, docs='/docs')
      return JSONResponse(resp.to_dict(), status.HTTP_200_OK)

    # Health
    ############################################

    @router.get(
      path='/health',
      name='Health check',
      description='API OK checker',
      response_model=HealthResp
    )
    async def health() -> JSONResponse:
      logger.debug(f'Call API route: GET /health')
      ts = datetime.timestamp(datetime.now()) // 1
      uptime = (time() - self.start_time) // 1
      resp: HealthResp = HealthResp(
        ts=ts,
        uptime=uptime,
        db_ready=self.ip_control.database.ready,
        db_pool=self.ip_control.database.pool_status
      )
      return JSONResponse(resp.to_dict(), status.HTTP_200_OK)

    # Current config
    ############################################

    @router.get(
      path='/config',
      name='Current config',
      description='Current lookup and IP control settings',
      response_model=ConfigResp
    )
    async def get_config() -> JSONResponse:
      logger.debug(f'Call API route: GET /config')
      resp: ConfigResp = ConfigResp(
        app_title=settings.app_title,
        app_version=settings.app_version,
        root_log_level=settings.root_log_level,
        db_connection=settings.db_connection,
        req_timeout_default=settings.req_timeout_default,
        req_timeout_connect=settings.req_timeout_connect,
        req_timeout_read=settings.req_timeout_read,
        lookup_providers=[provider.endpoint_url for provider in self.ip_control.resolver.providers],
        lookup_response_fields=settings.lookup_response_fields_list,
        ip_max_accounts=self.ip_control.max_accounts
      )
      return JSONResponse(resp.to_dict(), status.HTTP_200_OK)

    return router
