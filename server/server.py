from re import sub
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.datastructures import QueryParams
from urllib.parse import unquote
from typing import Self, Any, AsyncGenerator
from contextlib import asynccontextmanager

from config.config import settings
from logger.logger import logger
from metrics.metrics import PrometheusMiddleware
from client.ip_control_client import IpControl, ip_control as default_ip_control

from .tags_metadata import TagsMetadata

from routers.metrics_router import MetricsRouter
from routers.home_router import HomeRouter
from routers.ip_control_router import IpControlRouter
from routers.accounts_router import AccountsRouter

from models.http.base import ErrorResp

class AppServer:

  tags: TagsMetadata = TagsMetadata()
  tags_metadata: list = [
    {
      'name': tag.name,
      'description': tag.description
    }
    for tag in (tags.home_tag, tags.ip_control_tag, tags.accounts_tag, tags.metrics_tag)
  ]

  origins = [
    f'http://{settings.app_host}',
    f'http://{settings.app_host}:{settings.app_port}',
    f'https://{settings.app_host}',
    f'https://{settings.app_host}:{settings.app_port}'
  ]

  def __init__(self: Self, ip_control: IpControl | None = None) -> None:
    self.ip_control: IpControl = ip_control if ip_control != None else default_ip_control
    self.app: FastAPI = FastAPI(
      title=settings.app_title,
      summary=settings.app_summary,
      description=settings.app_description,
      debug=settings.app_debug,
      version=settings.app_version,
      docs_url='/docs',
      openapi_url='/docs/openapi.json',
      openapi_tags=self.tags_metadata,
      lifespan=self.__lifespan
    )
    logger.debug('AppServer init completed')

  @asynccontextmanager
  async def __lifespan(self: Self, app: FastAPI) -> AsyncGenerator[None, Any]:
    # first RUN BEFORE start FastAPI
    await self.ip_control.database.setup()
    yield
    # next RUN AFTER stop FastAPI
    await self.ip_control.resolver.close()
    await self.ip_control.database.close()

  def build(self: Self) -> FastAPI:
    logger.debug('AppServer build ...')
    app: FastAPI = self.app

    app.add_middleware(
      CORSMiddleware,
      allow_origins=self.origins,
      allow_credentials=True,
      allow_methods=['*'],
      allow_headers=['*']
    )
    app.add_middleware(PrometheusMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exception: RequestValidationError) -> JSONResponse:
      try:
        body: bytes = await request.body()
        args: QueryParams = request.query_params
        bodyStr: str = body.decode('utf-8')
        bodyStr = sub(r'\s+', ' ', bodyStr).strip()
        logger.error(
          f'RequestValidationError={str(exception)} :\n URL={unquote(request.url.__str__())} :\n bodyStr={bodyStr} :\n args={args}'
        )
        return JSONResponse(content=jsonable_encoder(exception.errors()), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
      except Exception as err:
        logger.error(err)
        return JSONResponse(
          content=ErrorResp(error=f'{err}').model_dump(exclude_none=True),
          status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    app.include_router(MetricsRouter(self.ip_control).get_router())
    app.include_router(HomeRouter(self.ip_control).get_router())
    app.include_router(IpControlRouter(self.ip_control).get_router())
    app.include_router(AccountsRouter(self.ip_control).get_router())
    return app
