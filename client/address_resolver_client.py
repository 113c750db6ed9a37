from asyncio import timeout as deadline
from httpx import AsyncClient, Response, HTTPError
from json import JSONDecodeError
from typing import Self, List, Dict, Tuple, Any, Sequence

from logger.logger import logger
from config.config import settings
from client.http_base_client import HttpClient
from metrics.metrics import ipc_metrics

from models.dto.lookup_provider_dto import LookupProviderDto
from models.dto.address_dto import ResolvedAddressDto

class AddressNotFoundError(Exception):
  '''
  Provider answered, but the answer has no usable address
  '''

class AddressResolver:
  '''
  Resolves the public IP address of the caller.
  Providers are asked one by one in the configured order, the first usable answer wins.
  A failed provider is logged and skipped, it is never retried inside one call.
  '''

  def __init__(
    self: Self,
    providers: Sequence[LookupProviderDto] | None = None,
    client: AsyncClient | None = None,
    timeout: float | None = None
  ) -> None:
    if providers == None:
      fields: Tuple[str, ...] = tuple(settings.lookup_response_fields_list)
      providers = [
        LookupProviderDto(endpoint_url=url, response_field_candidates=fields)
        for url in settings.lookup_providers_list
      ]
    self.providers: List[LookupProviderDto] = list(providers)
    self.__client: AsyncClient = client if client != None else HttpClient().client
    self.timeout: float = timeout if timeout != None else settings.req_timeout_default
    logger.debug(f'{self.__class__.__name__} init with {len(self.providers)} providers, {self.timeout=} ...')

  @staticmethod
  def extract_address(data: Any, field_candidates: Sequence[str]) -> str:
    if not isinstance(data, dict):
      raise AddressNotFoundError(f'Response body is {type(data).__name__}, not an object')
    body: Dict[str, Any] = data
    for field in field_candidates:
      value: Any = body.get(field)
      if isinstance(value, str) and value.strip() != '':
        return value.strip()
    raise AddressNotFoundError(f'No address in fields {list(field_candidates)}')

  async def __lookup(self: Self, provider: LookupProviderDto) -> str:
    # httpx timeouts are per phase, the whole request and body read share one deadline
    async with deadline(self.timeout):
      response: Response = await self.__client.get(
        url=provider.endpoint_url,
        headers={'Accept': 'application/json'}
      )
    response.raise_for_status()
    return self.extract_address(data=response.json(), field_candidates=provider.response_field_candidates)

  async def resolve_address(self: Self) -> ResolvedAddressDto:
    logger.debug(f'Try resolve public IP address ...')
    result: ResolvedAddressDto = ResolvedAddressDto()
    for provider in self.providers:
      try:
        address: str = await self.__lookup(provider=provider)
        logger.info(f'IP address detected: {address} (provider "{provider.name}")')
        ipc_metrics.lookup(provider=provider.name, result='ok')
        ipc_metrics.resolution(result='resolved')
        result.address = address
        result.provider = provider.endpoint_url
        return result
      except TimeoutError:
        logger.warning(f'Failed to get IP from provider "{provider.endpoint_url}" : no answer in {self.timeout} s')
      except (HTTPError, JSONDecodeError, AddressNotFoundError) as err:
        logger.warning(f'Failed to get IP from provider "{provider.endpoint_url}" : [{err.__class__.__name__}] {err}')
      except Exception as err:
        logger.warning(
          f'Unexpected error from provider "{provider.endpoint_url}" : [{err.__class__.__name__}] {err}',
          exc_info=True
        )
      ipc_metrics.lookup(provider=provider.name, result='failed')
      result.failed_providers.append(provider.endpoint_url)
    logger.warning(f'Could not detect IP address from any provider ({len(self.providers)} tried)')
    ipc_metrics.resolution(result='unavailable')
    return result

  async def close(self: Self) -> None:
    await self.__client.aclose()
