from typing import Self, Tuple

from logger.logger import logger
from config.config import settings
from database.db import DataBase, db
from metrics.metrics import ipc_metrics
from client.address_resolver_client import AddressResolver

from models.dto.address_dto import ResolvedAddressDto, DuplicateCheckDto, AccountDto
from models.dto.screening_dto import ScreeningDto, ScreeningVerdict

class IpControl:
  '''
  Signup flow on top of the resolver and the accounts store:
  resolve -> check -> (create account) -> record

  Detection is fail-open. An unresolved address or a failed count never blocks a signup.
  Check and record are not atomic, two parallel signups from one address can both pass
  '''

  def __init__(
    self: Self,
    database: DataBase,
    resolver: AddressResolver,
    max_accounts: int | None = None
  ) -> None:
    self.database: DataBase = database
    self.resolver: AddressResolver = resolver
    self.max_accounts: int = max_accounts if max_accounts != None else settings.ip_max_accounts
    logger.debug(f'{self.__class__.__name__} init, {self.max_accounts=}')

  async def resolve_address(self: Self) -> ResolvedAddressDto:
    return await self.resolver.resolve_address()

  async def count_accounts_by_address(self: Self, address: str) -> DuplicateCheckDto:
    return await self.database.count_accounts_by_address(address=address)

  async def record_address(self: Self, account_id: str, address: str) -> bool:
    return await self.database.record_address(account_id=account_id, address=address)

  async def screen_signup(self: Self, address: str | None = None) -> ScreeningDto:
    logger.debug(f'Checking IP address for signup {address=} ...')
    if address == None:
      resolved: ResolvedAddressDto = await self.resolve_address()
      address = resolved.address
    if address == None:
      logger.warning('Could not detect IP - proceeding with signup')
      screening: ScreeningDto = ScreeningDto(verdict=ScreeningVerdict.UNKNOWN)
    else:
      check: DuplicateCheckDto = await self.count_accounts_by_address(address=address)
      if check.count >= self.max_accounts:
        logger.warning(f'IP already has {check.count} account(s): {address}')
        screening = ScreeningDto(verdict=ScreeningVerdict.BLOCK, address=address, count=check.count)
      else:
        logger.info(f'IP check passed: {address}')
        screening = ScreeningDto(verdict=ScreeningVerdict.ALLOW, address=address, count=check.count)
    ipc_metrics.screening(verdict=screening.verdict)
    return screening

  async def register_signup(
    self: Self,
    account_id: str,
    full_name: str | None = None,
    address: str | None = None
  ) -> Tuple[ScreeningDto, AccountDto | None]:
    '''
    Screens the signup, creates the account when allowed and saves its address.
    Account is None when the signup was blocked or the store failed to create it
    '''
    screening: ScreeningDto = await self.screen_signup(address=address)
    if not screening.allowed:
      return screening, None
    account: AccountDto | None = await self.database.add_account(id=account_id, full_name=full_name)
    if account == None:
      return screening, None
    if screening.address != None:
      logger.debug(f'Saving IP to account {account_id} ...')
      if await self.record_address(account_id=account_id, address=screening.address):
        account.signup_ip = screening.address
    return screening, account

# Init IpControl
try:
  ip_control: IpControl = IpControl(database=db, resolver=AddressResolver())
except Exception as err:
  raise err
