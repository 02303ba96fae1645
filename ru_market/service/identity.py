import aiohttp
from loguru import logger

import ru_market.config as conf


class IdentityError(Exception):
    pass


class IdentityService:
    """
    Обращения к сервису идентификации хостинга.
    Нужен только выход: вход и выдача токенов живут на стороне хостинга.
    """

    def __init__(
        self,
        logout_url: str = conf.AUTH_LOGOUT_URL,
        api_key: str = conf.SUPABASE_ANON_KEY,
    ):
        self.logout_url = logout_url
        self.api_key = api_key

    async def sign_out(self, access_token: str) -> None:
        timeout = aiohttp.ClientTimeout(total=conf.HTTP_TIMEOUT)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    url=self.logout_url,
                    headers={
                        'apikey': self.api_key,
                        'Authorization': (
                            f'{conf.NAME_TOKEN_HEAD} {access_token}'
                        ),
                    },
                ) as response:
                    # 401/404: сессия уже недействительна на хостинге
                    if response.status >= 400 and response.status not in (
                        401, 404
                    ):
                        text = await response.text()
                        raise IdentityError(
                            f'Sign out failed ({response.status}): {text}'
                        )
        except aiohttp.ClientError as ex:
            raise IdentityError(f'Sign out failed: {ex}') from ex
        logger.info('Session signed out at identity service')


identity_service = IdentityService()


def get_identity() -> IdentityService:
    return identity_service
