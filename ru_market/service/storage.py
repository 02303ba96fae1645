import aiohttp
from loguru import logger

import ru_market.config as conf


class StorageError(Exception):
    pass


class ObjectStorage:
    """
    Клиент REST API файлового хранилища хостинга для одного бакета.
    """

    def __init__(
        self,
        object_url: str = conf.STORAGE_OBJECT_URL,
        public_url: str = conf.STORAGE_PUBLIC_URL,
        api_key: str = conf.SUPABASE_ANON_KEY,
        bucket: str = conf.STORAGE_BUCKET,
    ):
        self.object_url = object_url
        self.public_base_url = public_url
        self.api_key = api_key
        self.bucket = bucket

    def _headers(self, access_token: str) -> dict:
        return {
            'apikey': self.api_key,
            'Authorization': f'{conf.NAME_TOKEN_HEAD} {access_token}',
        }

    def public_url(self, path: str) -> str:
        return f'{self.public_base_url}/{self.bucket}/{path}'

    def path_from_public_url(self, url: str | None) -> str | None:
        """
        Путь объекта внутри бакета, если ссылка ведёт в наш бакет
        """
        prefix = f'{self.public_base_url}/{self.bucket}/'
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        access_token: str,
    ) -> str:
        """
        Загружает байты в бакет по пути path и возвращает публичный URL
        """
        headers = self._headers(access_token) | {
            'Content-Type': content_type,
            # не перезаписывать существующий объект
            'x-upsert': 'false',
        }
        timeout = aiohttp.ClientTimeout(total=conf.HTTP_TIMEOUT)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    url=f'{self.object_url}/{self.bucket}/{path}',
                    headers=headers,
                    data=data
                ) as response:
                    if response.status >= 400:
                        text = await response.text()
                        raise StorageError(
                            f'Upload of {path} failed '
                            f'({response.status}): {text}'
                        )
        except aiohttp.ClientError as ex:
            raise StorageError(f'Upload of {path} failed: {ex}') from ex
        logger.info(f'Uploaded {path} to bucket {self.bucket}')
        return self.public_url(path)

    async def remove(self, paths: list[str], access_token: str) -> None:
        timeout = aiohttp.ClientTimeout(total=conf.HTTP_TIMEOUT)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.delete(
                    url=f'{self.object_url}/{self.bucket}',
                    headers=self._headers(access_token),
                    json={'prefixes': paths}
                ) as response:
                    if response.status >= 400:
                        text = await response.text()
                        raise StorageError(
                            f'Removal of {paths} failed '
                            f'({response.status}): {text}'
                        )
        except aiohttp.ClientError as ex:
            raise StorageError(f'Removal of {paths} failed: {ex}') from ex
        logger.info(f'Removed {paths} from bucket {self.bucket}')


object_storage = ObjectStorage()


def get_storage() -> ObjectStorage:
    return object_storage
