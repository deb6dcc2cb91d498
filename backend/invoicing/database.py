import logging
import os
from typing import Callable, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from supabase import Client, create_client

DEFAULT_CORS_ORIGINS = [
    'http://localhost:3000',
    'http://localhost:5173',
    'http://127.0.0.1:5173',
]


class Settings(BaseModel):
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supplier_state: str = 'Maharashtra'
    supplier_state_code: str = '27'
    cors_origins: List[str] = DEFAULT_CORS_ORIGINS
    log_level: str = 'INFO'


def load_settings() -> Settings:
    load_dotenv()
    origins = os.getenv('CORS_ORIGINS')
    return Settings(
        supabase_url=os.getenv('SUPABASE_URL'),
        supabase_key=os.getenv('SUPABASE_KEY'),
        supplier_state=os.getenv('SUPPLIER_STATE', 'Maharashtra'),
        supplier_state_code=os.getenv('SUPPLIER_STATE_CODE', '27'),
        cors_origins=[o.strip() for o in origins.split(',') if o.strip()] if origins else DEFAULT_CORS_ORIGINS,
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    )


class Database:
    """Owns the Supabase client for the lifetime of the process.

    Constructed once by the application entry point, opened on startup and
    closed on shutdown. Request handlers receive the client through a FastAPI
    dependency instead of importing a module level connection.
    """

    def __init__(self, url: Optional[str], key: Optional[str],
                 client_factory: Callable[[str, str], Client] = create_client):
        self.url = url
        self.key = key
        self._client_factory = client_factory
        self._client: Optional[Client] = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Client:
        if self._client is None:
            raise RuntimeError('Database is not open')
        return self._client

    def open(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.url or not self.key:
            logging.error('Missing SUPABASE_URL or SUPABASE_KEY environment variables')
            raise RuntimeError('SUPABASE_URL and SUPABASE_KEY must be set in the environment')
        logging.info('Opening Supabase client for %s (key %s...)', self.url, self.key[:8])
        self._client = self._client_factory(self.url, self.key)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            logging.info('Closing Supabase client')
        self._client = None

    def ping(self) -> bool:
        """Return True when a trivial query against the items table succeeds."""
        if self._client is None:
            return False
        try:
            res = self._client.table('items').select('id').limit(1).execute()
        except Exception as exc:
            logging.exception('Supabase ping failed: %s', exc)
            return False
        if getattr(res, 'error', None):
            logging.error('Supabase ping error: %s', res.error)
            return False
        return True
