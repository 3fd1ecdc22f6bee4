from datetime import timedelta
from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.clock import SystemClock
from src.adapter.services.ephemeral_store import InMemoryEphemeralStore, RedisEphemeralStore
from src.adapter.services.notification_dispatcher import ConsoleDispatcher, SmtpDispatcher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.repositories.ephemeral_store import IEphemeralStore
from src.app.services.clock import Clock
from src.app.services.credential_store import CredentialStore
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.reminder_scheduler import ReminderScheduler
from src.app.services.token_manager import BearerTokenManager
from src.domain.entities import BearerClaims
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

clock = SystemClock()


def build_ephemeral_store(config, clock: Clock) -> IEphemeralStore:
    if config.CACHE_BACKEND == "redis":
        return RedisEphemeralStore(Redis.from_url(config.REDIS_URL))
    return InMemoryEphemeralStore(clock)


def build_dispatcher(config) -> INotificationDispatcher:
    if config.MAIL_BACKEND == "smtp":
        return SmtpDispatcher(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            from_address=config.MAIL_FROM,
            username=config.SMTP_USERNAME or None,
            password=config.SMTP_PASSWORD or None,
            use_tls=config.SMTP_USE_TLS,
            timeout=config.DISPATCH_TIMEOUT_SECONDS,
        )
    return ConsoleDispatcher()


ephemeral_store = build_ephemeral_store(ApplicationConfig, clock)

credential_store = CredentialStore(
    ephemeral_store,
    clock,
    otp_ttl=timedelta(seconds=ApplicationConfig.OTP_TTL_SECONDS),
    reset_ttl=timedelta(seconds=ApplicationConfig.RESET_TOKEN_TTL_SECONDS),
    max_attempts=ApplicationConfig.OTP_MAX_ATTEMPTS,
)

token_manager = BearerTokenManager(
    ApplicationConfig.JWT_SECRET,
    clock,
    algorithm=ApplicationConfig.JWT_ALGORITHM,
    access_ttl=timedelta(seconds=ApplicationConfig.ACCESS_TOKEN_TTL_SECONDS),
    refresh_ttl=timedelta(seconds=ApplicationConfig.REFRESH_TOKEN_TTL_SECONDS),
    leeway=timedelta(seconds=ApplicationConfig.TOKEN_LEEWAY_SECONDS),
    deny_list=ephemeral_store,
)

dispatcher = build_dispatcher(ApplicationConfig)

reminder_scheduler = ReminderScheduler(
    lambda: SqlAlchemyUnitOfWork(session_factory=AsyncSessionLocal),
    dispatcher,
    clock,
    dispatch_timeout=ApplicationConfig.DISPATCH_TIMEOUT_SECONDS,
    batch_size=ApplicationConfig.REMINDER_BATCH_SIZE,
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Clock:
    return clock


def get_credential_store() -> CredentialStore:
    return credential_store


def get_token_manager() -> BearerTokenManager:
    return token_manager


def get_dispatcher() -> INotificationDispatcher:
    return dispatcher


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: BearerTokenManager = Depends(get_token_manager),
) -> BearerClaims:
    """
    Dependency to extract and verify the bearer token from the Authorization header.

    Returns:
        Verified claims of an access token

    Raises:
        ClientError: 401 if the token is missing, malformed, badly signed,
            expired, of the wrong kind or revoked
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Missing bearer token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await tokens.validate(credentials.credentials)
    if result.is_err():
        raise ClientError(
            result.error,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return result.value
