from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.customer_directory import create_customer_directory
from src.app.services.customer_directory import CustomerDirectory

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

customer_directory = create_customer_directory(
    base_url=ApplicationConfig.CUSTOMER_SERVICE_URL,
    timeout=ApplicationConfig.CUSTOMER_SERVICE_TIMEOUT,
    api_key=ApplicationConfig.CUSTOMER_SERVICE_API_KEY,
    static_ids=ApplicationConfig.KNOWN_CUSTOMER_IDS,
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_customer_directory() -> CustomerDirectory:
    return customer_directory
