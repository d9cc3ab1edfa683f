from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.access_policy import RoleAccessPolicy
from src.adapter.services.audit_sink import create_audit_sink
from src.adapter.services.membership_resolver import SqlAlchemyMembershipResolver
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.audit_sink import AuditSink
from src.app.services.authorization import AccessPolicy, MembershipResolver

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

access_policy = RoleAccessPolicy()
audit_sink = create_audit_sink(ApplicationConfig.AUDIT_WEBHOOK_URL)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work(session: AsyncSession = Depends(get_session)):
    yield SqlAlchemyUnitOfWork(session)


def get_access_policy() -> AccessPolicy:
    return access_policy


def get_audit_sink() -> AuditSink:
    return audit_sink


def get_membership_resolver(session: AsyncSession = Depends(get_session)) -> MembershipResolver:
    return SqlAlchemyMembershipResolver(session)
