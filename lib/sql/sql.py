import asyncio
import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import (
    URL,
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, MappedColumn, declarative_base, relationship

Base = declarative_base()

logger = logging.getLogger("sql")


# -- Tables --
class GuildSettings(Base):
    __tablename__ = "guild_settings"
    guild_id: Mapped[int] = MappedColumn(BigInteger, primary_key=True)
    log_channel_id: Mapped[int] = MappedColumn(BigInteger, nullable=True)
    locale: Mapped[str] = MappedColumn(String(length=16), default="en-GB")
    footer: Mapped[str] = MappedColumn(String(length=2048), nullable=True)
    tickets: Mapped[list["Ticket"]] = relationship(
        "Ticket", back_populates="guild", cascade="all, delete-orphan"
    )


class Ticket(Base):
    __tablename__ = "tickets"
    # The ticket's channel ID
    id: Mapped[int] = MappedColumn(BigInteger, primary_key=True)
    guild_id: Mapped[int] = MappedColumn(BigInteger, ForeignKey("guild_settings.guild_id"))
    guild: Mapped["GuildSettings"] = relationship(
        "GuildSettings", back_populates="tickets", lazy="selectin"
    )
    number: Mapped[int] = MappedColumn(Integer)
    topic: Mapped[str] = MappedColumn(String(length=1024), nullable=True)
    created_by_id: Mapped[int] = MappedColumn(BigInteger)
    created_at: Mapped[datetime] = MappedColumn(DateTime, server_default=func.now())
    open: Mapped[bool] = MappedColumn(Boolean, default=True)
    closed_reason: Mapped[str] = MappedColumn(String(length=512), nullable=True)


class ErrorLog(Base):
    __tablename__ = "error_logs"
    id: Mapped[uuid.UUID] = MappedColumn(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    module: Mapped[str] = MappedColumn(String(length=64))
    guild_id: Mapped[int] = MappedColumn(BigInteger, nullable=True)
    error: Mapped[str] = MappedColumn(String)
    details: Mapped[str] = MappedColumn(String, nullable=True)
    time_created: Mapped[datetime] = MappedColumn(DateTime, server_default=func.now())


SQLALCHEMY_DATABASE_URL = URL.create(
    "postgresql+asyncpg",
    username=os.getenv("DB_USERNAME", ""),
    password=os.getenv("DB_PASSWORD", ""),
    host=os.getenv("DB_HOST", ""),
    port=int(os.getenv("DB_PORT", 0)),
    database=os.getenv("DB_DATABASE_NAME", ""),
)

logger.info(f"Connecting to database at {SQLALCHEMY_DATABASE_URL}, password is hidden")

# -- Engine --
engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=False,
    pool_size=10,
    max_overflow=20,
    pool_timeout=30,
    pool_recycle=3600,
    pool_pre_ping=True,
)

# Create session maker
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    result = None

    try:
        logger.info("Applying database migrations...")
        result = await asyncio.create_subprocess_exec(
            "atlas",
            "migrate",
            "apply",
            "--env",
            "sqlalchemy",
            "--url",
            str(
                SQLALCHEMY_DATABASE_URL.render_as_string(hide_password=False).replace(
                    "postgresql+asyncpg", "postgresql"
                )
                + "?search_path=public&sslmode=disable"
            ),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        if await result.wait() != 0:
            raise Exception("Database migration failed")

        logger.info("Database migrations applied successfully")

        if result.stdout:
            stdout_text = (await result.stdout.read()).decode().strip()
            if stdout_text:
                logger.info(f"stdout: {stdout_text}")
    except Exception:
        logger.error("Error applying database migrations:")

        if result and result.stderr:
            stderr_text = (await result.stderr.read()).decode().strip()
            if stderr_text:
                logger.error(f"stderr: {stderr_text}")

        raise


@asynccontextmanager
async def get_session():
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
