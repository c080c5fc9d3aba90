"""
Engine and session wiring.

Configuration comes from the environment (a local .env is honoured):
    DATABASE_URL  default sqlite:///./tournament.db
    SQL_ECHO      "true"/"1"/"yes" to log every statement
"""
import os
from pathlib import Path
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tournament.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")


def _build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, echo=SQL_ECHO)
    if ":memory:" not in url:
        Path(url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)
    # Sessions are opened per request from FastAPI's threadpool
    return create_engine(url, echo=SQL_ECHO, connect_args={"check_same_thread": False})


engine: Engine = _build_engine(DATABASE_URL)


def get_session() -> Generator[Session, None, None]:
    """One session per request"""
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Create the tournament, team, player, stage and match tables if missing"""
    import tourney.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
