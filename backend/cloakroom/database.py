from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from cloakroom.config import DEBUG

Base = declarative_base()


def make_engine(database_url: str):
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False}, echo=DEBUG)
    return create_engine(database_url, echo=DEBUG, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
