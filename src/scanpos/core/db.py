"""Factory de sessão do SQLAlchemy 2."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ..repo.models import Base

def create_session_factory(database_url: str, create_schema: bool = False):
    """Cria SessionFactory síncrona para SQLAlchemy 2.

    :param database_url: URL completa do banco (sqlite ou psycopg3).
    :param create_schema: se True, cria as tabelas ausentes (uso em dev/testes; produção usa alembic).
    :return: sessionmaker configurado.
    """
    engine = create_engine(database_url, pool_pre_ping=True, future=True)
    if create_schema:
        Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
