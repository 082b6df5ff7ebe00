"""Create and drop relational tables for the academy domain."""

from protean.domain import Domain
from sqlalchemy import create_engine

_RDBMS_PROVIDERS = ("sqlite", "postgresql")


def _register_tables(domain: Domain, provider_name: str) -> None:
    # Accessing a repository's DAO registers its model with SQLAlchemy metadata
    for registry in (domain.registry.aggregates, domain.registry.entities):
        for _, record in registry.items():
            if record.cls.meta_.provider == provider_name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables (with their unique indexes) in every relational provider."""
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _RDBMS_PROVIDERS:
                continue
            engine = create_engine(provider.conn_info["database_uri"])
            _register_tables(domain, name)
            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _RDBMS_PROVIDERS:
                continue
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
