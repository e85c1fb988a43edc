"""PostgreSQL implementation of the namespace store.

Each tenant namespace is a separate PostgreSQL database. Databases are
created and dropped through the maintenance database with the administrative
credentials; catalog tables are created over a connection to the new
database itself.
"""

import logging

import asyncpg

from ..entities.connection_descriptor import ConnectionDescriptor
from ..entities.protocols import NamespaceStore
from ..utils import queries
from ..utils.connection_factory import ConnectionFactory
from ..utils.namespace import quote_identifier, validate_namespace_name

logger = logging.getLogger(__name__)


class PostgresNamespaceStore(NamespaceStore):
    """NamespaceStore creating one PostgreSQL database per tenant."""

    def __init__(
        self,
        admin_descriptor: ConnectionDescriptor,
        maintenance_database: str = "postgres",
        timeout: float = 30,
    ):
        self._admin = admin_descriptor
        self._maintenance_database = maintenance_database
        self._timeout = timeout

    async def _maintenance_connection(self) -> asyncpg.Connection:
        return await ConnectionFactory.create_connection(
            self._admin, timeout=self._timeout, database=self._maintenance_database
        )

    async def namespace_exists(self, namespace: str) -> bool:
        validate_namespace_name(namespace)
        conn = await self._maintenance_connection()
        try:
            return await conn.fetchval(queries.NAMESPACE_EXISTS, namespace) is not None
        finally:
            await conn.close()

    async def create_namespace(self, namespace: str) -> bool:
        statement = queries.NAMESPACE_CREATE.format(name=quote_identifier(namespace))
        conn = await self._maintenance_connection()
        try:
            if await conn.fetchval(queries.NAMESPACE_EXISTS, namespace) is not None:
                logger.debug(f"Namespace {namespace} already exists")
                return False
            try:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(statement)
            except asyncpg.exceptions.DuplicateDatabaseError:
                # Lost a race with a concurrent provisioning of the same tenant
                return False
            logger.info(f"Created namespace {namespace}")
            return True
        finally:
            await conn.close()

    async def bootstrap_schema(self, descriptor: ConnectionDescriptor) -> None:
        validate_namespace_name(descriptor.namespace)
        conn = await ConnectionFactory.create_connection(descriptor, timeout=self._timeout)
        try:
            async with conn.transaction():
                for statement in queries.BOOTSTRAP_STATEMENTS:
                    await conn.execute(statement)
            logger.info(f"Bootstrapped catalog tables in {descriptor.namespace}")
        finally:
            await conn.close()

    async def drop_namespace(self, namespace: str) -> bool:
        statement = queries.NAMESPACE_DROP.format(name=quote_identifier(namespace))
        conn = await self._maintenance_connection()
        try:
            existed = await conn.fetchval(queries.NAMESPACE_EXISTS, namespace) is not None
            await conn.execute(statement)
            if existed:
                logger.info(f"Dropped namespace {namespace}")
            return existed
        finally:
            await conn.close()
