"""Cluster connection and statement execution over the Python driver."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union
import logging
import ssl

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster
from cassandra.query import SimpleStatement, tuple_factory

from cqlpy.core.errors import CqlConnectionError, QueryError
from cqlpy.core.formatter import OutputFormat, format_result
from cqlpy.core.results import QueryResult
from cqlpy.utils.constants import DEFAULT_PORT

logger = logging.getLogger(__name__)

ContactPoint = Union[str, Tuple[str, int]]


@dataclass
class ConnectionConfig:
    hosts: List[str] = field(default_factory=lambda: ['127.0.0.1'])
    port: int = DEFAULT_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    keyspace: Optional[str] = None
    ssl_enabled: bool = False
    ssl_ca_cert: Optional[str] = None
    ssl_verify: bool = False

    def contact_points(self) -> List[ContactPoint]:
        """Hosts as driver contact points; ``host:port`` entries keep their own port."""
        points: List[ContactPoint] = []
        for host in self.hosts:
            host = host.strip()
            if not host:
                continue
            name, sep, port = host.rpartition(':')
            if sep and name and port.isdigit():
                points.append((name, int(port)))
            else:
                points.append(host)
        return points


def build_ssl_context(verify: bool, ca_cert: Optional[str] = None) -> ssl.SSLContext:
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ctx.check_hostname = False
    if verify:
        logger.info("TLS certificate verification enabled")
        ctx.verify_mode = ssl.CERT_REQUIRED
        if ca_cert:
            ctx.load_verify_locations(cafile=ca_cert)
        else:
            ctx.load_default_certs()
    else:
        logger.info("TLS certificate verification disabled")
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def _connection_failure_message(config: ConnectionConfig, err: Exception) -> str:
    return (
        f"Failed to connect to Cassandra at {config.contact_points()}\n\n"
        "Possible causes:\n"
        "1. Cassandra is not running\n"
        f"2. Wrong host/port (current: {config.contact_points()})\n"
        f"3. SSL/TLS mismatch (SSL enabled: {config.ssl_enabled})\n"
        "4. Firewall blocking connection\n"
        "5. Authentication required but not provided\n\n"
        f"Original error: {err}"
    )


def parse_use_statement(statement: str) -> Optional[str]:
    """Keyspace named by a ``USE <keyspace>`` statement, else None."""
    text = statement.strip()
    if not text.lower().startswith('use '):
        return None
    keyspace = text[4:].strip().strip(';').strip()
    return keyspace or None


class QueryExecutor:
    """Runs statements against a driver session and converts their results."""

    def __init__(self, session: Any, cluster: Any = None, keyspace: Optional[str] = None):
        self.session = session
        self.cluster = cluster
        self.keyspace = keyspace
        session.row_factory = tuple_factory

    @classmethod
    def connect(cls, config: ConnectionConfig) -> 'QueryExecutor':
        points = config.contact_points()
        logger.info("Connecting to cluster at %s (default port %d)", points, config.port)
        kwargs: dict = {'contact_points': points, 'port': config.port}
        if config.username and config.password:
            logger.info("Using authentication with username: %s", config.username)
            kwargs['auth_provider'] = PlainTextAuthProvider(username=config.username, password=config.password)
        if config.ssl_enabled:
            try:
                kwargs['ssl_context'] = build_ssl_context(config.ssl_verify, config.ssl_ca_cert)
            except (OSError, ssl.SSLError) as e:
                raise CqlConnectionError(f"Failed to create SSL context: {e}") from e
        cluster = Cluster(**kwargs)
        try:
            session = cluster.connect()
        except Exception as e:
            cluster.shutdown()
            raise CqlConnectionError(_connection_failure_message(config, e)) from e
        executor = cls(session, cluster=cluster)
        if config.keyspace:
            executor.use_keyspace(config.keyspace)
        logger.info("Connected")
        return executor

    def execute(self, statement: str) -> QueryResult:
        logger.debug("Executing query: %s", statement.strip())
        try:
            rs = self.session.execute(SimpleStatement(statement))
            columns = getattr(rs, 'column_names', None)
            if columns is None:
                return QueryResult.acknowledged()
            # later pages are fetched while iterating
            rows = list(rs)
        except Exception as e:
            logger.debug("Query execution failed: %s", e)
            raise QueryError(str(e)) from e
        return QueryResult.from_native(columns, rows, getattr(rs, 'column_types', None))

    def use_keyspace(self, keyspace: str) -> None:
        try:
            self.session.set_keyspace(keyspace)
        except Exception as e:
            raise CqlConnectionError(f"Failed to use keyspace: {e}") from e
        self.keyspace = keyspace
        logger.debug("Using keyspace: %s", keyspace)

    def run_statement(self, statement: str, output_format: Union[OutputFormat, str, None] = OutputFormat.TABLE,
                      color: bool = False) -> Optional[str]:
        """Execute one statement and return the text to print.

        ``USE`` switches the session keyspace instead of going through
        :meth:`execute`; blank statements do nothing.
        """
        if not statement.strip():
            return None
        keyspace = parse_use_statement(statement)
        if keyspace:
            self.use_keyspace(keyspace)
            return f"Now using keyspace: {keyspace}"
        result = self.execute(statement)
        return format_result(result, output_format, color=color)

    def close(self) -> None:
        if self.cluster is not None:
            self.cluster.shutdown()
            self.cluster = None
