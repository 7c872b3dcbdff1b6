#!/usr/bin/env python3
"""
Database manager for ECOD curation tools
Read-only access to the partition pipeline's prediction store
"""
import psycopg2
import psycopg2.extras
import logging
from contextlib import contextmanager
from typing import Dict, Any, List, Tuple, Optional, Generator, Union

from ecod_curation.exceptions import ConnectionError, QueryError

QueryParams = Optional[Union[Tuple, Dict[str, Any]]]


class DBManager:
    """Database manager for the partition prediction store"""

    REQUIRED_FIELDS = ('host', 'port', 'database', 'user')

    def __init__(self, config: Dict[str, Any]):
        """Initialize database manager

        Args:
            config: Database configuration dictionary

        Raises:
            ConnectionError: If a required configuration field is missing
        """
        self.logger = logging.getLogger("ecod_curation.db")

        for field in self.REQUIRED_FIELDS:
            if field not in config:
                raise ConnectionError(f"Missing required database configuration field: {field}",
                                      {"field": field})

        # Only pass connection parameters through to psycopg2
        self.config = {k: v for k, v in config.items() if v is not None and v != ""}

    @contextmanager
    def get_connection(self) -> Generator[psycopg2.extensions.connection, None, None]:
        """Context manager for database connections

        Yields:
            Database connection

        Raises:
            ConnectionError: If connection fails
        """
        try:
            conn = psycopg2.connect(**self.config)
        except psycopg2.Error as e:
            error_msg = f"Database connection error: {str(e)}"
            self.logger.error(error_msg)
            raise ConnectionError(error_msg, {"host": self.config.get('host'),
                                              "database": self.config.get('database')}) from e

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def execute_dict_query(self, query: str, params: QueryParams = None) -> List[Dict[str, Any]]:
        """Execute a query and return results as dictionaries

        Args:
            query: SQL query
            params: Query parameters

        Returns:
            List of result dictionaries

        Raises:
            ConnectionError: If connection fails
            QueryError: If query execution fails
        """
        with self.get_connection() as conn:
            try:
                with conn.cursor(cursor_factory=psycopg2.extras.DictCursor) as cursor:
                    cursor.execute(query, params or ())
                    if cursor.description:  # If the query returns rows
                        return [dict(row) for row in cursor.fetchall()]
                    return []
            except psycopg2.Error as e:
                error_msg = f"Query execution error: {str(e)}"
                self.logger.error(f"{error_msg}\nQuery: {query}\nParams: {params}")
                raise QueryError(error_msg, {"query": query, "params": params,
                                             "code": getattr(e, 'pgcode', None)}) from e

