#!/usr/bin/env python3
"""
Exception hierarchy for ECOD curation tooling.
All custom exceptions should inherit from ECODCurationError.

The evidence analyzer itself never raises for bad data; these are used by
the surrounding layers (configuration, database access, command line).
"""
from typing import Dict, Any, Optional


class ECODCurationError(Exception):
    """Base exception for all ECOD curation errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ECODCurationError):
    """Error related to configuration issues"""
    pass


class DatabaseError(ECODCurationError):
    """Base class for database-related errors"""
    pass


class ConnectionError(DatabaseError):
    """Error connecting to a database"""
    pass


class QueryError(DatabaseError):
    """Error executing a database query"""
    pass


class FileOperationError(ECODCurationError):
    """Error during file operations"""
    pass


class ValidationError(ECODCurationError):
    """Data validation error"""
    pass
