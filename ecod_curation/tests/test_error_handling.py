#!/usr/bin/env python3
"""
Tests for the exception hierarchy and error handling helpers
"""

import logging

import pytest

from ecod_curation.error_handlers import format_error, handle_exceptions, log_exception
from ecod_curation.exceptions import (
    ECODCurationError, ConfigurationError, DatabaseError, ConnectionError,
    QueryError, FileOperationError, ValidationError
)


class TestExceptionHierarchy:
    """Test exception classes"""

    @pytest.mark.parametrize("error_cls", [
        ConfigurationError, DatabaseError, ConnectionError, QueryError,
        FileOperationError, ValidationError,
    ])
    def test_base_class(self, error_cls):
        assert issubclass(error_cls, ECODCurationError)

    def test_database_errors(self):
        assert issubclass(ConnectionError, DatabaseError)
        assert issubclass(QueryError, DatabaseError)

    def test_message_and_details(self):
        error = QueryError("Query failed", {"query": "SELECT 1"})

        assert error.message == "Query failed"
        assert error.details == {"query": "SELECT 1"}
        assert str(error) == "Query failed"
        assert ValidationError("bad").details == {}


class TestFormatError:
    """Test error display formatting"""

    def test_shows_offending_input(self):
        error = ValidationError("Invalid source ID", {"source_id": "x"})
        assert format_error(error) == "ValidationError: Invalid source ID (source_id=x)"

    def test_file_errors_name_the_file(self):
        error = FileOperationError("File not found", {"file_path": "/data/5c3l_B.xml"})
        assert format_error(error) == "FileOperationError: File not found (file_path=/data/5c3l_B.xml)"

    def test_internal_details_only_when_verbose(self):
        error = QueryError("Query failed", {"query": "SELECT 1", "code": "42P01", "protein": "5c3l_B"})

        assert format_error(error) == "QueryError: Query failed (protein=5c3l_B, code=42P01)"
        assert "query=SELECT 1" in format_error(error, verbose=True)

    def test_connection_hint(self):
        error = ConnectionError("Database connection error", {"host": "db1", "database": "ecod"})
        lines = format_error(error).splitlines()

        assert lines[0] == "ConnectionError: Database connection error (host=db1, database=ecod)"
        assert "ECOD_DATABASE__" in lines[1]

    def test_no_details(self):
        assert format_error(ValidationError("bad")) == "ValidationError: bad"

    def test_unexpected_error(self):
        assert format_error(RuntimeError("boom")) == "Unexpected Error: boom"


class TestHandleExceptions:
    """Test exit codes from the handle_exceptions decorator"""

    def test_success_passes_through(self):
        @handle_exceptions()
        def succeed():
            return 0

        assert succeed() == 0

    def test_known_error(self, capsys):
        @handle_exceptions()
        def fail():
            raise ConfigurationError("bad thresholds")

        assert fail() == 1
        assert "ConfigurationError: bad thresholds" in capsys.readouterr().err

    def test_known_error_names_input(self, capsys):
        @handle_exceptions()
        def fail():
            raise FileOperationError("File not found", {"file_path": "absent.xml"})

        assert fail() == 1
        assert "(file_path=absent.xml)" in capsys.readouterr().err

    def test_unexpected_error(self):
        @handle_exceptions()
        def fail():
            raise KeyError("missing")

        assert fail() == 2

    def test_keyboard_interrupt(self):
        @handle_exceptions()
        def interrupted():
            raise KeyboardInterrupt()

        assert interrupted() == 130

    def test_exit_on_error(self):
        @handle_exceptions(exit_on_error=True)
        def fail():
            raise ValidationError("bad input")

        with pytest.raises(SystemExit) as exc_info:
            fail()
        assert exc_info.value.code == 1


class TestLogException:
    """Test structured exception logging"""

    def test_known_error_context(self, caplog):
        logger = logging.getLogger("ecod_curation.tests")
        error = QueryError("Query failed", {"code": "42P01", "query": "SELECT 1", "protein": "5c3l_B"})

        with caplog.at_level(logging.ERROR, logger="ecod_curation.tests"):
            log_exception(logger, error)

        record = caplog.records[0]
        assert record.getMessage() == "QueryError: Query failed [code=42P01, protein=5c3l_B]"
        assert record.context["query"] == "SELECT 1"
        assert record.exc_info is None

    def test_traceback_at_debug(self, caplog):
        logger = logging.getLogger("ecod_curation.tests")

        with caplog.at_level(logging.DEBUG, logger="ecod_curation.tests"):
            try:
                raise ValidationError("bad input")
            except ValidationError as e:
                log_exception(logger, e)

        assert caplog.records[0].exc_info is not None

    def test_unexpected_error(self, caplog):
        logger = logging.getLogger("ecod_curation.tests")

        with caplog.at_level(logging.WARNING, logger="ecod_curation.tests"):
            log_exception(logger, ValueError("odd"), level=logging.WARNING)

        assert caplog.records[0].getMessage() == "Unexpected error: odd"
        assert caplog.records[0].levelno == logging.WARNING
