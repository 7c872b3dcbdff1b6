#!/usr/bin/env python3
"""
JSON input/output for curation tools.

Predicted domains and raw evidence records can be supplied as JSON when the
partition database is not available, e.g. for offline review.
"""

import os
import json
import logging
from typing import Any, Dict, List

from ecod_curation.exceptions import FileOperationError, ValidationError
from ecod_curation.models.domain import PredictedDomain
from ecod_curation.models.evidence import AnyHit, hits_from_records

logger = logging.getLogger("ecod_curation.io.json_io")


def read_json(file_path: str) -> Any:
    """Read a JSON document

    Raises:
        FileOperationError: If the file is missing, unreadable or not JSON
    """
    if not os.path.exists(file_path):
        error_msg = f"JSON file does not exist: {file_path}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path})

    try:
        with open(file_path, 'r') as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        error_msg = f"Error reading JSON file {file_path}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path}) from e


def _record_list(data: Any, key: str, file_path: str) -> List[Dict[str, Any]]:
    # Accept either a bare list or an object wrapping it under key
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValidationError(f"Expected a list of {key} records in {file_path}",
                              {"file_path": file_path, "key": key})
    return data


def load_domains(file_path: str) -> List[PredictedDomain]:
    """Load predicted domains from JSON

    The file holds a list of domain records (or ``{"domains": [...]}``) with
    ``range`` or ``start``/``end`` plus optional classification fields.
    Records without ``domain_number`` are numbered by position.

    Raises:
        FileOperationError: If the file cannot be read
        ValidationError: If the document is not a list of records
    """
    records = _record_list(read_json(file_path), "domains", file_path)
    domains = [PredictedDomain.from_dict(record, ordinal=i)
               for i, record in enumerate(records, start=1)]
    logger.debug(f"Loaded {len(domains)} domains from {file_path}")
    return domains


def load_hits(file_path: str) -> List[AnyHit]:
    """Load evidence hits from a JSON list of raw records (or ``{"hits": [...]}``)"""
    records = _record_list(read_json(file_path), "hits", file_path)
    hits = hits_from_records(records)
    if len(hits) < len(records):
        logger.warning(f"Skipped {len(records) - len(hits)} records of unknown type in {file_path}")
    return hits


def write_json(data: Dict[str, Any], file_path: str) -> None:
    """Write a JSON document, creating parent directories as needed

    Raises:
        FileOperationError: If the file cannot be written
    """
    try:
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)
    except (OSError, TypeError) as e:
        error_msg = f"Error writing JSON file {file_path}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path}) from e
