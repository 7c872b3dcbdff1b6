"""Database access for ECOD curation tools"""

from .manager import DBManager
from .repositories import PartitionRepository, parse_source_id

__all__ = ['DBManager', 'PartitionRepository', 'parse_source_id']
