from .partition_repository import PartitionRepository, parse_source_id

__all__ = ['PartitionRepository', 'parse_source_id']
