#!/usr/bin/env python3
"""
Partition repository for ECOD curation tools
Reads partitioned proteins and their predicted domains
"""
import re
import logging
from typing import List, Dict, Any, Optional, Tuple

from ecod_curation.exceptions import ValidationError
from ecod_curation.db.manager import DBManager
from ecod_curation.models.domain import PredictedDomain

SOURCE_ID_PATTERN = re.compile(r'^([0-9][A-Za-z0-9]{3})_([A-Za-z0-9]+)$')


def parse_source_id(source_id: str) -> Tuple[str, str]:
    """Split a protein source id such as '5c3l_B' into PDB and chain ids

    Raises:
        ValidationError: If the id is not in PDB_CHAIN form
    """
    match = SOURCE_ID_PATTERN.match((source_id or "").strip())
    if not match:
        raise ValidationError(f"Invalid source ID format: {source_id!r}. "
                              f"Expected format: PDB_CHAIN (e.g., 5c3l_B)",
                              {"source_id": source_id})
    return match.group(1).lower(), match.group(2)


class PartitionRepository:
    """Repository for partition results"""

    def __init__(self, db_manager: DBManager):
        """Initialize repository

        Args:
            db_manager: Database manager instance
        """
        self.db = db_manager
        self.logger = logging.getLogger("ecod_curation.db.partition_repository")

    def get_protein(self, pdb_id: str, chain_id: str) -> Optional[Dict[str, Any]]:
        """Get the partition record for a chain

        Returns:
            Dict with processing_id, source_id, batch_id, reference_version,
            sequence_length, is_classified and coverage; None if not found
        """
        query = """
        SELECT
            pp.id AS processing_id,
            pp.pdb_id,
            pp.chain_id,
            pp.pdb_id || '_' || pp.chain_id AS source_id,
            pp.batch_id,
            pp.reference_version,
            pp.timestamp AS processing_date,
            pp.sequence_length,
            pp.is_classified,
            pp.coverage
        FROM pdb_analysis.partition_proteins pp
        WHERE pp.pdb_id = %s AND pp.chain_id = %s
        ORDER BY pp.timestamp DESC
        LIMIT 1
        """
        rows = self.db.execute_dict_query(query, (pdb_id, chain_id))
        if not rows:
            self.logger.debug(f"No partition record for {pdb_id}_{chain_id}")
            return None
        return rows[0]

    def get_domains(self, pdb_id: str, chain_id: str,
                    processing_id: Optional[int] = None) -> List[PredictedDomain]:
        """Get predicted domains for a chain, ordered by domain number

        Only one partition run is read: the given processing_id, or else the
        latest run for the chain.
        """
        if processing_id is not None:
            run_filter = "pd.protein_id = %s"
            params = (processing_id,)
        else:
            run_filter = """pd.protein_id = (
            SELECT id FROM pdb_analysis.partition_proteins
            WHERE pdb_id = %s AND chain_id = %s
            ORDER BY timestamp DESC
            LIMIT 1
        )"""
            params = (pdb_id, chain_id)

        query = f"""
        SELECT
            pd.id,
            pd.domain_number,
            pd.domain_id,
            pd.start_pos,
            pd.end_pos,
            pd.range,
            pd.source,
            pd.source_id,
            pd.confidence,
            pd.t_group,
            tc.name AS t_group_name,
            pd.h_group,
            hc.name AS h_group_name,
            pd.x_group,
            xc.name AS x_group_name,
            pd.a_group
        FROM pdb_analysis.partition_domains pd
        LEFT JOIN pdb_analysis.t_classification tc ON pd.t_group = tc.t_id
        LEFT JOIN pdb_analysis.h_classification hc ON pd.h_group = hc.h_id
        LEFT JOIN pdb_analysis.x_classification xc ON pd.x_group = xc.x_id
        WHERE {run_filter}
        ORDER BY pd.domain_number
        """
        rows = self.db.execute_dict_query(query, params)
        domains = [PredictedDomain.from_dict(row, ordinal=i)
                   for i, row in enumerate(rows, start=1)]

        self.logger.debug(f"Loaded {len(domains)} domains for {pdb_id}_{chain_id}")
        return domains
