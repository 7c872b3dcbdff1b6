#!/usr/bin/env python3
"""
Domain summary XML parser

Reads the ``blast_summ_doc`` documents written by the domain partition
pipeline and turns their evidence sections into hit objects:

    chain_blast_run/hits/hit     -> ChainBlastHit
    blast_run/hits/hit           -> DomainBlastHit (requires domain_id)
    hh_run/hits/hit              -> HHSearchHit
    hh_hit_list/hh_hit           -> HHSearchHit (standalone HHsearch format)

Parsing is soft: a missing file or malformed XML yields an empty document
with the problem recorded in ``errors``.
"""

import os
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Any, List

from ecod_curation.models.evidence import AnyHit, hit_from_dict

# Warn for summaries larger than this
LARGE_FILE_BYTES = 50 * 1024 * 1024


@dataclass
class EvidenceDocument:
    """Hits and metadata read from one domain summary"""
    pdb_id: str = ""
    chain_id: str = ""
    reference: str = ""
    hits: List[AnyHit] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def protein_id(self) -> str:
        return f"{self.pdb_id}_{self.chain_id}" if self.pdb_id else ""

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def hits_of_type(self, hit_type: str) -> List[AnyHit]:
        return [hit for hit in self.hits if hit.type == hit_type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pdb_id": self.pdb_id,
            "chain_id": self.chain_id,
            "reference": self.reference,
            "hits": [hit.to_dict() for hit in self.hits],
            "errors": list(self.errors),
        }


class DomainSummaryParser:
    """Parser for domain summary evidence documents"""

    def __init__(self):
        self.logger = logging.getLogger("ecod_curation.io.summary_parser")

    def parse_file(self, file_path: str) -> EvidenceDocument:
        """Parse a domain summary file

        Args:
            file_path: Path to the summary XML

        Returns:
            EvidenceDocument; errors are recorded, never raised
        """
        if not os.path.exists(file_path):
            return self._failed(f"Domain summary file not found: {file_path}")

        if not os.access(file_path, os.R_OK):
            return self._failed(f"Permission denied reading file: {file_path}")

        file_size = os.path.getsize(file_path)
        if file_size > LARGE_FILE_BYTES:
            self.logger.warning(f"Large domain summary file: {file_size / 1024 / 1024:.1f}MB")

        try:
            root = ET.parse(file_path).getroot()
        except ET.ParseError as e:
            return self._failed(f"XML parsing error in {file_path}: {e}")
        except (OSError, UnicodeDecodeError) as e:
            return self._failed(f"Error reading {file_path}: {e}")

        document = self._parse_root(root)
        self.logger.debug(f"Parsed {len(document.hits)} hits from {file_path}")
        return document

    def parse_string(self, xml_content: str) -> EvidenceDocument:
        """Parse domain summary XML content"""
        if not xml_content or not xml_content.strip():
            return self._failed("Empty domain summary content")

        try:
            root = ET.fromstring(xml_content)
        except ET.ParseError as e:
            return self._failed(f"XML parsing error: {e}")

        return self._parse_root(root)

    def _failed(self, message: str) -> EvidenceDocument:
        self.logger.warning(message)
        return EvidenceDocument(errors=[message])

    def _parse_root(self, root: ET.Element) -> EvidenceDocument:
        document = EvidenceDocument()
        self._extract_metadata(root, document)

        if root.tag not in ("blast_summ_doc", "hh_summ_doc"):
            self.logger.debug(f"Unexpected root element '{root.tag}', parsing evidence sections anyway")

        records = []
        records.extend(self._chain_blast_records(root))
        records.extend(self._domain_blast_records(root))
        records.extend(self._hhsearch_records(root))

        for record in records:
            hit = hit_from_dict(record)
            if hit is not None:
                document.hits.append(hit)

        return document

    def _extract_metadata(self, root: ET.Element, document: EvidenceDocument) -> None:
        # Standalone HHsearch summaries carry a metadata block
        metadata = root.find(".//metadata")
        if metadata is not None:
            document.pdb_id = self._child_text(metadata, "pdb_id")
            document.chain_id = self._child_text(metadata, "chain_id")
            document.reference = self._child_text(metadata, "reference")
            return

        summary = root if root.tag == "blast_summ" else root.find("blast_summ")
        if summary is not None:
            document.pdb_id = summary.get("pdb", "")
            document.chain_id = summary.get("chain", "")
            document.reference = summary.get("reference", "")

    def _chain_blast_records(self, root: ET.Element) -> List[Dict[str, Any]]:
        return [self._blast_record(hit_elem, "chain_blast")
                for hit_elem in root.findall("chain_blast_run/hits/hit")]

    def _domain_blast_records(self, root: ET.Element) -> List[Dict[str, Any]]:
        records = []
        skipped = 0
        for run in root.findall("blast_run"):
            program = run.get("program")
            if program and program != "blastp":
                continue
            for hit_elem in run.findall("hits/hit"):
                if not hit_elem.get("domain_id"):
                    skipped += 1
                    continue
                records.append(self._blast_record(hit_elem, "domain_blast"))

        if skipped:
            self.logger.debug(f"Skipped {skipped} domain BLAST hits without domain_id")
        return records

    def _blast_record(self, hit_elem: ET.Element, hit_type: str) -> Dict[str, Any]:
        return {
            "type": hit_type,
            "domain_id": hit_elem.get("domain_id", ""),
            "pdb_id": hit_elem.get("pdb_id", ""),
            "chain_id": hit_elem.get("chain_id", ""),
            "hsp_count": hit_elem.get("hsp_count"),
            "evalue": hit_elem.get("evalues") or hit_elem.get("evalue"),
            "query_range": self._range_text(hit_elem, "query_reg", "query_range"),
            "hit_range": self._range_text(hit_elem, "hit_reg", "hit_range"),
        }

    def _hhsearch_records(self, root: ET.Element) -> List[Dict[str, Any]]:
        records = []
        hit_elems = root.findall("hh_run/hits/hit") + root.findall(".//hh_hit_list/hh_hit")

        for hit_elem in hit_elems:
            records.append({
                "type": "hhsearch",
                "hit_id": hit_elem.get("hit_id") or hit_elem.get("domain_id", ""),
                "ecod_domain_id": hit_elem.get("ecod_domain_id") or hit_elem.get("domain_id"),
                "probability": hit_elem.get("probability"),
                "evalue": hit_elem.get("evalue") or hit_elem.get("e_value"),
                "score": hit_elem.get("score"),
                "query_range": self._range_text(hit_elem, "query_reg", "query_range"),
                "hit_range": self._range_text(hit_elem, "hit_reg", "template_seqid_range"),
            })
        return records

    def _range_text(self, hit_elem: ET.Element, *tags: str) -> str:
        """Range text from the first child element (or attribute) present"""
        for tag in tags:
            child = hit_elem.find(tag)
            if child is not None and child.text and child.text.strip():
                return child.text.strip()
        for tag in tags:
            value = hit_elem.get(tag)
            if value:
                return value.strip()
        return ""

    @staticmethod
    def _child_text(elem: ET.Element, tag: str) -> str:
        child = elem.find(tag)
        return child.text.strip() if child is not None and child.text else ""
