#!/usr/bin/env python3
"""
Shared fixtures for ECOD curation tests
"""

import pytest

from ecod_curation.analysis import (
    AnalysisOptions, DomainEvidenceAttributor, HitQualityClassifier, UsageReconciler
)
from ecod_curation.models import (
    ChainBlastHit, DomainBlastHit, HHSearchHit, EvidenceSource, PredictedDomain
)
from ecod_curation.utils.range_utils import Span


SAMPLE_SUMMARY_XML = """<?xml version="1.0"?>
<blast_summ_doc>
    <blast_summ pdb="5c3l" chain="B" reference="develop291"/>
    <chain_blast_run program="blastp">
        <hits>
            <hit num="1" pdb_id="2abc" chain_id="A" hsp_count="1" evalues="1e-40">
                <query_reg>5-180</query_reg>
                <hit_reg>1-176</hit_reg>
            </hit>
        </hits>
    </chain_blast_run>
    <blast_run program="blastp">
        <hits>
            <hit num="1" domain_id="e2abcA1" pdb_id="2abc" chain_id="A" hsp_count="2" evalues="1e-25,1e-3">
                <query_reg>10-109</query_reg>
                <hit_reg>1-100</hit_reg>
            </hit>
            <hit num="2" pdb_id="3xyz" chain_id="C" evalues="1e-5">
                <query_reg>120-150</query_reg>
                <hit_reg>1-31</hit_reg>
            </hit>
        </hits>
    </blast_run>
    <hh_run program="hhsearch">
        <hits>
            <hit hit_id="e4def1" domain_id="e4defA1" probability="96.5" evalue="1e-12" score="88.1">
                <query_reg>A:112-200</query_reg>
                <hit_reg>3-90</hit_reg>
            </hit>
        </hits>
    </hh_run>
</blast_summ_doc>
"""


@pytest.fixture
def options():
    """Default analysis options"""
    return AnalysisOptions()


@pytest.fixture
def classifier(options):
    return HitQualityClassifier(options)


@pytest.fixture
def attributor(options):
    return DomainEvidenceAttributor(options)


@pytest.fixture
def reconciler():
    return UsageReconciler()


@pytest.fixture
def make_hit():
    """Factory for hits of any source kind with a known query span"""
    def _make_hit(kind="chain_blast", start=1, end=100, **kwargs):
        span = Span(start, end) if start is not None and end is not None else None
        common = {
            "query_span": span,
            "query_range": str(span) if span else "",
        }
        if kind == "chain_blast":
            kwargs.setdefault("evalue", 1e-20)
            kwargs.setdefault("reference_id", "2abc_A")
            return ChainBlastHit(**common, **kwargs)
        if kind == "domain_blast":
            kwargs.setdefault("evalue", 1e-20)
            kwargs.setdefault("reference_id", "e2abcA1")
            return DomainBlastHit(**common, **kwargs)
        if kind == "hhsearch":
            kwargs.setdefault("probability", 95.0)
            kwargs.setdefault("evalue", 1e-10)
            kwargs.setdefault("reference_id", "e4defA1")
            return HHSearchHit(**common, **kwargs)
        raise ValueError(f"Unknown hit kind: {kind}")
    return _make_hit


@pytest.fixture
def domain():
    """Classified 100-residue domain at 10-109 predicted from domain BLAST"""
    return PredictedDomain(
        ordinal=1,
        span=Span(10, 109),
        range="10-109",
        domain_id="e5c3lB1",
        t_group="2002.1.1",
        h_group="2002.1",
        x_group="2002",
        confidence=0.9,
        source=EvidenceSource.DOMAIN_BLAST,
        source_id="e2abcA1",
    )


@pytest.fixture
def summary_xml():
    return SAMPLE_SUMMARY_XML


@pytest.fixture
def summary_file(tmp_path, summary_xml):
    """Domain summary XML written to a temporary file"""
    path = tmp_path / "5c3l_B.develop291.domain_summary.xml"
    path.write_text(summary_xml)
    return str(path)
