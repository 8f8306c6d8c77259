"""Shared fixtures: a small two-manual corpus."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict

import pytest

from manualref.ingestion.corpus_loader import parse_corpus
from manualref.models import Corpus

RAW_CORPUS: Dict[str, Any] = {
    "documents": [
        {
            "id": "SM",
            "title": "Cessna 172 Service Manual",
            "shortName": "SM",
            "documentNumber": "D2065-3-13",
            "revision": "13",
            "totalPages": 600,
            "pdfFile": "/manuals/cessna172-sm.pdf",
        },
        {
            "id": "OM",
            "title": "Lycoming O-320 Operator's Manual",
            "shortName": "O-320 OM",
            "documentNumber": "60297-22",
            "totalPages": 120,
            "asset": "/manuals/o320-om.pdf",
        },
    ],
    "chunks": [
        {
            "id": "sm-spark-plug",
            "sourceDocument": "SM",
            "component": "spark plug",
            "keywords": ["spark plug", "spark plugs", "ignition"],
            "section": "11-15",
            "sectionTitle": "Ignition System",
            "page": 305,
            "figure": "11-3",
            "figureTitle": "Spark Plug Installation",
            "content": "Remove spark plugs and inspect electrodes for wear. Torque to 300-360 in-lbs.",
        },
        {
            "id": "sm-magneto",
            "sourceDocument": "SM",
            "component": "magneto",
            "keywords": ["magneto", "timing", "ignition"],
            "section": "11-16",
            "sectionTitle": "Ignition System",
            "page": 305,
            "content": "Check magneto timing to 25 degrees BTDC.",
        },
        {
            "id": "sm-oil-filter",
            "sourceDocument": "SM",
            "component": "oil filter",
            "keywords": ["oil filter", "filter element"],
            "section": "12-4",
            "sectionTitle": "Engine Oil System",
            "page": 320,
            "content": "Replace the oil filter at every oil change.",
        },
        {
            "id": "om-spark-plug",
            "sourceDocument": "OM",
            "component": "spark plug",
            "keywords": ["spark plug"],
            "section": "3",
            "sectionTitle": "Maintenance",
            "page": 34,
            "content": "Rotate spark plugs top to bottom every 100 hours.",
        },
        {
            "id": "sm-brake",
            "sourceDocument": "SM",
            "component": "brake assembly",
            "keywords": ["brake", "brake pad", "lining"],
            "section": "5-10",
            "sectionTitle": "Wheels and Brakes",
            "page": 150,
            "content": "Inspect brake linings for minimum thickness.",
        },
    ],
}


@pytest.fixture
def raw_corpus() -> Dict[str, Any]:
    return copy.deepcopy(RAW_CORPUS)


@pytest.fixture
def corpus(raw_corpus: Dict[str, Any]) -> Corpus:
    return parse_corpus(raw_corpus)


@pytest.fixture
def corpus_file(tmp_path: Path, raw_corpus: Dict[str, Any]) -> Path:
    path = tmp_path / "manual-kb.json"
    path.write_text(json.dumps(raw_corpus), encoding="utf-8")
    return path
