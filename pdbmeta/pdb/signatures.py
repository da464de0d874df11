"""Type/creator signatures of known Palm database applications."""
from __future__ import annotations

from typing import NamedTuple

from pdbmeta.pdb.constants import PDB_HEADER_SIZE, SIGNATURE_OFFSET, SIGNATURE_SIZE
from pdbmeta.pdb.errors import NotRecognized

MOBIPOCKET = "Mobipocket"

# Header bytes 60-68: database type(4) + creator(4)
PALM_TYPES: dict[bytes, str] = {
    b".pdfADBE": "Adobe Reader",
    b"TEXtREAd": "PalmDOC",
    b"BVokBDIC": "BDicty",
    b"DB99DBOS": "DB (Database program)",
    b"PNRdPPrs": "eReader",
    b"DataPPrs": "eReader",
    b"vIMGView": "FireViewer (ImageViewer)",
    b"PmDBPmDB": "HanDBase",
    b"InfoINDB": "InfoView",
    b"ToGoToGo": "iSilo",
    b"SDocSilX": "iSilo 3",
    b"JbDbJBas": "JFile",
    b"JfDbJFil": "JFile Pro",
    b"DATALSdb": "LIST",
    b"Mdb1Mdb1": "MobileDB",
    b"BOOKMOBI": MOBIPOCKET,
    b"DataPlkr": "Plucker",
    b"DataSprd": "QuickSheet",
    b"SM01SMem": "SuperMemo",
    b"TEXtTlDc": "TealDoc",
    b"InfoTlIf": "TealInfo",
    b"DataTlMl": "TealMeal",
    b"DataTlPt": "TealPaint",
    b"dataTDBP": "ThinkDB",
    b"TdatTide": "Tides",
    b"ToRaTRPW": "TomeRaider",
    b"zTXTGPlm": "Weasel",
    b"BDOCWrdS": "WordSmith",
}


class Classification(NamedTuple):
    label: str
    is_mobi: bool

    @property
    def file_type(self) -> str:
        return file_type_for(self.label)


def file_type_for(label: str) -> str:
    return "MOBI" if label == MOBIPOCKET else "PDB"


def classify(header: bytes) -> Classification:
    """Identify a Palm database from its 86-byte header.

    Raises NotRecognized if the header is short or the signature is unknown.
    """
    if len(header) < PDB_HEADER_SIZE:
        raise NotRecognized(f"header too short ({len(header)} bytes)")
    signature = bytes(header[SIGNATURE_OFFSET:SIGNATURE_OFFSET + SIGNATURE_SIZE])
    label = PALM_TYPES.get(signature)
    if label is None:
        raise NotRecognized(f"unknown type/creator {signature!r}")
    return Classification(label=label, is_mobi=label == MOBIPOCKET)
