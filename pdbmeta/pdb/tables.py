"""Field tables for the Palm database header, MOBI header and EXTH block.

Positional tables are indexed in units of their default format (int32u, so
position 9 is byte 36). A field with its own format is read at the same
offset using its own width.
"""
from __future__ import annotations

from pdbmeta.pdb.dates import convert_xmp_date, normalize_epoch, render_calendar
from pdbmeta.pdb.enums import (
    CODE_PAGE,
    COMPRESSION,
    CREATOR_SOFTWARE,
    ENCRYPTION,
    MOBI_TYPE,
    TEXT_TO_SPEECH,
    convert_file_size,
)
from pdbmeta.pdb.fields import FieldFormat, FieldSpec, HeaderTable
from pdbmeta.pdb.signatures import PALM_TYPES

U8 = FieldFormat.UINT8
U16 = FieldFormat.UINT16
U32 = FieldFormat.UINT32


def _date(name: str) -> FieldSpec:
    return FieldSpec(name, raw_conv=normalize_epoch, value_conv=render_calendar)


# Palm database header (86 bytes)
PDB_HEADER = HeaderTable(
    name="Palm",
    group="Palm",
    default_format=U32,
    fields={
        0: FieldSpec("DatabaseName", FieldFormat.STRING, count=32),
        # 8 - int16u file attributes, 8.5 - int16u version
        9: _date("CreateDate"),
        10: _date("ModifyDate"),
        11: _date("LastBackupDate"),
        12: FieldSpec("ModificationNumber"),
        15: FieldSpec("PalmFileType", FieldFormat.UNDEF, count=8, print_conv=PALM_TYPES),
    },
)

# PalmDOC + MOBI header at the start of record 0
MOBI_HEADER = HeaderTable(
    name="MOBI",
    group="MOBI",
    default_format=U32,
    fields={
        0: FieldSpec("Compression", U16, print_conv=COMPRESSION),
        1: FieldSpec("UncompressedTextLength", print_conv=convert_file_size),
        3: FieldSpec("Encryption", print_conv=ENCRYPTION),
        6: FieldSpec("MobiType", print_conv=MOBI_TYPE),
        7: FieldSpec("CodePage", print_conv=CODE_PAGE, publish="code_page"),
        9: FieldSpec("MobiVersion"),
        # really an offset; replaced by the string it points at
        21: FieldSpec("BookName"),
        26: FieldSpec("MinimumVersion"),
    },
)

BOOK_NAME_POSITION = 21

# EXTH entries, keyed by record id
EXTH = HeaderTable(
    name="EXTH",
    group="MOBI",
    default_format=FieldFormat.TEXT,
    tagged=True,
    fields={
        1: FieldSpec("DRMServerID"),
        2: FieldSpec("DRMCommerceID"),
        3: FieldSpec("DRM_E-BookBaseID"),
        100: FieldSpec("Author"),
        101: FieldSpec("Publisher"),
        102: FieldSpec("Imprint"),
        103: FieldSpec("Description"),
        104: FieldSpec("ISBN"),
        105: FieldSpec("Subject", is_list=True),
        106: FieldSpec("PublishDate", value_conv=convert_xmp_date),
        107: FieldSpec("Review"),
        108: FieldSpec("Contributor"),
        109: FieldSpec("Rights"),
        110: FieldSpec("SubjectCode"),
        111: FieldSpec("BookType"),
        112: FieldSpec("Source"),
        113: FieldSpec("ASIN"),
        114: FieldSpec("BookVersion"),
        115: FieldSpec("SampleFlag", U32),
        116: FieldSpec("StartReading", U32),
        117: FieldSpec("Adult"),
        118: FieldSpec("RetailPrice"),
        119: FieldSpec("RetailPriceCurrency"),
        # 121 KF8BoundaryOffset
        125: FieldSpec("ResourceCount", U32),
        129: FieldSpec("KF8CoverURI"),
        200: FieldSpec("DictionaryShortName"),
        # 201 CoverOffset, 202 ThumbOffset, 203 HasFakeCover
        204: FieldSpec("CreatorSoftware", U32, print_conv=CREATOR_SOFTWARE),
        205: FieldSpec("CreatorMajorVersion", U32),
        206: FieldSpec("CreatorMinorVersion", U32),
        207: FieldSpec("CreatorBuildNumber", U32),
        208: FieldSpec("Watermark"),
        209: FieldSpec("Tamper-proofKeys"),
        # 300 FontSignature
        401: FieldSpec("ClippingLimit", U8),
        402: FieldSpec("PublisherLimit"),
        404: FieldSpec("TextToSpeech", U8, print_conv=TEXT_TO_SPEECH),
        405: FieldSpec("RentalFlag", U8),
        406: FieldSpec("RentalExpirationDate"),
        501: FieldSpec("CDEType", U32),
        502: FieldSpec("LastUpdateTime"),
        503: FieldSpec("UpdatedTitle"),
        504: FieldSpec("ASIN2"),
        524: FieldSpec("Language"),
        525: FieldSpec("Alignment"),
        535: FieldSpec("CreatorBuildNumber2"),
    },
)

TABLES: dict[str, HeaderTable] = {t.name: t for t in (PDB_HEADER, MOBI_HEADER, EXTH)}
