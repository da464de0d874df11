"""Display conversions for integer-coded header fields."""
from __future__ import annotations


def convert_file_size(size: int) -> str:
    """Format a byte count the way file sizes are usually shown."""
    if size < 2048:
        return f"{size} bytes"
    if size < 10240:
        return f"{size / 1024:.1f} kB"
    if size < 2097152:
        return f"{size / 1024:.0f} kB"
    if size < 10485760:
        return f"{size / 1048576:.1f} MB"
    if size < 2147483648:
        return f"{size / 1048576:.0f} MB"
    if size < 10737418240:
        return f"{size / 1073741824:.1f} GB"
    return f"{size / 1073741824:.0f} GB"


# MOBI header compression (record 0, bytes 0-2)
COMPRESSION: dict[int, str] = {
    1: "None",
    2: "PalmDOC",
    17480: "HUFF/CDIC",
}

# MOBI header encryption (record 0, bytes 12-14)
ENCRYPTION: dict[int, str] = {
    0: "None",
    1: "Old Mobipocket",
    2: "Mobipocket",
}

# MOBI header book type
MOBI_TYPE: dict[int, str] = {
    2: "Mobipocket Book",
    3: "PalmDoc Book",
    4: "Audio",
    232: "mobipocket? generated by kindlegen1.2",
    248: "KF8: generated by kindlegen2",
    257: "News",
    258: "News_Feed",
    259: "News_Magazine",
    513: "PICS",
    514: "WORD",
    515: "XLS",
    516: "PPT",
    517: "TEXT",
    518: "HTML",
}

# Only the commonly used ones
CODE_PAGE: dict[int, str] = {
    1252: "Windows Latin 1 (Western European)",
    65001: "Unicode (UTF-8)",
}

# EXTH 204
CREATOR_SOFTWARE: dict[int, str] = {
    1: "Mobigen",
    2: "Mobipocket",
    200: "Kindlegen (Windows)",
    201: "Kindlegen (Linux)",
    202: "Kindlegen (Mac)",
}

# EXTH 404
TEXT_TO_SPEECH: dict[int, str] = {
    0: "Enabled",
    1: "Disabled",
}
