"""Palm database / MOBI format constants, offsets, and magic numbers."""

# Palm database header
PDB_HEADER_SIZE = 86
SIGNATURE_OFFSET = 60       # type(4) + creator(4)
SIGNATURE_SIZE = 8
RECORD_COUNT_OFFSET = 76    # uint16
RECORD0_OFFSET = 78         # uint32, first entry of the record list

# MOBI header (record 0)
MOBI_PREFIX_SIZE = 274      # PalmDOC header(16) + MOBI header
MOBI_MAGIC = b"MOBI"
MOBI_MAGIC_OFFSET = 16
MOBI_HEADER_LENGTH_OFFSET = 20
BOOK_NAME_OFFSET = 84       # uint32 offset from record 0
BOOK_NAME_LENGTH = 88       # uint32 length
MOBI_FLAGS_OFFSET = 128
PALMDOC_HEADER_SIZE = 16

# MOBI flags
FLAG_HAS_EXTH = 0x40

# EXTH block
EXTH_MAGIC = b"EXTH"
EXTH_PREFIX_SIZE = 12       # 'EXTH'(4) + size(4) + count(4)
EXTH_ENTRY_HEADER_SIZE = 8  # id(4) + size(4)

# Code pages
CODEPAGE_UTF8 = 65001
DEFAULT_ENCODING = "utf-8"

# Placeholder stored when an indirect string cannot be read
ERROR_STRING = "<err>"
ZERO_DATE = "0000:00:00 00:00:00"

# Seconds between 1904:01:01 (Palm/Mac epoch) and 1970:01:01 (Unix epoch)
EPOCH_DELTA = (66 * 365 + 17) * 24 * 3600
