"""
Configuration for LogSQL.
Contains the tunable parameters for storage, schemas, queries and logging.
"""

# ============================================================================
# Storage Configuration
# ============================================================================

# Default data directory for the catalog and table logs
DATA_DIR = './logsql_data'

# Catalog file name (databases, tables and their declarations)
CATALOG_FILE = '_catalog.json'

# Table log file extension (one JSON-encoded record per line)
LOG_FILE_EXT = '.log'

# Prefixes used to build store keys: db_<database>/table_<table>
DATABASE_PREFIX = 'db_'
TABLE_PREFIX = 'table_'

# Prefix of the stored schema declaration text
DECLARATION_PREFIX = 'Schema: '

# ============================================================================
# Record Configuration
# ============================================================================

# Number of most-recent records read for SELECT and primary-key checks
RECORD_READ_LIMIT = 100

# Timestamp format of the first record line (UTC)
RECORD_TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S.%fZ'

# ============================================================================
# Schema Configuration
# ============================================================================

# Character limit bounds for VARCHAR/CHAR
MAX_STRING_SIZE = 65535

# Precision bounds for FLOAT/DOUBLE/DECIMAL
MAX_NUMERIC_PRECISION = 65

# Sizes used when VARCHAR/CHAR are declared without one
DEFAULT_VARCHAR_SIZE = 255
DEFAULT_CHAR_SIZE = 1

# ============================================================================
# Constraint Configuration
# ============================================================================

# Allow inserts when existing records cannot be read for the primary-key scan
UNIQUE_CHECK_FAIL_OPEN = True

# Tolerance used when comparing FLOAT primary-key values
FLOAT_EPSILON = 1e-9

# ============================================================================
# Query Output Configuration
# ============================================================================

# Rows displayed per SELECT (the full match count is reported separately)
MAX_DISPLAY_ROWS = 20

# Maximum rendered cell width in the REPL
MAX_DISPLAY_WIDTH = 50

# ============================================================================
# Debug and Logging
# ============================================================================

LOG_LEVEL = 'WARNING'

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
