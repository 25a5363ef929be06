#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the richtext library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Wire Format - JSON keys and fixed values of the structured text format
3. Decoding and Encoding Defaults
4. CLI Exit Codes
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ResolvedLinkMode = Literal["reference", "entity"]
OutputFormat = Literal["json", "tree", "text"]

# =============================================================================
# Wire Format
# =============================================================================

NODE_TYPE_KEY = "nodeType"
CONTENT_KEY = "content"
DATA_KEY = "data"
VALUE_KEY = "value"
MARKS_KEY = "marks"
MARK_TYPE_KEY = "type"

SYS_KEY = "sys"
SYS_TYPE_KEY = "type"
SYS_LINK_TYPE_KEY = "linkType"
SYS_ID_KEY = "id"

# sys.type of an unresolved link reference
LINK_SYS_TYPE = "Link"

# =============================================================================
# Decoding and Encoding Defaults
# =============================================================================

# Recursion guard for deeply nested content arrays
DEFAULT_MAX_DEPTH = 128
DEFAULT_RESOLVE_LINKS = True
DEFAULT_RESOLVED_LINK_MODE: ResolvedLinkMode = "reference"

# =============================================================================
# CLI Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_DECODE_ERROR = 6
