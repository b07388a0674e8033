"""Shared names and patterns for reading Verovio SVG pages."""

# Standard Library
import re

# SVG tags
TAG_DEFS = "defs"
TAG_G = "g"
TAG_PATH = "path"
TAG_POLYLINE = "polyline"
TAG_SVG = "svg"
TAG_SYMBOL = "symbol"
TAG_USE = "use"

# Verovio element classes
CLASS_ACCID = "accid"
CLASS_BEAM = "beam"
CLASS_CHORD = "chord"
CLASS_CLEF = "clef"
CLASS_DIR = "dir"
CLASS_DYNAM = "dynam"
CLASS_HAIRPIN = "hairpin"
CLASS_KEYACCID = "keyAccid"
CLASS_KEYSIG = "keySig"
CLASS_LAYER = "layer"
CLASS_MEASURE = "measure"
CLASS_METERSIG = "meterSig"
CLASS_MREST = "mRest"
CLASS_NOTE = "note"
CLASS_PAGE_MARGIN = "page-margin"
CLASS_REST = "rest"
CLASS_SLUR = "slur"
CLASS_SPACE = "space"
CLASS_STAFF = "staff"
CLASS_STEM = "stem"
CLASS_SYSTEM = "system"
CLASS_TIE = "tie"

XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
XLINK_HREF = f"{{{XLINK_NAMESPACE}}}href"

# staff children that hold leaf elements
STAFF_CHILD_CLASSES = frozenset({CLASS_LAYER, CLASS_KEYSIG, CLASS_CLEF, CLASS_METERSIG})
# measure children indexed outside the row/column grid
FLOATING_CLASSES = frozenset({CLASS_DYNAM, CLASS_SLUR, CLASS_DIR, CLASS_HAIRPIN, CLASS_TIE})

# path tokens: numbers first so exponents are not read as commands
PATH_TOKEN_PATTERN = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|[A-Za-z]")
SVG_FLOAT_PATTERN = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
TRANSLATE_PATTERN = re.compile(
	r"^\s*translate\(\s*([-+]?\d+(?:\.\d*)?)\s*[, ]\s*([-+]?\d+(?:\.\d*)?)\s*\)\s*$"
)

# diagnostic overlay styling
OVERLAY_ROW_COLOR = "#FF0000"
OVERLAY_COLUMN_COLOR = "#0000FF"
OVERLAY_HITBOX_COLOR = "#00FF00"
OVERLAY_ROW_STROKE = 22
OVERLAY_COLUMN_STROKE = 17
OVERLAY_HITBOX_STROKE = 20
