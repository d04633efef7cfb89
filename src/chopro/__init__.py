"""
ChoPro Notation - parse, transpose and convert chord-annotated song text

This package parses ChordPro-flavoured markdown into a Document that
serializes back to the exact source text, transposes chords between keys
and Nashville numbers, and upgrades chords-above-lyrics sheets to inline
bracket chords.
"""

from .music import (
    Accidental,
    KeyQuality,
    Note,
    LetterNote,
    DegreeNote,
    Chord,
    LetterChord,
    DegreeChord,
    MusicalKey,
    AbsoluteKey,
    MajorKey,
    MinorKey,
    NashvilleKey,
    MusicTheory,
)

from .document import (
    TextSegment,
    Annotation,
    BracketChord,
    IndexedSegment,
    EmptyLine,
    CommentLine,
    TextLine,
    SegmentedLine,
    ChordLyricsLine,
    InstrumentalLine,
    RawChordLine,
    Frontmatter,
    ChordProBlock,
    MarkdownBlock,
    Document,
)

from .parser import (
    ChordParser,
    SegmentTokenizer,
    LineClassifier,
    FrontmatterExtractor,
    BlockSplitter,
    parse,
    parse_chord,
)

from .transpose import (
    NoteTransposer,
    NashvilleTransposer,
    DocumentTransposer,
    TransposeUtils,
    transpose_document,
    detect_key,
)

from .convert import (
    ChordLineDetector,
    ChordLineConverter,
    convert_legacy_chord_lines,
    is_chord_line,
)

from .validator import (
    ValidationIssue,
    ValidationResult,
    StructuralValidator,
    RoundTripValidator,
    is_valid_chord,
    is_valid_key,
    is_valid_note,
)

from .config import ChoproConfig, MissingKeyPolicy, DEFAULT_CONFIG

from .errors import (
    ChoproError,
    GrammarError,
    KeyFormatError,
    MissingKeyError,
    ChordFormatError,
    NotationMismatchError,
)

__version__ = "0.1.0"

__all__ = [
    # Music theory
    'Accidental',
    'KeyQuality',
    'Note',
    'LetterNote',
    'DegreeNote',
    'Chord',
    'LetterChord',
    'DegreeChord',
    'MusicalKey',
    'AbsoluteKey',
    'MajorKey',
    'MinorKey',
    'NashvilleKey',
    'MusicTheory',
    # Data structures
    'TextSegment',
    'Annotation',
    'BracketChord',
    'IndexedSegment',
    'EmptyLine',
    'CommentLine',
    'TextLine',
    'SegmentedLine',
    'ChordLyricsLine',
    'InstrumentalLine',
    'RawChordLine',
    'Frontmatter',
    'ChordProBlock',
    'MarkdownBlock',
    'Document',
    # Parser components
    'ChordParser',
    'SegmentTokenizer',
    'LineClassifier',
    'FrontmatterExtractor',
    'BlockSplitter',
    'parse',
    'parse_chord',
    # Transposition
    'NoteTransposer',
    'NashvilleTransposer',
    'DocumentTransposer',
    'TransposeUtils',
    'transpose_document',
    'detect_key',
    # Legacy conversion
    'ChordLineDetector',
    'ChordLineConverter',
    'convert_legacy_chord_lines',
    'is_chord_line',
    # Validation
    'ValidationIssue',
    'ValidationResult',
    'StructuralValidator',
    'RoundTripValidator',
    'is_valid_chord',
    'is_valid_key',
    'is_valid_note',
    # Configuration
    'ChoproConfig',
    'MissingKeyPolicy',
    'DEFAULT_CONFIG',
    # Errors
    'ChoproError',
    'GrammarError',
    'KeyFormatError',
    'MissingKeyError',
    'ChordFormatError',
    'NotationMismatchError',
]
