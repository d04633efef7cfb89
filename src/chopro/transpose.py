"""
Chord transposition between keys and to/from Nashville numbers
"""

import logging
from typing import List, Optional, Tuple, Union

from .config import DEFAULT_CONFIG, ChoproConfig, MissingKeyPolicy
from .document import BracketChord, Document, SegmentedLine
from .errors import KeyFormatError, MissingKeyError, NotationMismatchError
from .music import (
    Accidental,
    Chord,
    DegreeChord,
    DegreeNote,
    LetterChord,
    LetterNote,
    MusicalKey,
    MusicTheory,
    Note,
)

logger = logging.getLogger(__name__)

KeyLike = Union[str, MusicalKey]


class TransposeUtils:
    """Key helpers for callers that validate user input"""

    # Every key root spelling the key grammar produces
    KEY_ROOTS = ['C', 'C#', 'Db', 'D', 'D#', 'Eb', 'E', 'F', 'F#', 'Gb',
                 'G', 'G#', 'Ab', 'A', 'A#', 'Bb', 'B']

    @staticmethod
    def all_keys() -> List[str]:
        """All major keys followed by all minor keys"""
        return TransposeUtils.KEY_ROOTS + [root + 'm' for root in TransposeUtils.KEY_ROOTS]

    @staticmethod
    def is_valid_key(text: str) -> bool:
        return MusicalKey.is_valid(text)

    @staticmethod
    def parse_key(key: KeyLike) -> MusicalKey:
        if isinstance(key, MusicalKey):
            return key
        if not isinstance(key, str):
            raise KeyFormatError(f'Invalid key format: {key!r}')
        return MusicalKey.parse(key.strip())

    @staticmethod
    def require_absolute(key: MusicalKey) -> MusicalKey:
        if not key.is_absolute:
            raise NotationMismatchError('key is not an absolute key')
        return key


class NoteTransposer:
    """Shifts letter notes and chords by a semitone interval"""

    @staticmethod
    def transpose_note(note: Note, interval: int, preferred: Optional[Accidental] = None) -> LetterNote:
        index = (MusicTheory.note_index(note) + interval) % 12
        return LetterNote.match(MusicTheory.preferred_note_name(index, preferred))

    @staticmethod
    def transpose_chord(chord: Chord, interval: int, preferred: Optional[Accidental] = None) -> LetterChord:
        if not isinstance(chord, LetterChord):
            raise NotationMismatchError('chord is not in alphabetic notation')

        bass = None
        if chord.bass is not None:
            bass = NoteTransposer.transpose_note(chord.bass, interval, preferred)

        return LetterChord(
            NoteTransposer.transpose_note(chord.note, interval, preferred),
            chord.modifier,
            bass,
        )


class NashvilleTransposer:
    """Converts chords between alphabetic and Nashville notation for a key"""

    @staticmethod
    def note_to_degree(note: Note, key: KeyLike) -> DegreeNote:
        key = TransposeUtils.require_absolute(TransposeUtils.parse_key(key))
        offset = MusicTheory.interval(key.root, note)
        return DegreeNote.match(MusicTheory.NASHVILLE_DEGREES[offset])

    @staticmethod
    def degree_to_note(note: Note, key: KeyLike) -> LetterNote:
        key = TransposeUtils.require_absolute(TransposeUtils.parse_key(key))
        index = (key.root_index + MusicTheory.degree_offset(note)) % 12
        return LetterNote.match(MusicTheory.preferred_note_name(index, key.preferred_accidental))

    @staticmethod
    def chord_to_nashville(chord: Chord, key: KeyLike) -> DegreeChord:
        """Alphabetic chord -> Nashville degree chord. The modifier is kept as-is."""
        if not isinstance(chord, LetterChord):
            raise NotationMismatchError('chord is not in alphabetic notation')

        bass = None
        if chord.bass is not None:
            bass = NashvilleTransposer.note_to_degree(chord.bass, key)

        return DegreeChord(NashvilleTransposer.note_to_degree(chord.note, key), chord.modifier, bass)

    @staticmethod
    def nashville_to_chord(chord: Chord, key: KeyLike) -> LetterChord:
        """Nashville degree chord -> alphabetic chord spelled for the key"""
        if not isinstance(chord, DegreeChord):
            raise NotationMismatchError('chord is not in Nashville notation')

        bass = None
        if chord.bass is not None:
            bass = NashvilleTransposer.degree_to_note(chord.bass, key)

        return LetterChord(NashvilleTransposer.degree_to_note(chord.note, key), chord.modifier, bass)


def detect_key(document: Document) -> Optional[MusicalKey]:
    """Read the document key from frontmatter; None if missing or invalid"""
    key = document.key
    if key is None:
        return None

    try:
        return MusicalKey.parse(key.strip())
    except KeyFormatError:
        logger.warning(f"Ignoring invalid frontmatter key: {key!r}")
        return None


class DocumentTransposer:
    """Transposes every bracket chord of a document to a target key"""

    def __init__(self, to_key: KeyLike, from_key: Optional[KeyLike] = None,
                 config: Optional[ChoproConfig] = None):
        self.to_key = TransposeUtils.parse_key(to_key)
        self.from_key = TransposeUtils.parse_key(from_key) if from_key is not None else None
        self.config = config or DEFAULT_CONFIG

    def transpose(self, document: Document) -> int:
        """Rewrite chords in place and return how many were rewritten"""
        source = self.from_key or detect_key(document)
        target = self.to_key

        if source is None and self._has_letter_chords(document):
            if self.config.missing_key_policy == MissingKeyPolicy.RAISE:
                raise MissingKeyError('no source key given and none found in frontmatter')
            logger.warning("Skipping transposition: no source key given and none found in frontmatter")
            return 0

        # Work out every replacement first so a failure leaves the document untouched
        replacements = self._plan(document, source, target)

        for line, index, chord in replacements:
            line.segments[index] = BracketChord(chord)

        if target.is_absolute and document.key != str(target):
            document.set_key(str(target))

        logger.debug(f"Transposed {len(replacements)} chords from {source} to {target}")
        return len(replacements)

    def _plan(self, document: Document, source: Optional[MusicalKey],
              target: MusicalKey) -> List[Tuple[SegmentedLine, int, Chord]]:
        replacements = []

        for line in document.segmented_lines():
            for index, segment in enumerate(line.segments):
                if not isinstance(segment, BracketChord):
                    continue
                chord = self._convert(segment.chord, source, target)
                if chord is not None:
                    replacements.append((line, index, chord))

        return replacements

    @staticmethod
    def _convert(chord: Chord, source: Optional[MusicalKey], target: MusicalKey) -> Optional[Chord]:
        """New chord for the target key, or None to leave it alone"""
        if isinstance(chord, DegreeChord):
            if not target.is_absolute:
                return None
            return NashvilleTransposer.nashville_to_chord(chord, target)

        source = TransposeUtils.require_absolute(source)
        if not target.is_absolute:
            return NashvilleTransposer.chord_to_nashville(chord, source)

        interval = source.interval_to(target)
        if interval == 0:
            return None
        return NoteTransposer.transpose_chord(chord, interval, target.preferred_accidental)

    @staticmethod
    def _has_letter_chords(document: Document) -> bool:
        return any(
            isinstance(chord, LetterChord)
            for line in document.segmented_lines()
            for chord in line.chords
        )


def transpose_document(document: Document, from_key: Optional[KeyLike], to_key: KeyLike,
                       config: Optional[ChoproConfig] = None) -> Document:
    """Transpose a parsed document in place and return it"""
    DocumentTransposer(to_key, from_key, config).transpose(document)
    return document
