"""
Music theory model - notes, chords, keys and chromatic arithmetic

Notes come in two flavours: letter notes (A-G) and Nashville scale degrees
(1-7). Chords wrap a note with an optional free-form modifier and an
optional slash bass. Keys are either absolute (major/minor with a root
letter) or the relative Nashville key, written "##".
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import ChordFormatError, KeyFormatError, NotationMismatchError


class Accidental(Enum):
    """Musical accidental symbols"""
    SHARP = '♯'
    FLAT = '♭'
    NATURAL = '♮'


class KeyQuality(Enum):
    """Major or minor key quality"""
    MAJOR = 'major'
    MINOR = 'minor'


SHARP_POSTFIXES = ('#', '♯', 'is')
FLAT_POSTFIXES = ('b', '♭', 'es', 's')

# Prefix of a chord modifier that marks minor quality
MINOR_QUALITY_MARKER = 'm'


@dataclass(frozen=True, eq=False)
class Note:
    """A pitch reference: root plus optional accidental postfix"""
    root: str
    postfix: Optional[str] = None  # '#', 'b', '♯', '♭', '♮' or German 'is'/'es'/'s'

    PATTERN = None

    @property
    def accidental(self) -> Accidental:
        if self.postfix in SHARP_POSTFIXES:
            return Accidental.SHARP
        if self.postfix in FLAT_POSTFIXES:
            return Accidental.FLAT
        return Accidental.NATURAL

    @staticmethod
    def parse(text: str) -> 'Note':
        """Parse a complete note token into a LetterNote or DegreeNote."""
        for note_type in (LetterNote, DegreeNote):
            note = note_type.match(text)
            if note is not None:
                return note
        raise ChordFormatError(f'Invalid note format: {text!r}')

    @classmethod
    def match(cls, text: str) -> Optional['Note']:
        """Return a note if the whole of text is a note token of this variant"""
        m = re.fullmatch(cls.PATTERN, text)
        if not m:
            return None
        return cls(m.group(1).upper(), m.group(2))

    def to_string(self, normalize: bool = False) -> str:
        """Render the note, optionally with unicode accidentals."""
        if not self.postfix:
            return self.root
        if not normalize:
            return self.root + self.postfix
        if self.accidental == Accidental.SHARP:
            return self.root + '♯'
        if self.accidental == Accidental.FLAT:
            return self.root + '♭'
        return self.root

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other) -> bool:
        # Spelling differences (b vs ♭ vs es) do not matter, letter/degree does
        if not isinstance(other, Note):
            return NotImplemented
        return (type(self), self.root, self.accidental) == (type(other), other.root, other.accidental)

    def __hash__(self) -> int:
        return hash((type(self), self.root, self.accidental))


@dataclass(frozen=True, eq=False)
class LetterNote(Note):
    """Alphabetic note A-G"""
    # German 's'/'es'/'is' is not an accidental when it starts "sus"
    PATTERN = r'([A-Ga-g])(♮|#|♯|b|♭|(?:is|es|s)(?!us))?'


@dataclass(frozen=True, eq=False)
class DegreeNote(Note):
    """Nashville scale degree 1-7"""
    PATTERN = r'([1-7])(#|♯|b|♭)?'

    @property
    def degree(self) -> int:
        return int(self.root)


@dataclass(frozen=True)
class Chord:
    """A note plus optional modifier (quality) and optional slash bass"""
    note: Note
    modifier: Optional[str] = None  # e.g. 'm7', 'maj9', 'sus4' - never transposed
    bass: Optional[Note] = None

    @property
    def quality(self) -> Optional[str]:
        """Modifier in normalized form (Δ→maj, o→dim, ø→m7b5, +→aug)"""
        if not self.modifier:
            return None

        normalized = self.modifier.replace('Δ', 'maj')
        normalized = re.sub(r'(?<!ø)o(?!f)', 'dim', normalized)
        normalized = re.sub(r'ø7?', 'm7b5', normalized)
        normalized = re.sub(r'\+(?!.*aug)', 'aug', normalized)
        normalized = normalized.replace('#', '♯').replace('b', '♭')
        return normalized.lower()

    def is_minor(self, marker: str = MINOR_QUALITY_MARKER) -> bool:
        """True if the modifier marks a minor chord ('m', 'm7', 'min' ...)"""
        if not self.modifier:
            return False
        return self.modifier.startswith(marker) and not self.modifier.startswith('maj')

    def to_string(self, normalize: bool = False) -> str:
        text = self.note.to_string(normalize)
        if self.modifier:
            text += self.quality if normalize else self.modifier
        if self.bass is not None:
            text += '/' + self.bass.to_string(normalize)
        return text

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class LetterChord(Chord):
    """Chord with an alphabetic root"""


@dataclass(frozen=True)
class DegreeChord(Chord):
    """Chord in Nashville number notation"""

    @property
    def degree(self) -> int:
        return self.note.degree


class MusicTheory:
    """Music theory constants and chromatic arithmetic"""

    # Chromatic scale with enharmonic spellings, sharp spelling first
    CHROMATIC_NOTES = [
        ['C'],
        ['C#', 'Db'],
        ['D'],
        ['D#', 'Eb'],
        ['E'],
        ['F'],
        ['F#', 'Gb'],
        ['G'],
        ['G#', 'Ab'],
        ['A'],
        ['A#', 'Bb'],
        ['B'],
    ]

    BASE_INDEX = {'C': 0, 'D': 2, 'E': 4, 'F': 5, 'G': 7, 'A': 9, 'B': 11}

    MAJOR_SCALE = [0, 2, 4, 5, 7, 9, 11]
    MINOR_SCALE = [0, 2, 3, 5, 7, 8, 10]

    # Chromatic offset from the key root -> Nashville degree token
    NASHVILLE_DEGREES = ['1', '1#', '2', '2#', '3', '4', '4#', '5', '5#', '6', '6#', '7']

    ACCIDENTAL_OFFSET = {Accidental.SHARP: 1, Accidental.FLAT: -1, Accidental.NATURAL: 0}

    @staticmethod
    def note_index(note: Note) -> int:
        """Chromatic index 0-11 of a letter note"""
        if not isinstance(note, LetterNote):
            raise NotationMismatchError('chord is not in alphabetic notation')
        base = MusicTheory.BASE_INDEX[note.root]
        return (base + MusicTheory.ACCIDENTAL_OFFSET[note.accidental]) % 12

    @staticmethod
    def degree_offset(note: Note) -> int:
        """Semitones above the key root for a Nashville degree"""
        if not isinstance(note, DegreeNote):
            raise NotationMismatchError('chord is not in Nashville notation')
        base = MusicTheory.MAJOR_SCALE[note.degree - 1]
        return (base + MusicTheory.ACCIDENTAL_OFFSET[note.accidental]) % 12

    @staticmethod
    def preferred_note_name(index: int, preferred: Optional[Accidental] = None) -> str:
        """Spell a chromatic index, picking sharp or flat where both exist"""
        options = MusicTheory.CHROMATIC_NOTES[index % 12]
        if len(options) == 1:
            return options[0]
        if preferred == Accidental.FLAT:
            return options[1]
        return options[0]

    @staticmethod
    def preferred_accidental(key_root: str) -> Accidental:
        """Accidental a key spells its notes with: explicit sign, else F is flat"""
        if '#' in key_root or '♯' in key_root:
            return Accidental.SHARP
        if 'b' in key_root or '♭' in key_root:
            return Accidental.FLAT
        if key_root == 'F':
            return Accidental.FLAT
        return Accidental.NATURAL

    @staticmethod
    def interval(from_note: Note, to_note: Note) -> int:
        """Upward distance in semitones, 0-11"""
        return (MusicTheory.note_index(to_note) - MusicTheory.note_index(from_note) + 12) % 12


@dataclass
class MusicalKey:
    """Base class for keys; use MusicalKey.parse() to build one"""
    root: Note
    preferred_accidental: Accidental = Accidental.NATURAL

    KEY_PATTERN = re.compile(r'^([A-G])(#|♯|b|♭)?(m|min|minor)?$')
    NASHVILLE = '##'

    @staticmethod
    def parse(text: str) -> 'MusicalKey':
        """Parse 'C', 'F#m', 'Bbminor', '##' ... or raise KeyFormatError"""
        if text == MusicalKey.NASHVILLE:
            return NashvilleKey()

        match = MusicalKey.KEY_PATTERN.match(text or '')
        if not match:
            raise KeyFormatError(f'Invalid key format: {text!r}')

        root_name = match.group(1)
        if match.group(2):
            root_name += '#' if match.group(2) in ('#', '♯') else 'b'

        root = LetterNote.match(root_name)
        preferred = MusicTheory.preferred_accidental(root_name)
        if match.group(3):
            return MinorKey(root, preferred)
        return MajorKey(root, preferred)

    @staticmethod
    def is_valid(text: str) -> bool:
        try:
            MusicalKey.parse(text)
        except KeyFormatError:
            return False
        return True

    @property
    def is_absolute(self) -> bool:
        return False

    @property
    def quality(self) -> KeyQuality:
        return KeyQuality.MAJOR

    @property
    def brightness(self) -> int:
        return 1 if self.quality == KeyQuality.MAJOR else -1

    @property
    def scale_degrees(self) -> List[int]:
        return MusicTheory.MAJOR_SCALE


@dataclass
class AbsoluteKey(MusicalKey):
    """A key with a fixed root letter"""

    @property
    def is_absolute(self) -> bool:
        return True

    @property
    def root_index(self) -> int:
        return MusicTheory.note_index(self.root)

    def interval_to(self, other: 'MusicalKey') -> int:
        """Semitones from this key's root up to the other key's root"""
        if not other.is_absolute:
            raise NotationMismatchError('key is not an absolute key')
        return MusicTheory.interval(self.root, other.root)

    def is_enharmonic_with(self, other: 'MusicalKey') -> bool:
        return other.is_absolute and self.root_index == other.root_index

    def _shifted(self, semitones: int, key_type):
        name = MusicTheory.preferred_note_name((self.root_index + semitones) % 12,
                                               self.preferred_accidental)
        return key_type(LetterNote.match(name), MusicTheory.preferred_accidental(name))

    def __str__(self) -> str:
        return str(self.root)


@dataclass
class MajorKey(AbsoluteKey):
    """Major key - major scale intervals"""

    def relative_minor(self) -> 'MinorKey':
        return self._shifted(9, MinorKey)


@dataclass
class MinorKey(AbsoluteKey):
    """Minor key - natural minor scale intervals"""

    @property
    def quality(self) -> KeyQuality:
        return KeyQuality.MINOR

    @property
    def scale_degrees(self) -> List[int]:
        return MusicTheory.MINOR_SCALE

    def relative_major(self) -> MajorKey:
        return self._shifted(3, MajorKey)

    def __str__(self) -> str:
        return str(self.root) + 'm'


@dataclass
class NashvilleKey(MusicalKey):
    """Relative key: chords are written as scale degrees"""
    root: Note = field(default_factory=lambda: DegreeNote('1'))

    def __str__(self) -> str:
        return MusicalKey.NASHVILLE
