"""
Document data model with exact-text serialization

A Document is built by chopro.parser.parse() and turned back into text with
str(document) / document.to_string(). Every node keeps enough of its literal
source text that an unmodified parse re-serializes byte for byte.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

import yaml

from .music import Chord


# ----------------------------------------------------------------------------
# Line segments
# ----------------------------------------------------------------------------

@dataclass
class TextSegment:
    """Plain text between (or around) bracket markers"""
    content: str

    def __str__(self) -> str:
        return self.content


@dataclass
class Annotation:
    """Free-text cue written [*content]"""
    content: str

    def __str__(self) -> str:
        return f'[*{self.content}]'


@dataclass
class BracketChord:
    """Inline chord written [chord]"""
    chord: Chord
    source: Optional[str] = field(default=None, compare=False)  # literal marker text when parsed

    def __str__(self) -> str:
        if self.source is not None:
            return f'[{self.source}]'
        return f'[{self.chord}]'


LineSegment = Union[TextSegment, Annotation, BracketChord]


@dataclass
class IndexedSegment:
    """A segment together with the column it started at in its source line"""
    column: int
    text: str
    segment: LineSegment


# ----------------------------------------------------------------------------
# Lines
# ----------------------------------------------------------------------------

@dataclass
class EmptyLine:
    """Blank line (content keeps any whitespace)"""
    content: str = ''

    def __str__(self) -> str:
        return self.content


@dataclass
class CommentLine:
    """Comment line: '# text'"""
    text: str
    prefix: str = '# '  # leading whitespace, hash run and following spaces

    def __str__(self) -> str:
        return self.prefix + self.text


@dataclass
class TextLine:
    """Plain lyric or prose line"""
    content: str

    def __str__(self) -> str:
        return self.content


@dataclass
class SegmentedLine:
    """Line made of text, annotation and chord segments"""
    segments: List[LineSegment] = field(default_factory=list)

    @property
    def chords(self) -> List[Chord]:
        return [s.chord for s in self.segments if isinstance(s, BracketChord)]

    @property
    def lyrics(self) -> List[TextSegment]:
        return [s for s in self.segments if isinstance(s, TextSegment)]

    @property
    def annotations(self) -> List[Annotation]:
        return [s for s in self.segments if isinstance(s, Annotation)]

    def __str__(self) -> str:
        return ''.join(str(segment) for segment in self.segments)


@dataclass
class ChordLyricsLine(SegmentedLine):
    """Chords mixed with lyric text"""


@dataclass
class InstrumentalLine(SegmentedLine):
    """Only chords, annotations and whitespace"""


@dataclass
class RawChordLine:
    """A legacy chord line (chords floating above lyrics) before merging"""
    content: str
    tokens: List[IndexedSegment] = field(default_factory=list)

    def __str__(self) -> str:
        return self.content


Line = Union[EmptyLine, CommentLine, TextLine, ChordLyricsLine, InstrumentalLine, RawChordLine]


# ----------------------------------------------------------------------------
# Blocks
# ----------------------------------------------------------------------------

class Frontmatter:
    """Leading YAML property block bounded by '---' lines"""

    def __init__(self, properties: Optional[Dict[str, Any]] = None, raw: Optional[str] = None):
        self.properties = dict(properties or {})
        self.raw = raw  # literal source text, dropped once the properties change

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def set(self, key: str, value: Any):
        self.properties[key] = value
        self.raw = None

    def remove(self, key: str):
        if key in self.properties:
            del self.properties[key]
            self.raw = None

    def has(self, key: str) -> bool:
        return key in self.properties

    def keys(self) -> List[str]:
        return list(self.properties.keys())

    def to_yaml(self) -> str:
        return yaml.dump(self.properties, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def __str__(self) -> str:
        if self.raw is not None:
            return self.raw
        return '---\n' + self.to_yaml() + '---'

    def __eq__(self, other) -> bool:
        if not isinstance(other, Frontmatter):
            return NotImplemented
        return self.properties == other.properties

    def __repr__(self) -> str:
        return f'Frontmatter({self.properties!r})'


@dataclass
class ChordProBlock:
    """Fenced block of chord/lyric lines"""
    lines: List[Line] = field(default_factory=list)
    opening: str = '```chopro'
    closing: Optional[str] = '```'  # None when the block runs to end of input

    def __str__(self) -> str:
        parts = [self.opening]
        parts.extend(str(line) for line in self.lines)
        if self.closing is not None:
            parts.append(self.closing)
        return '\n'.join(parts)


@dataclass
class MarkdownBlock:
    """Any text outside ChordPro fences"""
    content: str

    def __str__(self) -> str:
        return self.content


Block = Union[ChordProBlock, MarkdownBlock]


# ----------------------------------------------------------------------------
# Document
# ----------------------------------------------------------------------------

@dataclass
class Document:
    """Optional frontmatter followed by an ordered list of blocks"""
    frontmatter: Optional[Frontmatter] = None
    blocks: List[Block] = field(default_factory=list)

    @property
    def key(self) -> Optional[str]:
        """The frontmatter 'key' property as a string, if any"""
        if self.frontmatter is None:
            return None
        value = self.frontmatter.get('key')
        if value is None:
            return None
        return str(value)

    def set_key(self, key: str):
        """Set the frontmatter key, adding a frontmatter block if needed"""
        if self.frontmatter is None:
            self.frontmatter = Frontmatter()
        self.frontmatter.set('key', key)

    def chordpro_blocks(self) -> List[ChordProBlock]:
        return [block for block in self.blocks if isinstance(block, ChordProBlock)]

    def segmented_lines(self) -> Iterator[SegmentedLine]:
        """Every chord/lyrics and instrumental line, in document order"""
        for block in self.chordpro_blocks():
            for line in block.lines:
                if isinstance(line, SegmentedLine):
                    yield line

    def to_string(self) -> str:
        parts = []
        if self.frontmatter is not None:
            parts.append(str(self.frontmatter))
        parts.extend(str(block) for block in self.blocks)
        return '\n'.join(parts)

    def __str__(self) -> str:
        return self.to_string()
