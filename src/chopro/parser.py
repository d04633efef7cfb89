"""
ChordPro Parser - converts chord-annotated markdown text into a Document

Parsing is total: malformed input degrades to plain text instead of raising.

    doc = parse(text)
    assert str(doc) == text
"""

import logging
import re
from typing import List, Optional, Tuple

import yaml

from .config import DEFAULT_CONFIG, ChoproConfig
from .document import (
    Annotation,
    BracketChord,
    ChordLyricsLine,
    ChordProBlock,
    CommentLine,
    Document,
    EmptyLine,
    Frontmatter,
    InstrumentalLine,
    Line,
    LineSegment,
    MarkdownBlock,
    TextLine,
    TextSegment,
)
from .errors import ChordFormatError
from .music import Chord, DegreeChord, DegreeNote, LetterChord, LetterNote

logger = logging.getLogger(__name__)


class ChordParser:
    """Chord token grammar: <root><accidental?><modifier?>(/<bass>)?"""

    VARIANTS = (
        (LetterNote, LetterChord),
        (DegreeNote, DegreeChord),
    )

    @staticmethod
    def parse(text: str) -> Optional[Chord]:
        """Parse a chord token (without brackets), or return None if it is not one"""
        for note_type, chord_type in ChordParser.VARIANTS:
            match = re.match(note_type.PATTERN, text)
            if not match:
                continue

            note = note_type(match.group(1).upper(), match.group(2))
            modifier, slash, bass_text = text[match.end():].partition('/')
            if '[' in modifier or ']' in modifier:
                return None

            bass = None
            if slash:
                # Bass must be a whole note token of the same notation
                bass = note_type.match(bass_text)
                if bass is None:
                    return None

            return chord_type(note, modifier or None, bass)

        return None

    @staticmethod
    def test(text: str) -> bool:
        return ChordParser.parse(text) is not None


def parse_chord(text: str) -> Chord:
    """Strict chord parse: accepts 'G7' or '[G7]', raises ChordFormatError"""
    token = text
    if token.startswith('[') and token.endswith(']'):
        token = token[1:-1]
    chord = ChordParser.parse(token)
    if chord is None:
        raise ChordFormatError(f'Invalid chord notation: {text!r}')
    return chord


class SegmentTokenizer:
    """Splits a line into text, annotation and chord segments"""

    MARKER_PATTERN = re.compile(r'\[([^\]]+)\]')

    @staticmethod
    def has_marker(line: str) -> bool:
        return SegmentTokenizer.MARKER_PATTERN.search(line) is not None

    @staticmethod
    def strip_markers(line: str) -> str:
        return SegmentTokenizer.MARKER_PATTERN.sub('', line)

    @staticmethod
    def parse_marker(content: str) -> LineSegment:
        """Classify the inside of a [...] marker"""
        if content.startswith('*'):
            return Annotation(content[1:])

        chord = ChordParser.parse(content)
        if chord is not None:
            return BracketChord(chord, source=content)

        return TextSegment(f'[{content}]')

    @staticmethod
    def tokenize(line: str) -> List[LineSegment]:
        segments = []
        last_index = 0

        for match in SegmentTokenizer.MARKER_PATTERN.finditer(line):
            if match.start() > last_index:
                segments.append(TextSegment(line[last_index:match.start()]))
            segments.append(SegmentTokenizer.parse_marker(match.group(1)))
            last_index = match.end()

        if last_index < len(line):
            segments.append(TextSegment(line[last_index:]))

        return segments


class LineClassifier:
    """Classifies one line of a ChordPro block (first match wins)"""

    COMMENT_PATTERN = re.compile(r'^(\s*#+\s*)(.*)$')

    @staticmethod
    def classify(line: str) -> Line:
        if not line.strip():
            return EmptyLine(line)

        comment = LineClassifier.COMMENT_PATTERN.match(line)
        if comment:
            return CommentLine(comment.group(2), prefix=comment.group(1))

        if SegmentTokenizer.has_marker(line):
            segments = SegmentTokenizer.tokenize(line)
            if not SegmentTokenizer.strip_markers(line).strip():
                return InstrumentalLine(segments)
            return ChordLyricsLine(segments)

        return TextLine(line)


class FrontmatterExtractor:
    """Pulls a leading '---' YAML block off the front of the source"""

    FENCE = '---'

    @staticmethod
    def extract(lines: List[str]) -> Tuple[Optional[Frontmatter], List[str]]:
        """Return (frontmatter, remaining lines); frontmatter is None if absent or invalid"""
        if not lines or lines[0].rstrip() != FrontmatterExtractor.FENCE:
            return None, lines

        closing = None
        for i in range(1, len(lines)):
            if lines[i].rstrip() == FrontmatterExtractor.FENCE:
                closing = i
                break

        if closing is None:
            return None, lines

        yaml_text = '\n'.join(lines[1:closing])
        try:
            properties = yaml.safe_load(yaml_text)
        except yaml.YAMLError as e:
            logger.warning(f"Ignoring frontmatter, YAML did not parse: {e}")
            return None, lines

        if properties is None:
            properties = {}
        if not isinstance(properties, dict):
            logger.warning(f"Ignoring frontmatter, expected a mapping but got {type(properties).__name__}")
            return None, lines

        raw = '\n'.join(lines[:closing + 1])
        return Frontmatter(properties, raw=raw), lines[closing + 1:]


class BlockSplitter:
    """Splits body lines into markdown and fenced ChordPro blocks"""

    def __init__(self, config: Optional[ChoproConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def split(self, lines: List[str]) -> list:
        blocks = []
        buffer: List[str] = []
        opening: Optional[str] = None  # set while inside a ChordPro block

        for line in lines:
            if opening is not None:
                if line.strip() == self.config.fence_close:
                    blocks.append(self._chordpro_block(opening, buffer, line))
                    buffer = []
                    opening = None
                else:
                    buffer.append(line)
            elif line.startswith(self.config.fence_open):
                if buffer:
                    blocks.append(MarkdownBlock('\n'.join(buffer)))
                buffer = []
                opening = line
            else:
                buffer.append(line)

        if opening is not None:
            blocks.append(self._chordpro_block(opening, buffer, None))
        elif buffer:
            blocks.append(MarkdownBlock('\n'.join(buffer)))

        return blocks

    @staticmethod
    def _chordpro_block(opening: str, lines: List[str], closing: Optional[str]) -> ChordProBlock:
        return ChordProBlock(
            lines=[LineClassifier.classify(line) for line in lines],
            opening=opening,
            closing=closing,
        )


def parse(source: str, config: Optional[ChoproConfig] = None) -> Document:
    """Parse chord-annotated text into a Document. Never raises."""
    lines = source.split('\n')
    frontmatter, body = FrontmatterExtractor.extract(lines)
    blocks = BlockSplitter(config).split(body)

    logger.debug(
        f"Parsed {len(blocks)} blocks "
        f"({sum(isinstance(b, ChordProBlock) for b in blocks)} chordpro), "
        f"frontmatter={'yes' if frontmatter else 'no'}"
    )
    return Document(frontmatter=frontmatter, blocks=blocks)
