"""
Legacy chord-line conversion

Older song sheets put chords on their own line, aligned by column above the
lyric they belong to:

          D          G    D
    Basic chord line with lyrics.

ChordLineConverter merges each such pair into one inline-bracket line:

    Basic [D]chord line [G]with [D]lyrics.
"""

import logging
import re
from typing import List, Optional, Union

from .config import DEFAULT_CONFIG, ChoproConfig
from .document import (
    Annotation,
    BracketChord,
    ChordLyricsLine,
    ChordProBlock,
    Document,
    EmptyLine,
    IndexedSegment,
    InstrumentalLine,
    Line,
    LineSegment,
    RawChordLine,
    SegmentedLine,
    TextLine,
    TextSegment,
)
from .parser import ChordParser

logger = logging.getLogger(__name__)


class ChordLineDetector:
    """Detects lines that are mostly chord tokens"""

    TOKEN_PATTERN = re.compile(r'\S+')

    @staticmethod
    def is_chord_line(text: str, config: Optional[ChoproConfig] = None) -> bool:
        """True when at least chord_line_threshold of the words parse as chords"""
        config = config or DEFAULT_CONFIG
        words = text.split()
        if not words:
            return False

        valid = sum(1 for word in words if ChordParser.test(word))
        return valid / len(words) >= config.chord_line_threshold

    @staticmethod
    def is_lyrics_line(line: Line, config: Optional[ChoproConfig] = None) -> bool:
        """A non-blank text line that is not itself a chord line"""
        if not isinstance(line, TextLine) or not line.content.strip():
            return False
        return not ChordLineDetector.is_chord_line(line.content, config)

    @staticmethod
    def to_raw_chord_line(text: str) -> RawChordLine:
        """Tokenize a chord line, keeping each token's column"""
        tokens = []
        for match in ChordLineDetector.TOKEN_PATTERN.finditer(text):
            tokens.append(IndexedSegment(
                column=match.start(),
                text=match.group(0),
                segment=ChordLineDetector._token_segment(match.group(0)),
            ))
        return RawChordLine(text, tokens)

    @staticmethod
    def _token_segment(token: str) -> LineSegment:
        chord = ChordParser.parse(token)
        if chord is not None:
            return BracketChord(chord, source=token)
        return Annotation(token.lstrip('*'))


def is_chord_line(text: str, config: Optional[ChoproConfig] = None) -> bool:
    return ChordLineDetector.is_chord_line(text, config)


class ChordLineConverter:
    """Converts chord-over-lyrics blocks to inline bracket chords"""

    def __init__(self, config: Optional[ChoproConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def convert(self, document: Document) -> bool:
        """Convert every ChordPro block; True if anything changed"""
        changed = False
        for block in document.chordpro_blocks():
            if self.convert_block(block):
                changed = True
        return changed

    def convert_block(self, block: ChordProBlock) -> bool:
        """Convert a block in place; blocks that already use brackets are skipped"""
        if any(isinstance(line, SegmentedLine) for line in block.lines):
            return False

        new_lines = self.convert_lines(block.lines)
        merged = sum(1 for line in new_lines if isinstance(line, SegmentedLine))
        if not merged:
            return False

        block.lines = new_lines
        logger.debug(f"Combined {merged} legacy chord lines")
        return True

    def convert_lines(self, lines: List[Line]) -> List[Line]:
        new_lines = []
        i = 0

        while i < len(lines):
            line = lines[i]

            if isinstance(line, EmptyLine):
                new_lines.append(line)
                i += 1
                continue

            if isinstance(line, TextLine) and not line.content.strip():
                new_lines.append(EmptyLine(line.content))
                i += 1
                continue

            if isinstance(line, TextLine) and ChordLineDetector.is_chord_line(line.content, self.config):
                raw = ChordLineDetector.to_raw_chord_line(line.content)
                next_line = lines[i + 1] if i + 1 < len(lines) else None

                if next_line is not None and ChordLineDetector.is_lyrics_line(next_line, self.config):
                    new_lines.append(self.combine(raw, next_line))
                    i += 2
                else:
                    new_lines.append(self.combine(raw, ''))
                    i += 1
                continue

            new_lines.append(line)
            i += 1

        return new_lines

    def combine(self, chord_line: Union[TextLine, RawChordLine, str],
                lyric_line: Union[TextLine, str]) -> Line:
        """Merge a chord line into the lyric line below it"""
        if isinstance(chord_line, RawChordLine):
            raw = chord_line
        else:
            raw = ChordLineDetector.to_raw_chord_line(str(chord_line))

        lyric = str(lyric_line)

        if not raw.tokens:
            return lyric_line if isinstance(lyric_line, TextLine) else TextLine(lyric)

        chords = raw.content
        segments: List[LineSegment] = []
        lyric_idx = 0

        for n, token in enumerate(raw.tokens):
            # Lyric text up to this chord's column
            if token.column > lyric_idx and lyric[lyric_idx:token.column]:
                segments.append(TextSegment(lyric[lyric_idx:token.column]))

            segments.append(token.segment)
            lyric_idx = token.column

            # Keep the chord line's own spacing once the lyrics have run out
            if n < len(raw.tokens) - 1:
                token_end = token.column + len(token.text)
                next_start = raw.tokens[n + 1].column
                if token_end < next_start and lyric_idx >= len(lyric):
                    segments.append(TextSegment(chords[token_end:next_start]))

        if lyric_idx < len(lyric):
            segments.append(TextSegment(lyric[lyric_idx:]))
        else:
            last = raw.tokens[-1]
            trailing = chords[last.column + len(last.text):]
            if trailing:
                segments.append(TextSegment(trailing))

        if all(not isinstance(s, TextSegment) or not s.content.strip() for s in segments):
            return InstrumentalLine(segments)
        return ChordLyricsLine(segments)


def convert_legacy_chord_lines(document: Document, config: Optional[ChoproConfig] = None) -> bool:
    """Merge chord-over-lyrics line pairs in place; True if anything changed"""
    return ChordLineConverter(config).convert(document)
