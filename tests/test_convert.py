"""
Tests for legacy chord-line conversion
"""

import pytest
from chopro import (
    Annotation,
    BracketChord,
    ChoproConfig,
    ChordLineConverter,
    ChordLineDetector,
    ChordLyricsLine,
    CommentLine,
    EmptyLine,
    InstrumentalLine,
    RawChordLine,
    TextLine,
    TextSegment,
    convert_legacy_chord_lines,
    is_chord_line,
    parse,
    parse_chord,
)


class TestChordLineDetector:
    """Tests for is_chord_line()"""

    @pytest.mark.parametrize('text', [
        'G   C   D',
        '      D          G    D',
        'Am7   D/F#   *Rit.',
        'G  C  hold',
        '1 4 5 1',
    ])
    def test_chord_lines(self, text):
        assert is_chord_line(text)

    @pytest.mark.parametrize('text', [
        '',
        '    ',
        'This is a test lyric line here',
        'Even if A line has G chord-like text.',
        'Closing lyrics.',
    ])
    def test_not_chord_lines(self, text):
        assert not is_chord_line(text)

    def test_threshold_is_configurable(self):
        text = 'G C hold on'
        assert not is_chord_line(text)
        assert is_chord_line(text, ChoproConfig(chord_line_threshold=0.5))

    def test_raw_chord_line_columns(self):
        raw = ChordLineDetector.to_raw_chord_line('  G    *Rit.  Am')
        assert isinstance(raw, RawChordLine)
        assert [token.column for token in raw.tokens] == [2, 7, 14]
        assert raw.tokens[0].segment == BracketChord(parse_chord('G'))
        assert raw.tokens[1].segment == Annotation('Rit.')
        assert str(raw) == '  G    *Rit.  Am'

    def test_is_lyrics_line(self):
        assert ChordLineDetector.is_lyrics_line(TextLine('Hello world'))
        assert not ChordLineDetector.is_lyrics_line(TextLine('G C D'))
        assert not ChordLineDetector.is_lyrics_line(TextLine('   '))
        assert not ChordLineDetector.is_lyrics_line(CommentLine('Verse'))


class TestCombine:
    """Tests for ChordLineConverter.combine()"""

    @pytest.mark.parametrize('chords,lyrics,expected', [
        ('      D          G    D',
         'Basic chord line with lyrics.',
         'Basic [D]chord line [G]with [D]lyrics.'),
        ('            Rit.           A7',
         'Final line, slowing to a close.',
         'Final line, [*Rit.]slowing to a cl[A7]ose.'),
        ('D',
         '  Delayed lyrics.',
         '[D]  Delayed lyrics.'),
        ('                       D  G  C',
         'Chord after all lyrics.',
         'Chord after all lyrics.[D]  [G]  [C]'),
        ('   F#     Bm',
         'Misaligned test.',
         'Mis[F#]aligned[Bm] test.'),
        ('G\t\tC    D',
         'Tabs and spaces.',
         '[G]Tab[C]s and[D] spaces.'),
        ('A#   F#m7b5   *Pause',
         'Special chords here.',
         '[A#]Speci[F#m7b5]al chords[*Pause] here.'),
    ])
    def test_combine(self, chords, lyrics, expected):
        result = ChordLineConverter().combine(TextLine(chords), TextLine(lyrics))
        assert isinstance(result, ChordLyricsLine)
        assert str(result) == expected

    def test_combine_accepts_strings(self):
        result = ChordLineConverter().combine('      D          G    D', 'Basic chord line with lyrics.')
        assert str(result) == 'Basic [D]chord line [G]with [D]lyrics.'

    def test_segments(self):
        result = ChordLineConverter().combine('  G', 'Hello world')
        assert result.segments == [
            TextSegment('He'),
            BracketChord(parse_chord('G')),
            TextSegment('llo world'),
        ]

    def test_chords_only_is_instrumental(self):
        result = ChordLineConverter().combine(TextLine('C    G    Am    F'), TextLine(''))
        assert isinstance(result, InstrumentalLine)
        assert str(result) == '[C]    [G]    [Am]    [F]'

    def test_whitespace_lyrics_is_instrumental(self):
        result = ChordLineConverter().combine(TextLine('Dm   F   C   G'), TextLine('   '))
        assert isinstance(result, InstrumentalLine)
        assert str(result) == '[Dm]   [F]   [C]   [G]'

    def test_trailing_chord_line_space(self):
        result = ChordLineConverter().combine('G   C  ', '')
        assert str(result) == '[G]   [C]  '

    @pytest.mark.parametrize('chords', ['    ', ''])
    def test_empty_chord_line_returns_lyrics(self, chords):
        lyric = TextLine('Only lyrics.')
        assert ChordLineConverter().combine(TextLine(chords), lyric) is lyric

    def test_keeps_chord_spelling(self):
        result = ChordLineConverter().combine('bes   Cis', 'Ich bin ein Lied')
        assert str(result) == '[bes]Ich bi[Cis]n ein Lied'
        assert result.chords[0] == parse_chord('Bb')

    def test_accepts_raw_chord_line(self):
        raw = ChordLineDetector.to_raw_chord_line('G     C')
        result = ChordLineConverter().combine(raw, 'Swing low, sweet')
        assert str(result) == '[G]Swing [C]low, sweet'


class TestConvertLines:
    """Tests for ChordLineConverter.convert_lines()"""

    def test_pairs_and_empty_lines(self):
        lines = [
            TextLine('C         D'),
            TextLine('  Opening lyrics.'),
            EmptyLine(),
            TextLine('        C'),
            TextLine('Closing lyrics.'),
        ]
        result = ChordLineConverter().convert_lines(lines)
        assert [str(line) for line in result] == [
            '[C]  Opening [D]lyrics.',
            '',
            'Closing [C]lyrics.',
        ]
        assert isinstance(result[1], EmptyLine)

    def test_plain_lyrics_unchanged(self):
        lines = [
            TextLine('Just a lyric line.'),
            TextLine('Even if A line has G chord-like text.'),
        ]
        assert ChordLineConverter().convert_lines(lines) == lines

    def test_consecutive_chord_lines_become_instrumentals(self):
        lines = [
            TextLine('G    C    D'),
            TextLine('Em   Am'),
            TextLine('Words to sing'),
        ]
        result = ChordLineConverter().convert_lines(lines)
        assert isinstance(result[0], InstrumentalLine)
        assert str(result[0]) == '[G]    [C]    [D]'
        assert isinstance(result[1], ChordLyricsLine)
        assert str(result[1]) == '[Em]Words[Am] to sing'

    def test_chord_line_at_end(self):
        result = ChordLineConverter().convert_lines([TextLine('Lyrics here'), TextLine('G   D')])
        assert str(result[0]) == 'Lyrics here'
        assert isinstance(result[1], InstrumentalLine)

    def test_comment_is_not_lyrics(self):
        result = ChordLineConverter().convert_lines([TextLine('G  C'), CommentLine('Chorus')])
        assert isinstance(result[0], InstrumentalLine)
        assert isinstance(result[1], CommentLine)


class TestConvertDocument:
    """Tests for convert_legacy_chord_lines()"""

    def test_converts_legacy_song(self, legacy_song):
        doc = parse(legacy_song)
        assert convert_legacy_chord_lines(doc) is True
        assert str(doc) == """---
key: G
---
```chopro
[G]This is a test [C]lyric line [D]here

[G]Another line of [D]lyrics [G]too
```"""

    def test_idempotent(self, legacy_song):
        doc = parse(legacy_song)
        convert_legacy_chord_lines(doc)
        once = str(doc)
        assert convert_legacy_chord_lines(doc) is False
        assert str(doc) == once

    def test_reparse_after_convert(self, legacy_song):
        doc = parse(legacy_song)
        convert_legacy_chord_lines(doc)
        text = str(doc)
        assert str(parse(text)) == text
        assert convert_legacy_chord_lines(parse(text)) is False

    def test_bracketed_block_untouched(self, sample_song):
        doc = parse(sample_song)
        assert convert_legacy_chord_lines(doc) is False
        assert str(doc) == sample_song

    def test_block_without_chord_lines(self):
        source = '```chopro\nJust words here\nand more words\n```'
        doc = parse(source)
        assert convert_legacy_chord_lines(doc) is False
        assert str(doc) == source

    def test_markdown_untouched(self):
        source = 'G   C   D\nOutside any block\n```chopro\nG   C\nInside the block\n```'
        doc = parse(source)
        assert convert_legacy_chord_lines(doc) is True
        assert str(doc) == 'G   C   D\nOutside any block\n```chopro\n[G]Insi[C]de the block\n```'
