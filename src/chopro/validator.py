"""
Validation helpers for chord-annotated documents

Provides:
1. Grammar checks - is this text a chord, key or note?
2. Structural validation - checks a parsed document for likely problems
3. Round-trip validation - confirms parse + serialize reproduces the source
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import DEFAULT_CONFIG, ChoproConfig
from .convert import ChordLineDetector
from .document import (
    Annotation,
    BracketChord,
    ChordProBlock,
    Document,
    SegmentedLine,
    TextLine,
    TextSegment,
)
from .errors import ChordFormatError
from .music import DegreeChord, LetterChord, MusicalKey, Note
from .parser import ChordParser, SegmentTokenizer, parse


def is_valid_chord(text: str) -> bool:
    """Accepts a bare chord ('Am7') or a bracketed one ('[Am7]')"""
    if text.startswith('[') and text.endswith(']'):
        text = text[1:-1]
    return bool(text) and ChordParser.test(text)


def is_valid_key(text: str) -> bool:
    return MusicalKey.is_valid(text)


def is_valid_note(text: str) -> bool:
    try:
        Note.parse(text)
    except ChordFormatError:
        return False
    return True


@dataclass
class ValidationIssue:
    """Represents a validation problem"""
    severity: str  # 'error', 'warning', 'info'
    message: str
    location: Optional[str] = None  # e.g., "block 2, line 3"


@dataclass
class ValidationResult:
    """Result of validation checks"""
    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == 'error']

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == 'warning']


class StructuralValidator:
    """Validates the structure of a parsed document"""

    @staticmethod
    def validate(document: Document, config: Optional[ChoproConfig] = None) -> ValidationResult:
        """Run all structural validation checks"""
        config = config or DEFAULT_CONFIG
        issues = []
        metrics = {}

        issues.extend(StructuralValidator._check_key(document, metrics))
        issues.extend(StructuralValidator._check_blocks(document, metrics))
        issues.extend(StructuralValidator._check_markers(document, metrics))
        issues.extend(StructuralValidator._check_notation(document, metrics, config))
        issues.extend(StructuralValidator._check_legacy_lines(document, metrics, config))

        # Valid means no errors; warnings and info are allowed
        valid = not any(issue.severity == 'error' for issue in issues)

        return ValidationResult(valid=valid, issues=issues, metrics=metrics)

    @staticmethod
    def _check_key(document: Document, metrics: Dict) -> List[ValidationIssue]:
        """Frontmatter key must follow the key grammar"""
        issues = []
        key = document.key
        metrics['has_key'] = key is not None

        if key is not None and not is_valid_key(key.strip()):
            issues.append(ValidationIssue('error', f'Invalid key in frontmatter: {key!r}', 'frontmatter'))

        return issues

    @staticmethod
    def _check_blocks(document: Document, metrics: Dict) -> List[ValidationIssue]:
        issues = []
        blocks = document.chordpro_blocks()

        metrics['block_count'] = len(document.blocks)
        metrics['chordpro_block_count'] = len(blocks)
        metrics['line_count'] = sum(len(block.lines) for block in blocks)

        for block_idx, block in enumerate(document.blocks):
            if isinstance(block, ChordProBlock) and block.closing is None:
                issues.append(ValidationIssue(
                    'warning',
                    'ChordPro block is not closed',
                    f'block {block_idx}'
                ))

        return issues

    @staticmethod
    def _check_markers(document: Document, metrics: Dict) -> List[ValidationIssue]:
        """Bracket markers that are neither chords nor annotations"""
        issues = []
        annotation_count = 0

        for block_idx, block in enumerate(document.blocks):
            if not isinstance(block, ChordProBlock):
                continue

            for line_idx, line in enumerate(block.lines):
                if not isinstance(line, SegmentedLine):
                    continue

                for segment in line.segments:
                    if isinstance(segment, Annotation):
                        annotation_count += 1
                    elif isinstance(segment, TextSegment) and SegmentTokenizer.has_marker(segment.content):
                        issues.append(ValidationIssue(
                            'warning',
                            f'Unrecognized chord marker: {segment.content}',
                            f'block {block_idx}, line {line_idx}'
                        ))

        metrics['annotation_count'] = annotation_count
        return issues

    @staticmethod
    def _check_notation(document: Document, metrics: Dict, config: ChoproConfig) -> List[ValidationIssue]:
        """Letter and Nashville chords should not be mixed"""
        issues = []
        letter = nashville = minor = 0

        for line in document.segmented_lines():
            for segment in line.segments:
                if not isinstance(segment, BracketChord):
                    continue
                if isinstance(segment.chord, LetterChord):
                    letter += 1
                elif isinstance(segment.chord, DegreeChord):
                    nashville += 1
                if segment.chord.is_minor(config.minor_quality_marker):
                    minor += 1

        metrics['letter_chords'] = letter
        metrics['nashville_chords'] = nashville
        metrics['minor_chords'] = minor

        if letter and nashville:
            issues.append(ValidationIssue(
                'warning',
                f'Mixed notation: {letter} letter chords and {nashville} Nashville chords'
            ))

        return issues

    @staticmethod
    def _check_legacy_lines(document: Document, metrics: Dict, config: ChoproConfig) -> List[ValidationIssue]:
        """Chord-over-lyrics lines that could be converted"""
        issues = []
        legacy = 0

        for block_idx, block in enumerate(document.blocks):
            if not isinstance(block, ChordProBlock):
                continue
            for line_idx, line in enumerate(block.lines):
                if isinstance(line, TextLine) and ChordLineDetector.is_chord_line(line.content, config):
                    legacy += 1
                    issues.append(ValidationIssue(
                        'info',
                        'Legacy chord line (chords above lyrics)',
                        f'block {block_idx}, line {line_idx}'
                    ))

        metrics['legacy_chord_lines'] = legacy
        return issues


class RoundTripValidator:
    """Checks that parsing then serializing reproduces the source"""

    @staticmethod
    def check(source: str, config: Optional[ChoproConfig] = None) -> ValidationResult:
        issues = []
        metrics = {}

        generated = str(parse(source, config))

        gen_lines = generated.split('\n')
        src_lines = source.split('\n')

        metrics['source_lines'] = len(src_lines)
        metrics['generated_lines'] = len(gen_lines)

        if len(gen_lines) != len(src_lines):
            issues.append(ValidationIssue(
                'warning',
                f'Line count mismatch: generated {len(gen_lines)}, source {len(src_lines)}'
            ))

        mismatches = 0
        for i, (gen_line, src_line) in enumerate(zip(gen_lines, src_lines)):
            if gen_line != src_line:
                mismatches += 1
                # Only report the first few
                if mismatches <= 5:
                    issues.append(ValidationIssue(
                        'error',
                        f'Line {i+1} mismatch',
                        f'Expected: {src_line[:50]}...\nGot: {gen_line[:50]}...'
                    ))

        metrics['line_mismatches'] = mismatches

        return ValidationResult(
            valid=generated == source,
            issues=issues,
            metrics=metrics
        )
