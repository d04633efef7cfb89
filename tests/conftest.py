"""
Pytest configuration and shared fixtures
"""

import sys
from pathlib import Path

import pytest

# Add source directory to Python path for imports
REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))


@pytest.fixture
def sample_song():
    """A song with frontmatter, prose and one chordpro block"""
    return """---
title: Amazing Grace
key: C
---

Traditional hymn, play it slow.

```chopro
# Verse 1
[C]Amazing [F]grace, how [C]sweet the sound
That [C]saved a [G7]wretch like [C]me
[*Fiddle kick-off]

[C]    [F]    [G]    [C]
```

Second verse is the same."""


@pytest.fixture
def legacy_song():
    """Chords floating above lyrics, old song-sheet style"""
    return """---
key: G
---
```chopro
G              C          D
This is a test lyric line here

G               D      G
Another line of lyrics too
```"""


@pytest.fixture
def nashville_song():
    """Chords written as Nashville numbers"""
    return """---
key: "##"
---
```chopro
[1]Down in the [4]valley, the [5]valley so [1]low
[6m]Hang your head [2m7]over, hear the [5/7]wind [1]blow
```"""
