"""
Settings for parsing, conversion and transposition

All heuristics live here as named, overridable values. Callers that pass no
config get DEFAULT_CONFIG.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import yaml


class MissingKeyPolicy(Enum):
    """What to do when transposition needs a source key and none is known"""
    SKIP = "skip"    # log a warning and leave the document unchanged
    RAISE = "raise"  # raise MissingKeyError


@dataclass
class ChoproConfig:
    """Tunable settings shared by the parser, converter and transposer"""
    fence_open: str = '```chopro'
    fence_close: str = '```'
    chord_line_threshold: float = 0.51
    minor_quality_marker: str = 'm'
    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.SKIP

    def __post_init__(self):
        if isinstance(self.missing_key_policy, str):
            self.missing_key_policy = MissingKeyPolicy(self.missing_key_policy)
        if not 0 < self.chord_line_threshold <= 1:
            raise ValueError(
                f'chord_line_threshold must be in (0, 1], got {self.chord_line_threshold}'
            )

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'ChoproConfig':
        """Build a config from a mapping, ignoring unknown keys."""
        data = data or {}
        kwargs = {}

        for name in ('fence_open', 'fence_close', 'minor_quality_marker'):
            if data.get(name) is not None:
                kwargs[name] = str(data[name])
        if data.get('chord_line_threshold') is not None:
            kwargs['chord_line_threshold'] = float(data['chord_line_threshold'])
        if data.get('missing_key_policy') is not None:
            kwargs['missing_key_policy'] = MissingKeyPolicy(str(data['missing_key_policy']).lower())

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> 'ChoproConfig':
        """Parse from YAML content."""
        data = yaml.safe_load(yaml_content)
        if data is not None and not isinstance(data, dict):
            raise ValueError('config YAML must be a mapping')
        return cls.from_dict(data)

    def to_yaml(self) -> str:
        """Serialize to YAML."""
        data = {
            'fence_open': self.fence_open,
            'fence_close': self.fence_close,
            'chord_line_threshold': self.chord_line_threshold,
            'minor_quality_marker': self.minor_quality_marker,
            'missing_key_policy': self.missing_key_policy.value,
        }
        return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


DEFAULT_CONFIG = ChoproConfig()
