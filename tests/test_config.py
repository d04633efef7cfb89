"""Tests for ChoproConfig loading and dumping."""

import pytest
from chopro import DEFAULT_CONFIG, ChoproConfig, MissingKeyPolicy


class TestDefaults:
    """Default settings"""

    def test_defaults(self):
        config = ChoproConfig()
        assert config.fence_open == '```chopro'
        assert config.fence_close == '```'
        assert config.chord_line_threshold == 0.51
        assert config.minor_quality_marker == 'm'
        assert config.missing_key_policy == MissingKeyPolicy.SKIP

    def test_default_config_matches(self):
        assert DEFAULT_CONFIG == ChoproConfig()


class TestConfigYaml:
    """Test YAML serialization round-trips."""

    def test_round_trip(self):
        config = ChoproConfig(
            fence_open='~~~song',
            fence_close='~~~',
            chord_line_threshold=0.75,
            missing_key_policy=MissingKeyPolicy.RAISE,
        )
        parsed = ChoproConfig.from_yaml(config.to_yaml())
        assert parsed == config

    def test_policy_serialized_as_value(self):
        assert 'missing_key_policy: skip' in ChoproConfig().to_yaml()

    def test_fence_characters_survive(self):
        assert ChoproConfig.from_yaml(ChoproConfig().to_yaml()).fence_open == '```chopro'

    def test_partial(self):
        config = ChoproConfig.from_yaml('chord_line_threshold: 0.6\n')
        assert config.chord_line_threshold == 0.6
        assert config.fence_open == '```chopro'

    def test_empty(self):
        assert ChoproConfig.from_yaml('') == ChoproConfig()

    def test_unknown_keys_ignored(self):
        config = ChoproConfig.from_dict({'colour': 'blue', 'missing_key_policy': 'RAISE'})
        assert config.missing_key_policy == MissingKeyPolicy.RAISE


class TestConfigErrors:
    """Invalid settings"""

    def test_bad_policy(self):
        with pytest.raises(ValueError):
            ChoproConfig.from_dict({'missing_key_policy': 'explode'})

    @pytest.mark.parametrize('threshold', [0, -0.1, 1.5])
    def test_bad_threshold(self, threshold):
        with pytest.raises(ValueError):
            ChoproConfig(chord_line_threshold=threshold)

    def test_non_mapping_yaml(self):
        with pytest.raises(ValueError):
            ChoproConfig.from_yaml('- a\n- b\n')
