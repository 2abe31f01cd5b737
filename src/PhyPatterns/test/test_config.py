"""
Tests for SitePatternsConfig.

Run with: pytest src/PhyPatterns/test/test_config.py -v
"""

import pytest
from PhyPatterns.Compression import CompressionType
from PhyPatterns.Config import ConfigError, SitePatternsConfig, parse_compression


class TestSitePatternsConfig:

    def test_defaults(self):
        config = SitePatternsConfig()
        assert config.compression is CompressionType.UNIQUE_ONLY
        assert config.ambiguity_threshold == 0.25
        assert config.strip
        assert config.taxa is None
        assert config.constant_site_counts is None

    def test_from_dict(self):
        config = SitePatternsConfig.from_dict({"taxa" : ["t1", "t2"],
                                               "from" : 2,
                                               "to" : 5,
                                               "every" : 3,
                                               "strip" : False,
                                               "compression" :
                                                   "ambiguous_constant",
                                               "ambiguityThreshold" : 0.5,
                                               "constantPatterns" : [1, 2, 3, 4]})
        assert config.taxa == ("t1", "t2")
        assert config.from_site == 2
        assert config.to_site == 5
        assert config.every == 3
        assert not config.strip
        assert config.compression is CompressionType.AMBIGUOUS_CONSTANT
        assert config.ambiguity_threshold == 0.5
        assert config.constant_site_counts == (1, 2, 3, 4)

    def test_from_dict_field_names(self):
        config = SitePatternsConfig.from_dict({"from_site" : 1,
                                               "compression" : "UNCOMPRESSED"})
        assert config.from_site == 1
        assert config.compression is CompressionType.UNCOMPRESSED

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            SitePatternsConfig.from_dict({"stride" : 2})

    def test_bad_threshold(self):
        with pytest.raises(ConfigError):
            SitePatternsConfig(ambiguity_threshold = 1.0)
        with pytest.raises(ConfigError):
            SitePatternsConfig(ambiguity_threshold = -0.1)

    def test_bad_compression(self):
        with pytest.raises(ConfigError):
            parse_compression("zip")

    def test_frozen(self):
        config = SitePatternsConfig()
        with pytest.raises(AttributeError):
            config.strip = False


class TestSiteRange:

    def test_whole_alignment(self):
        assert list(SitePatternsConfig().site_range(4)) == [0, 1, 2, 3]

    def test_inclusive_end_and_stride(self):
        config = SitePatternsConfig(from_site = 1, to_site = 7, every = 3)
        assert list(config.site_range(10)) == [1, 4, 7]

    def test_non_positive_stride(self):
        config = SitePatternsConfig(every = 0)
        assert list(config.site_range(3)) == [0, 1, 2]

    def test_end_past_last_site(self):
        config = SitePatternsConfig(to_site = 10)
        assert list(config.site_range(3)) == [0, 1, 2]

    def test_start_past_last_site(self):
        config = SitePatternsConfig(from_site = 5)
        assert list(config.site_range(3)) == []
