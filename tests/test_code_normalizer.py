#!/usr/bin/env python3
"""
Test suite for subject / module code normalizer
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from gradestats.normalizers.code_normalizer import (
    MODULE_SUFFIXES,
    SUBJECT_SUFFIXES,
    ModuleKey,
    join_key,
    normalize_code,
    normalize_module_code,
    normalize_subject_code,
)


SAMPLE_CODES = [
    "SM102PM-2526PSA01", "SM102I-2526PSA01", "SM102P-2526PSA01", "SM102-2526PSA01",
    "UE11P", "UE13P", "UE16BN", "UE11", "SM102PI", "XPP", "ABIPM", "UEBNP",
    "P", "I", "PM", "BN", "IP", "-2526", "I-2526", "SM102-2526PSI", "A-B-C",
]


class TestCodeNormalizer:
    """Test cases for code normalization"""

    def test_group_variants_merge(self):
        """Test that section variants of one module normalize to the same code"""
        for code in ["SM102PM-2526PSA01", "SM102I-2526PSA01", "SM102-2526PSA01"]:
            assert normalize_module_code(code) == "SM102-2526PSA01"
            assert normalize_subject_code(code) == "SM102-2526PSA01"

    def test_subject_suffixes(self):
        """Test subject suffix stripping without a dash"""
        assert normalize_subject_code("UE11P") == "UE11"
        assert normalize_subject_code("UE13P") == "UE13"
        assert normalize_subject_code("UE16BN") == "UE16"
        assert normalize_subject_code("UE11") == "UE11"

    def test_bn_is_subject_only(self):
        """Test that BN is not stripped from module codes"""
        assert normalize_module_code("UE16BN") == "UE16BN"

    def test_module_code_without_dash(self):
        """Test that a code without dash is normalized as a whole"""
        assert normalize_module_code("SM102PM") == "SM102"
        assert normalize_module_code("SM102I") == "SM102"

    def test_dash_tail_untouched(self):
        """Test that only the segment before the first dash is normalized"""
        assert normalize_module_code("SM102-2526PSI") == "SM102-2526PSI"
        assert normalize_module_code("SM102P-2526-PM") == "SM102-2526-PM"

    def test_never_strips_to_empty(self):
        """Test that a suffix is kept when nothing would remain"""
        assert normalize_subject_code("P") == "P"
        assert normalize_subject_code("PM") == "PM"
        assert normalize_subject_code("BN") == "BN"
        assert normalize_module_code("I-2526") == "I-2526"

    def test_empty_input(self):
        """Test that empty input is handled gracefully"""
        assert normalize_subject_code("") == ""
        assert normalize_module_code(None) == ""

    @pytest.mark.parametrize("code", SAMPLE_CODES)
    @pytest.mark.parametrize("suffixes", [SUBJECT_SUFFIXES, MODULE_SUFFIXES])
    def test_idempotent_and_non_empty(self, code, suffixes):
        """Test that normalizing twice equals normalizing once"""
        once = normalize_code(code, suffixes)
        assert normalize_code(once, suffixes) == once
        assert once != ""

    def test_ambiguous_double_suffix_left_alone(self):
        """Test that a remainder that still carries a suffix is not stripped"""
        assert normalize_subject_code("SM102PI") == "SM102PI"
        assert normalize_subject_code("XPP") == "XPP"

    def test_module_key_label(self):
        """Test composite module key labels"""
        key = ModuleKey(normalize_subject_code("UE11P"), normalize_module_code("SM102PM-2526PSA01"))

        assert key == ModuleKey("UE11", "SM102-2526PSA01")
        assert key.label() == "UE11/-/SM102-2526PSA01"

    def test_join_key(self):
        """Test presentation labels"""
        assert join_key("Ada Lovelace", "B2") == "Ada Lovelace/-/B2"


if __name__ == "__main__":
    pytest.main([__file__])
