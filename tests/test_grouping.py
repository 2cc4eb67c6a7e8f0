import logging

import pytest

from dye_profile.core.classifier import extract_group_keys, match_group_files, replicate_prefix
from dye_profile.core.validator import (
    ReplicateValidationError,
    count_replicates,
    find_incomplete_groups,
    validate_replicates,
)


FILES = [
    "W_500_R1.tif",
    "W_500_R2.tif",
    "W_500_R3.tif",
    "W_1000_R1.tif",
    "W_1000_R2.tif",
    "W_1000_R3.tif",
    "SF_500_R1.tif",
    "notes.txt",
]


class TestExtractGroupKeys:

    def test_keys_sorted_numerically(self):
        assert extract_group_keys(FILES, "W") == [500, 1000]

    def test_duplicates_collapse(self):
        assert extract_group_keys(["W_5_R1.png", "W_5_R2.png", "W_5_R1.jpg"], "W") == [5]

    def test_substring_match_ignores_surroundings(self):
        names = ["exp2_W_250_R1_final.png", "W_250_R2", "prefix-W_250_R3.tiff"]
        assert extract_group_keys(names, "W") == [250]

    def test_requires_replicate_digits(self):
        assert extract_group_keys(["W_500_R.tif", "W_500_Rx.tif", "W_abc_R1.tif"], "W") == []

    def test_other_identifier_ignored(self):
        assert extract_group_keys(["SF_500_R1.tif"], "W") == []

    def test_identifier_is_literal(self):
        assert extract_group_keys(["AxB_7_R1.png"], "A.B") == []
        assert extract_group_keys(["A.B_7_R1.png"], "A.B") == [7]


def test_match_group_files_keeps_order():
    assert replicate_prefix("W", 500) == "W_500_R"
    assert match_group_files(FILES, "W", 500) == ["W_500_R1.tif", "W_500_R2.tif", "W_500_R3.tif"]


class TestValidateReplicates:

    def test_complete_groups_pass(self):
        validate_replicates(FILES, [500, 1000], "W")

    def test_missing_replicate_fails(self, caplog):
        files = [f for f in FILES if f != "W_1000_R2.tif"]
        with caplog.at_level(logging.ERROR, logger="dye_profile"):
            with pytest.raises(ReplicateValidationError) as exc_info:
                validate_replicates(files, [500, 1000], "W")
        assert exc_info.value.failures == {1000: 2}
        assert "RPM 1000" in caplog.text

    def test_extra_file_fails(self):
        files = FILES + ["W_500_R4.tif"]
        assert find_incomplete_groups(files, [500, 1000], "W") == {500: 4}

    def test_count_is_a_loose_substring_count(self):
        # R10 and a duplicated index still count towards the total
        names = ["W_5_R1.png", "W_5_R1.jpg", "W_5_R10.png"]
        assert count_replicates(names, "W", 5) == 3
        validate_replicates(names, [5], "W")

    def test_error_carries_failures(self):
        err = ReplicateValidationError({700: 2})
        assert isinstance(err, ValueError)
        assert err.failures == {700: 2}
        assert "RPM 700" in str(err)


def test_prefix_shared_by_longer_key_is_not_counted():
    # "W_50_R" is not a substring of "W_500_R1"
    names = ["W_50_R1.png", "W_50_R2.png", "W_50_R3.png", "W_500_R1.png"]
    assert count_replicates(names, "W", 50) == 3


def test_only_ascii_digits_form_group_keys():
    names = ["W_5_R1.png", "W_٥_R1.png", "W_７_R2.png"]
    assert extract_group_keys(names, "W") == [5]


def test_validation_errors_go_to_given_logger(caplog):
    sink = logging.getLogger("test.validation.sink")
    with caplog.at_level(logging.ERROR, logger="test.validation.sink"):
        with pytest.raises(ReplicateValidationError):
            validate_replicates(["W_5_R1.png"], [5], "W", log=sink)
    assert [r.name for r in caplog.records] == ["test.validation.sink"]
