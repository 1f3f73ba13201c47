"""Unit tests for ephemeral resource naming."""

import re
from unittest.mock import patch

from storage_sample.config.models import SampleSettings
from storage_sample.naming import ResourceNames, generate_random_id


class TestGenerateRandomId:
    def test_matches_prefix_and_range(self):
        for _ in range(200):
            name = generate_random_id("testacc")
            match = re.fullmatch(r"testacc(\d+)", name)
            assert match is not None
            assert 0 <= int(match.group(1)) <= 9999

    def test_records_name_in_set(self):
        used: set[str] = set()
        name = generate_random_id("testrg", used)
        assert used == {name}

    def test_skips_names_already_used(self):
        used = {"testrg1"}
        with patch("storage_sample.naming.random.randint", side_effect=[1, 1, 2]):
            name = generate_random_id("testrg", used)
        assert name == "testrg2"
        assert used == {"testrg1", "testrg2"}

    def test_unique_within_a_run(self):
        used: set[str] = set()
        names = [generate_random_id("x", used) for _ in range(500)]
        assert len(set(names)) == 500


class TestResourceNames:
    def test_generate_uses_prefixes(self):
        names = ResourceNames.generate(SampleSettings())
        assert re.fullmatch(r"testrg\d{1,4}", names.resource_group)
        assert re.fullmatch(r"testacc\d{1,4}", names.storage_account)

    def test_generate_shares_the_run_set(self):
        settings = SampleSettings(
            resource_group_prefix="same", storage_account_prefix="same"
        )
        used: set[str] = set()
        names = ResourceNames.generate(settings, used)
        assert names.resource_group != names.storage_account
        assert used == {names.resource_group, names.storage_account}
