"""Tests for shared constants."""
from __future__ import annotations

from src.shared import constants


class TestConstants:
    def test_version_is_semver(self):
        assert len(constants.VERSION.split(".")) == 3

    def test_default_environment_ranks_first(self):
        assert constants.ENVIRONMENT_ORDER[constants.DEFAULT_ENVIRONMENT] == 0

    def test_unranked_after_known(self):
        assert constants.UNRANKED_ENVIRONMENT_ORDER > max(constants.ENVIRONMENT_ORDER.values())

    def test_storage_layout_names(self):
        assert constants.SERVICES_DIRNAME == "services"
        assert constants.RELATIONSHIPS_FILENAME == "relationships.json"
        assert constants.SERVICE_FILE_SUFFIX == ".json"

    def test_default_depth(self):
        assert constants.DEFAULT_GRAPH_DEPTH == 1
