"""Tests for correlation identifier generation."""

import re

from sketchctx.domain.ids import generate_request_id


class TestGenerateRequestId:
    def test_lowercase_base36(self) -> None:
        assert re.fullmatch(r"[0-9a-z]+", generate_request_id())

    def test_unique_across_many_calls(self) -> None:
        ids = {generate_request_id() for _ in range(2000)}
        assert len(ids) == 2000

    def test_has_random_suffix(self) -> None:
        assert len(generate_request_id()) > 8
