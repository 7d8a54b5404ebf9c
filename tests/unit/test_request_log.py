"""Tests for request id resolution and access-log levels."""

import logging

import pytest

from src.shop_gateway.middleware.request_log import log_level_for, resolve_request_id


class TestResolveRequestId:
    def test_caller_id_kept(self) -> None:
        assert resolve_request_id("req_abc.123-X") == "req_abc.123-X"

    @pytest.mark.parametrize("incoming", [None, "", "has space", "x" * 65, "semi;colon"])
    def test_generated_when_unusable(self, incoming: str | None) -> None:
        generated = resolve_request_id(incoming)

        assert generated.startswith("req_")
        assert len(generated) == 16


class TestLogLevelFor:
    @pytest.mark.parametrize(
        ("status", "level"),
        [(200, logging.INFO), (201, logging.INFO), (400, logging.WARNING), (429, logging.WARNING),
         (500, logging.ERROR), (503, logging.ERROR)],
    )
    def test_levels(self, status: int, level: int) -> None:
        assert log_level_for(status) == level
