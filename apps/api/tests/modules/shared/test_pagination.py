"""
Tests for page requests and has_more strategies.
"""

import pytest

from seminar_hub.core.errors import ValidationFailedError
from seminar_hub.modules.shared.pagination import (
    ApproximateHasMore,
    LookaheadHasMore,
    PageRequest,
)


def test_page_request_defaults():
    page = PageRequest()
    assert page.limit == 50
    assert page.skip == 0


@pytest.mark.parametrize("limit", [0, -1, 101])
def test_page_request_rejects_out_of_range_limit(limit):
    with pytest.raises(ValidationFailedError) as exc_info:
        PageRequest(limit=limit)
    assert exc_info.value.error_code == "INVALID_PAGE_SIZE"


def test_page_request_rejects_negative_skip():
    with pytest.raises(ValidationFailedError) as exc_info:
        PageRequest(limit=10, skip=-5)
    assert exc_info.value.error_code == "INVALID_PAGE_SKIP"


def test_approximate_has_more_is_true_only_on_full_page():
    strategy = ApproximateHasMore()
    page = PageRequest(limit=10)

    assert strategy.fetch_size(page) == 10
    assert strategy.has_more(page, 10) is True
    assert strategy.has_more(page, 9) is False
    assert strategy.has_more(page, 0) is False


def test_lookahead_fetches_one_extra_row():
    strategy = LookaheadHasMore()
    page = PageRequest(limit=10)

    assert strategy.fetch_size(page) == 11
    assert strategy.has_more(page, 11) is True
    assert strategy.has_more(page, 10) is False
