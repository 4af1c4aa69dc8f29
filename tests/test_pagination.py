"""Unit tests for page parameter parsing and the pagination block."""
from smartwatt.core.pagination import MAX_LIMIT, PageParams, get_page_params, paginate


class TestPageParams:

    def test_defaults(self):
        params = get_page_params(None, None)
        assert (params.page, params.limit) == (1, 10)

    def test_junk_and_non_positive_fall_back(self):
        assert get_page_params("abc", "-5") == PageParams(page=1, limit=10)
        assert get_page_params("0", "0") == PageParams(page=1, limit=10)

    def test_limit_is_capped(self):
        assert get_page_params("2", "5000").limit == MAX_LIMIT

    def test_offset(self):
        assert PageParams(page=3, limit=10).offset == 20


class TestPaginate:

    def test_middle_page(self):
        block = paginate(["x"] * 10, 25, PageParams(page=2, limit=10))["pagination"]
        assert block == {
            "page": 2,
            "limit": 10,
            "totalCount": 25,
            "totalPages": 3,
            "hasNextPage": True,
            "hasPrevPage": True,
        }

    def test_empty(self):
        block = paginate([], 0, PageParams(page=1, limit=10))["pagination"]
        assert block["totalPages"] == 0
        assert block["hasNextPage"] is False
        assert block["hasPrevPage"] is False
