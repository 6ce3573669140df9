from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """``?page=`` / ``?limit=`` pagination capped at 100 rows per page."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100
