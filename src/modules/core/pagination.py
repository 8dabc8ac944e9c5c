from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """``?page=N&per_page=M`` pagination shared by the list endpoints."""

    page_size = 15
    page_size_query_param = "per_page"
    max_page_size = 100
