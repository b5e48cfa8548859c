from .media import (
    PROVIDER_PAGE_CEILING,
    BrowseMode,
    Catalog,
    DetailRecord,
    MediaKind,
    ProviderPage,
    ResultItem,
    ResultPage,
    WatchPage,
    build_result_page,
    filter_results,
)
from .preferences import DEFAULT_THEME, Theme
from .query import (
    FETCH_ERROR_MESSAGE,
    CoordinatorPhase,
    CoordinatorView,
    QueryMode,
    QueryState,
    RequestToken,
)

__all__ = [
    "BrowseMode",
    "Catalog",
    "CoordinatorPhase",
    "CoordinatorView",
    "DEFAULT_THEME",
    "DetailRecord",
    "FETCH_ERROR_MESSAGE",
    "MediaKind",
    "PROVIDER_PAGE_CEILING",
    "ProviderPage",
    "QueryMode",
    "QueryState",
    "RequestToken",
    "ResultItem",
    "ResultPage",
    "Theme",
    "WatchPage",
    "build_result_page",
    "filter_results",
]
