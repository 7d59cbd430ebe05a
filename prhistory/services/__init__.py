from prhistory.services.pr_fetcher import FetchResult, PRFetchError, PRFetcher
from prhistory.services.pr_history import PRHistoryService

__all__ = ["FetchResult", "PRFetchError", "PRFetcher", "PRHistoryService"]
