"""Page metadata scraper package.

Fetches a list of URLs with bounded concurrency, extracts the page title and
meta description, and emits one record per URL.

Key modules:
    errors          -- ScraperError hierarchy (InvalidConfig, FetchExhausted, ...)
    models          -- FetchResult, PageMetadata, ResultRecord dataclasses
    durations       -- parse_duration for "10s" / "1m30s" style strings
    backoff         -- LinearBackoff for retry delays
    fetcher         -- Fetcher: one GET per URL with retries
    extractor       -- extract_metadata: title and description from HTML
    controller      -- AdmissionController for bounded task execution
    scraper         -- Scraper: dispatch loop, drain phase, output sequence
    storage         -- StorageBase and CsvStorage output sinks
    config          -- Settings loaded from the environment
    log             -- logging setup
"""
