from pathlib import Path

from sensorchart.core.ports.record_source import RecordSource


def build_record_source(url: str, timeout: float = 30.0) -> RecordSource:
    """Pick the HTTP source for http(s) URLs, the file source otherwise."""
    if url.startswith(("http://", "https://")):
        from sensorchart.adapters.sources.http_source import HttpRecordSource
        return HttpRecordSource(url=url, timeout=timeout)

    from sensorchart.adapters.sources.file_source import FileRecordSource
    return FileRecordSource(path=Path(url))
