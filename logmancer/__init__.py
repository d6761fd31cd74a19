"""Paging, tailing and regex filtering of large log files, with a terminal pager and a JSON API."""

__version__ = "0.2.0"