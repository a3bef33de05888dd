"""Data models for execute results."""

from .result import Column, QueryResult, QueryResults, RowSet
