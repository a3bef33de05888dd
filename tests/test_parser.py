"""Tests for typed response parsing."""

import pytest

from exasol_ws_mcp.exceptions import MalformedResponseError
from exasol_ws_mcp.protocol.parser import (
    parse_prepared_statement,
    parse_public_key,
    parse_query_results,
    parse_session_info,
)


def test_parse_public_key():
    """Modulus and exponent are kept as hex strings."""
    key = parse_public_key({"publicKeyModulus": "C0FFEE", "publicKeyExponent": "010001"})
    assert key.public_key_modulus == "C0FFEE"
    assert key.public_key_exponent == "010001"


def test_parse_public_key_missing_field():
    """A login reply without the modulus is malformed."""
    with pytest.raises(MalformedResponseError):
        parse_public_key({"publicKeyExponent": "010001"})


def test_parse_session_info():
    """Session id and metadata are read from the auth reply."""
    info = parse_session_info({"sessionId": 123, "databaseName": "DB", "releaseVersion": "7.1"})
    assert info.session_id == 123
    assert info.database_name == "DB"
    assert info.to_dict()["release_version"] == "7.1"


def test_parse_session_info_requires_id():
    """An auth reply without a session id is malformed."""
    with pytest.raises(MalformedResponseError):
        parse_session_info({"databaseName": "DB"})
    with pytest.raises(MalformedResponseError):
        parse_session_info({"sessionId": "abc"})


def test_parse_prepared_statement():
    """Handle and parameter columns are read."""
    prepared = parse_prepared_statement({
        "statementHandle": 5,
        "parameterData": {
            "numColumns": 2,
            "columns": [
                {"name": "A", "dataType": {"type": "DECIMAL"}},
                {"name": "B", "dataType": {"type": "VARCHAR", "size": 10}},
            ],
        },
    })
    assert prepared.statement_handle == 5
    assert prepared.num_columns == 2
    assert [c.name for c in prepared.columns] == ["A", "B"]
    assert prepared.columns[1].type_name == "VARCHAR"


def test_parse_prepared_without_parameters():
    """A statement without parameters has no columns."""
    prepared = parse_prepared_statement({"statementHandle": 1})
    assert prepared.columns == []
    assert prepared.num_columns == 0


def test_parse_mixed_results():
    """Row and row-count results are told apart."""
    results = parse_query_results({
        "numResults": 2,
        "results": [
            {"resultType": "rowCount", "rowCount": 3},
            {
                "resultType": "resultSet",
                "resultSet": {
                    "numColumns": 2,
                    "numRows": 2,
                    "numRowsInMessage": 2,
                    "columns": [{"name": "A"}, {"name": "B"}],
                    "data": [[1, 2], ["x", "y"]],
                },
            },
        ],
    })
    assert results.num_results == 2
    assert results.results[0].row_count == 3
    row_set = results.results[1].row_set
    assert row_set.column_names == ["A", "B"]
    assert row_set.rows() == [(1, "x"), (2, "y")]
    assert row_set.complete


def test_parse_results_zero_is_malformed():
    """Zero results is malformed, not an empty success."""
    with pytest.raises(MalformedResponseError):
        parse_query_results({"numResults": 0, "results": []})
    with pytest.raises(MalformedResponseError):
        parse_query_results({})


def test_parse_results_count_mismatch():
    """numResults must match the result list."""
    with pytest.raises(MalformedResponseError):
        parse_query_results({"numResults": 2, "results": [{"resultType": "rowCount", "rowCount": 1}]})


def test_parse_results_unknown_type():
    """Unknown result types are malformed."""
    with pytest.raises(MalformedResponseError):
        parse_query_results({"numResults": 1, "results": [{"resultType": "mystery"}]})


def test_incomplete_result_set():
    """A handle with more rows than the message carries is flagged incomplete."""
    results = parse_query_results({
        "numResults": 1,
        "results": [{
            "resultType": "resultSet",
            "resultSet": {
                "resultSetHandle": 8,
                "numColumns": 1,
                "numRows": 5000,
                "numRowsInMessage": 1000,
                "columns": [{"name": "A"}],
                "data": [list(range(1000))],
            },
        }],
    })
    row_set = results.first().row_set
    assert row_set.result_set_handle == 8
    assert not row_set.complete
