"""Package boundary tests: the core stays backend-agnostic."""

from pytest_archon import archrule


def test_core_has_no_sqlalchemy() -> None:
    """
    Only the SQLAlchemy adapter may import SQLAlchemy.
    Parsing, serializing, validating and building conditions work without it.
    """
    (
        archrule("core_is_backend_agnostic")
        .match("cqrs_ddd_filter_params*")
        .exclude("cqrs_ddd_filter_params.adapters.sqlalchemy*")
        .should_not_import("sqlalchemy*")
        .check("cqrs_ddd_filter_params")
    )


def test_grammar_is_lowest_layer() -> None:
    """
    Types, the operator catalogue and the wire grammar must not reach up into
    the parser, serializer, query builder or adapters.
    """
    (
        archrule("grammar_isolation")
        .match("cqrs_ddd_filter_params.types")
        .match("cqrs_ddd_filter_params.operators")
        .match("cqrs_ddd_filter_params.syntax")
        .should_not_import("cqrs_ddd_filter_params.parser")
        .should_not_import("cqrs_ddd_filter_params.serializer")
        .should_not_import("cqrs_ddd_filter_params.query_builder")
        .should_not_import("cqrs_ddd_filter_params.adapters*")
        .check("cqrs_ddd_filter_params", only_direct_imports=True)
    )


def test_adapters_do_not_depend_on_builder() -> None:
    """Adapters are plugins; the query builder depends on them, never the reverse."""
    (
        archrule("adapters_isolation")
        .match("cqrs_ddd_filter_params.adapters*")
        .should_not_import("cqrs_ddd_filter_params.query_builder")
        .should_not_import("cqrs_ddd_filter_params.parser")
        .check("cqrs_ddd_filter_params", only_direct_imports=True)
    )
